"""Entry point for running pg_discovery as a module."""

from pg_discovery.server import cli_entry

if __name__ == "__main__":
    cli_entry()
