"""Core discovery layer: argument handling, connection, execution."""

from .arguments import DiscoveryArgs, normalize_args, normalize_options
from .connection import DatabaseConnection
from .discovery import PostgresDiscoverer, RowExecutor, SchemaDiscoverer
from .executor import QueryExecutor

__all__ = [
    "DatabaseConnection",
    "DiscoveryArgs",
    "PostgresDiscoverer",
    "QueryExecutor",
    "RowExecutor",
    "SchemaDiscoverer",
    "normalize_args",
    "normalize_options",
]
