"""Utility modules for schema discovery."""

from pg_discovery.utils.serialization import (
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
    dumps,
)

__all__ = [
    "convert_value_to_json_safe",
    "convert_rows_to_json_safe",
    "dumps",
]
