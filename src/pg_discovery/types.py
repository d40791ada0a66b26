"""Mapping of native column types to portable value types."""

from enum import Enum
from typing import Optional


class PortableType(str, Enum):
    """Database-independent value types reported for columns."""

    STRING = "String"
    BOOLEAN = "Boolean"
    BINARY = "Binary"
    NUMBER = "Number"
    DATE = "Date"


# Fixed-width character types; a single-byte column is treated as a flag.
CHAR_TYPES = frozenset({"char", "character", "bpchar"})

TYPE_MAP: dict[str, PortableType] = {}


def _register(portable: PortableType, *names: str) -> None:
    for name in names:
        TYPE_MAP[name] = portable


# Names inherited from the MySQL-style catalog vocabulary
_register(
    PortableType.STRING,
    "varchar", "tinytext", "mediumtext", "longtext", "text", "enum", "set",
)
_register(
    PortableType.BINARY,
    "tinyblob", "mediumblob", "longblob", "blob", "binary", "varbinary", "bit",
)
_register(
    PortableType.NUMBER,
    "tinyint", "smallint", "int", "mediumint", "year", "float", "double",
)
_register(PortableType.DATE, "date", "timestamp", "datetime")

# PostgreSQL information_schema.columns.data_type values and udt aliases
_register(
    PortableType.STRING,
    "character varying", "name", "citext", "uuid", "json", "jsonb", "xml",
    '"char"', "interval", "time", "time without time zone",
    "time with time zone", "timetz",
)
_register(PortableType.BOOLEAN, "boolean", "bool")
_register(PortableType.BINARY, "bytea", "bit varying", "varbit")
_register(
    PortableType.NUMBER,
    "integer", "bigint", "int2", "int4", "int8",
    "smallserial", "serial", "bigserial", "serial2", "serial4", "serial8",
    "numeric", "decimal", "real", "double precision", "float4", "float8",
    "money", "oid",
)
_register(
    PortableType.DATE,
    "timestamp without time zone", "timestamp with time zone", "timestamptz",
)


def map_type(native_type: Optional[str], data_length: Optional[int] = None) -> PortableType:
    """
    Map a native column type name to a portable type.

    Matching is case-insensitive and total: unknown or missing type names
    map to ``PortableType.STRING``.

    Args:
        native_type: Type name as reported by the catalog (e.g. ``integer``)
        data_length: Column byte length, used to tell ``CHAR(1)`` flags apart

    Returns:
        Portable type
    """
    if not native_type:
        return PortableType.STRING

    name = native_type.strip().lower()
    if name in CHAR_TYPES:
        return PortableType.BOOLEAN if data_length == 1 else PortableType.STRING

    return TYPE_MAP.get(name, PortableType.STRING)
