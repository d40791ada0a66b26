"""
pg_discovery - PostgreSQL schema discovery

Discovers tables, views, columns, primary keys and foreign keys from a
PostgreSQL information_schema catalog and maps native column types to
portable value types.
"""

__version__ = "1.0.0"

from .errors import DiscoveryError, InvalidArgument, QueryError
from .models import (
    ColumnDescriptor,
    DatabaseConfig,
    DiscoveryOptions,
    ForeignKeyDescriptor,
    PrimaryKeyDescriptor,
    TableDescriptor,
)
from .types import PortableType, map_type

__all__ = [
    "DatabaseConfig",
    "DiscoveryOptions",
    "TableDescriptor",
    "ColumnDescriptor",
    "PrimaryKeyDescriptor",
    "ForeignKeyDescriptor",
    "PortableType",
    "map_type",
    "DiscoveryError",
    "InvalidArgument",
    "QueryError",
]
