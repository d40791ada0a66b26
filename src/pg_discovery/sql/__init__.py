"""Catalog SQL construction."""

from .builders import (
    DiscoveryQuery,
    query_columns,
    query_exported_foreign_keys,
    query_foreign_keys,
    query_primary_keys,
    query_tables,
    query_views,
)
from .pagination import paginate

__all__ = [
    "DiscoveryQuery",
    "paginate",
    "query_tables",
    "query_views",
    "query_columns",
    "query_primary_keys",
    "query_foreign_keys",
    "query_exported_foreign_keys",
]
