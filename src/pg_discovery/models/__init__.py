"""Pydantic models for configuration, options and discovery results."""

from .config import DatabaseConfig
from .descriptors import (
    ColumnDescriptor,
    ForeignKeyDescriptor,
    PrimaryKeyDescriptor,
    TableDescriptor,
)
from .options import DiscoveryOptions

__all__ = [
    "DatabaseConfig",
    "DiscoveryOptions",
    "TableDescriptor",
    "ColumnDescriptor",
    "PrimaryKeyDescriptor",
    "ForeignKeyDescriptor",
]
