"""Pytest configuration for pg-schema-discovery tests.

This module provides global pytest configuration and custom warning filters.
"""

import warnings

# DiscoveryOptions declares a 'schema' field, which pydantic reports as
# shadowing the deprecated BaseModel.schema attribute
warnings.filterwarnings(
    "ignore",
    message=r".*Field name \"schema\".*shadows an attribute.*",
    category=UserWarning,
)
