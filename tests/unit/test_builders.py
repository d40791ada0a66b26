"""Unit Tests for catalog query builders

Validates:
- Owner and table filter clauses appear exactly when the value is given
- Values are bound parameters, never part of the SQL text
- Ordering of each builder
- Exported foreign keys filter the referenced side
"""

import pytest

from pg_discovery.models.options import DiscoveryOptions
from pg_discovery.sql import (
    query_columns,
    query_exported_foreign_keys,
    query_foreign_keys,
    query_primary_keys,
    query_tables,
    query_views,
)

OWNER_TABLE_CASES = [
    ("sales", "orders"),
    ("sales", None),
    (None, "orders"),
    (None, None),
]


class TestRelationQueries:
    """Tables and views listing."""

    def test_tables_for_owner(self):
        query = query_tables(DiscoveryOptions(owner="sales"))
        assert "FROM information_schema.tables" in query.sql
        assert "table_schema = :owner" in query.sql
        assert query.params == {"owner": "sales"}
        assert query.sql.endswith("ORDER BY table_schema, table_name")

    def test_schema_is_owner_synonym(self):
        query = query_tables(DiscoveryOptions(schema="sales"))
        assert "table_schema = :owner" in query.sql
        assert query.params == {"owner": "sales"}

    def test_tables_all_schemas(self):
        query = query_tables(DiscoveryOptions(all=True))
        assert ":owner" not in query.sql
        assert "current_schema()" not in query.sql
        assert 'table_schema AS "owner"' in query.sql
        assert query.params == {}

    def test_owner_takes_precedence_over_all(self):
        query = query_tables(DiscoveryOptions(all=True, owner="sales"))
        assert "table_schema = :owner" in query.sql

    def test_tables_current_schema(self):
        query = query_tables(DiscoveryOptions())
        assert "table_schema = current_schema()" in query.sql
        assert 'current_schema() AS "owner"' in query.sql
        assert query.sql.endswith("ORDER BY table_name")
        assert query.params == {}

    def test_tables_exclude_views(self):
        query = query_tables(DiscoveryOptions())
        assert "table_type = 'BASE TABLE'" in query.sql
        assert "'table' AS \"type\"" in query.sql

    def test_tables_paginated(self):
        query = query_tables(DiscoveryOptions(owner="sales", offset=10, limit=5))
        assert query.sql.endswith("ORDER BY table_schema, table_name OFFSET 10 LIMIT 5")

    def test_views_only_when_requested(self):
        assert query_views(DiscoveryOptions()) is None
        assert query_views(DiscoveryOptions(owner="sales")) is None

    def test_views_for_owner(self):
        query = query_views(DiscoveryOptions(views=True, owner="sales"))
        assert query is not None
        assert "FROM information_schema.views" in query.sql
        assert "'view' AS \"type\"" in query.sql
        assert query.params == {"owner": "sales"}


class TestColumnQuery:
    """Column listing."""

    @pytest.mark.parametrize("owner,table", OWNER_TABLE_CASES)
    def test_filter_clauses(self, owner, table):
        """Owner clause iff owner given; table clause iff table given."""
        query = query_columns(owner, table)
        assert ("table_schema = :owner" in query.sql) == bool(owner)
        assert ("table_name = :table" in query.sql) == bool(table)
        assert ("owner" in query.params) == bool(owner)
        assert ("table" in query.params) == bool(table)

    def test_selected_columns(self):
        query = query_columns("sales", "orders")
        for alias in (
            '"owner"',
            '"tableName"',
            '"columnName"',
            '"dataType"',
            '"dataLength"',
            '"dataPrecision"',
            '"dataScale"',
            '"nullable"',
        ):
            assert alias in query.sql
        assert "character_octet_length" in query.sql

    def test_ordering(self):
        query = query_columns("sales", "orders")
        assert query.sql.endswith("ORDER BY table_name, ordinal_position")

    def test_values_are_bound(self):
        owner = "x' OR '1'='1"
        table = "t'; DROP TABLE users; --"
        query = query_columns(owner, table)
        assert owner not in query.sql
        assert table not in query.sql
        assert query.params == {"owner": owner, "table": table}


class TestPrimaryKeyQuery:
    """Primary key listing."""

    @pytest.mark.parametrize("owner,table", OWNER_TABLE_CASES)
    def test_filter_clauses(self, owner, table):
        query = query_primary_keys(owner, table)
        assert ("kc.table_schema = :owner" in query.sql) == bool(owner)
        assert ("kc.table_name = :table" in query.sql) == bool(table)

    def test_restricted_to_primary_keys(self):
        query = query_primary_keys(None, "orders")
        assert "tc.constraint_type = 'PRIMARY KEY'" in query.sql

    def test_ordering(self):
        """Rows ordered by owner, constraint name, table name, key sequence."""
        query = query_primary_keys("sales", "orders")
        assert query.sql.endswith(
            "ORDER BY kc.table_schema, kc.constraint_name, kc.table_name,"
            " kc.ordinal_position"
        )


class TestForeignKeyQueries:
    """Imported and exported foreign key listing."""

    @pytest.mark.parametrize("owner,table", OWNER_TABLE_CASES)
    def test_foreign_key_filters_local_side(self, owner, table):
        query = query_foreign_keys(owner, table)
        assert ("fk.table_schema = :owner" in query.sql) == bool(owner)
        assert ("fk.table_name = :table" in query.sql) == bool(table)
        assert "pk.table_schema = :owner" not in query.sql
        assert "pk.table_name = :table" not in query.sql

    @pytest.mark.parametrize("owner,table", OWNER_TABLE_CASES)
    def test_exported_filters_referenced_side(self, owner, table):
        query = query_exported_foreign_keys(owner, table)
        assert ("pk.table_schema = :owner" in query.sql) == bool(owner)
        assert ("pk.table_name = :table" in query.sql) == bool(table)
        assert "fk.table_schema = :owner" not in query.sql
        assert "fk.table_name = :table" not in query.sql

    def test_imported_and_exported_differ_for_distinct_tables(self):
        """orders references customers: each builder filters its own side."""
        imported = query_foreign_keys("sales", "orders")
        exported = query_exported_foreign_keys("sales", "customers")

        assert imported.params == {"owner": "sales", "table": "orders"}
        assert exported.params == {"owner": "sales", "table": "customers"}
        assert "fk.table_name = :table" in imported.sql
        assert "pk.table_name = :table" in exported.sql
        assert imported.sql != exported.sql

    def test_only_unique_constraint_references(self):
        for query in (
            query_foreign_keys(None, "orders"),
            query_exported_foreign_keys(None, "customers"),
        ):
            assert "fk.position_in_unique_constraint IS NOT NULL" in query.sql
            assert "information_schema.referential_constraints" in query.sql

    def test_foreign_key_ordering(self):
        query = query_foreign_keys("sales", "orders")
        assert query.sql.endswith(
            "ORDER BY fk.table_schema, fk.table_name, fk.constraint_name,"
            " fk.ordinal_position"
        )

    def test_exported_ordering(self):
        query = query_exported_foreign_keys("sales", "customers")
        assert query.sql.endswith(
            "ORDER BY pk.table_schema, pk.table_name, fk.ordinal_position"
        )

    def test_descriptor_aliases(self):
        query = query_foreign_keys("sales", "orders")
        for alias in (
            '"fkOwner"',
            '"fkName"',
            '"fkTableName"',
            '"fkColumnName"',
            '"keySeq"',
            '"pkOwner"',
            '"pkName"',
            '"pkTableName"',
            '"pkColumnName"',
        ):
            assert alias in query.sql
