"""SQL builders for information_schema discovery queries.

Every builder is a pure function returning a :class:`DiscoveryQuery`. Owner
and table names are always passed as bound parameters (``:owner``,
``:table``) and never spliced into the SQL text.
"""

from typing import Any, NamedTuple, Optional

from pg_discovery.models.options import DiscoveryOptions
from pg_discovery.sql.pagination import paginate


class DiscoveryQuery(NamedTuple):
    """SQL text plus its bound parameters."""

    sql: str
    params: dict[str, Any]


def _where(clauses: list[str]) -> str:
    return " WHERE " + " AND ".join(clauses) if clauses else ""


def _query_relations(
    kind: str, catalog: str, options: DiscoveryOptions, base_filter: Optional[str]
) -> DiscoveryQuery:
    owner = options.resolved_owner
    clauses = [base_filter] if base_filter else []
    params: dict[str, Any] = {}

    if options.all and not owner:
        owner_expr = "table_schema"
        order_by = "table_schema, table_name"
    elif owner:
        owner_expr = "table_schema"
        clauses.append("table_schema = :owner")
        params["owner"] = owner
        order_by = "table_schema, table_name"
    else:
        owner_expr = "current_schema()"
        clauses.append("table_schema = current_schema()")
        order_by = "table_name"

    sql = (
        f"SELECT '{kind}' AS \"type\", table_name AS \"name\","
        f' {owner_expr} AS "owner"'
        f" FROM {catalog}" + _where(clauses)
    )
    return DiscoveryQuery(paginate(sql, order_by, options), params)


def query_tables(options: DiscoveryOptions) -> DiscoveryQuery:
    """Build the query listing tables."""
    return _query_relations(
        "table", "information_schema.tables", options, "table_type = 'BASE TABLE'"
    )


def query_views(options: DiscoveryOptions) -> Optional[DiscoveryQuery]:
    """Build the query listing views, or None when views were not requested."""
    if not options.views:
        return None
    return _query_relations("view", "information_schema.views", options, None)


def query_columns(owner: Optional[str], table: Optional[str]) -> DiscoveryQuery:
    """Build the query listing the columns of a table (or of all tables)."""
    clauses = []
    params: dict[str, Any] = {}
    if owner:
        clauses.append("table_schema = :owner")
        params["owner"] = owner
    if table:
        clauses.append("table_name = :table")
        params["table"] = table

    sql = (
        'SELECT table_schema AS "owner", table_name AS "tableName",'
        ' column_name AS "columnName", data_type AS "dataType",'
        ' character_octet_length AS "dataLength",'
        ' numeric_precision AS "dataPrecision", numeric_scale AS "dataScale",'
        ' is_nullable AS "nullable"'
        " FROM information_schema.columns" + _where(clauses)
    )
    return DiscoveryQuery(paginate(sql, "table_name, ordinal_position", None), params)


def query_primary_keys(owner: Optional[str], table: Optional[str]) -> DiscoveryQuery:
    """Build the query listing primary key columns, in key order."""
    clauses = ["tc.constraint_type = 'PRIMARY KEY'"]
    params: dict[str, Any] = {}
    if owner:
        clauses.append("kc.table_schema = :owner")
        params["owner"] = owner
    if table:
        clauses.append("kc.table_name = :table")
        params["table"] = table

    sql = (
        'SELECT kc.table_schema AS "owner", kc.table_name AS "tableName",'
        ' kc.column_name AS "columnName", kc.ordinal_position AS "keySeq",'
        ' kc.constraint_name AS "pkName"'
        " FROM information_schema.key_column_usage kc"
        " JOIN information_schema.table_constraints tc"
        " ON tc.constraint_schema = kc.constraint_schema"
        " AND tc.constraint_name = kc.constraint_name"
        " AND tc.table_name = kc.table_name"
        + _where(clauses)
        + " ORDER BY kc.table_schema, kc.constraint_name, kc.table_name,"
        " kc.ordinal_position"
    )
    return DiscoveryQuery(sql, params)


# fk: the referencing key columns; pk: the referenced unique/primary key
# columns, matched by position within the referenced constraint.
_FOREIGN_KEY_SELECT = (
    'SELECT fk.table_schema AS "fkOwner", fk.constraint_name AS "fkName",'
    ' fk.table_name AS "fkTableName", fk.column_name AS "fkColumnName",'
    ' fk.ordinal_position AS "keySeq",'
    ' pk.table_schema AS "pkOwner", rc.unique_constraint_name AS "pkName",'
    ' pk.table_name AS "pkTableName", pk.column_name AS "pkColumnName"'
    " FROM information_schema.key_column_usage fk"
    " JOIN information_schema.referential_constraints rc"
    " ON rc.constraint_schema = fk.constraint_schema"
    " AND rc.constraint_name = fk.constraint_name"
    " JOIN information_schema.key_column_usage pk"
    " ON pk.constraint_schema = rc.unique_constraint_schema"
    " AND pk.constraint_name = rc.unique_constraint_name"
    " AND pk.ordinal_position = fk.position_in_unique_constraint"
)


def _foreign_key_query(
    side: str, owner: Optional[str], table: Optional[str], order_by: str
) -> DiscoveryQuery:
    clauses = ["fk.position_in_unique_constraint IS NOT NULL"]
    params: dict[str, Any] = {}
    if owner:
        clauses.append(f"{side}.table_schema = :owner")
        params["owner"] = owner
    if table:
        clauses.append(f"{side}.table_name = :table")
        params["table"] = table
    return DiscoveryQuery(
        _FOREIGN_KEY_SELECT + _where(clauses) + f" ORDER BY {order_by}", params
    )


def query_foreign_keys(owner: Optional[str], table: Optional[str]) -> DiscoveryQuery:
    """Build the query for foreign keys declared on a table."""
    return _foreign_key_query(
        "fk",
        owner,
        table,
        "fk.table_schema, fk.table_name, fk.constraint_name, fk.ordinal_position",
    )


def query_exported_foreign_keys(
    owner: Optional[str], table: Optional[str]
) -> DiscoveryQuery:
    """Build the query for foreign keys in other tables that reference a table."""
    return _foreign_key_query(
        "pk",
        owner,
        table,
        "pk.table_schema, pk.table_name, fk.ordinal_position",
    )
