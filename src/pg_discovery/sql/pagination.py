"""ORDER BY / OFFSET / LIMIT handling for catalog queries."""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from pg_discovery.errors import InvalidArgument
from pg_discovery.models.options import DiscoveryOptions

OptionsLike = Union[DiscoveryOptions, Mapping[str, Any], None]


def _as_options(options: OptionsLike) -> DiscoveryOptions:
    if options is None:
        return DiscoveryOptions()
    if isinstance(options, DiscoveryOptions):
        return options
    try:
        return DiscoveryOptions.model_validate(dict(options))
    except (TypeError, ValueError, ValidationError) as e:
        raise InvalidArgument(f"Invalid pagination options: {e}") from e


def paginate(sql: str, order_by: Optional[str], options: OptionsLike = None) -> str:
    """
    Append ordering and paging clauses to a query.

    ORDER BY is added whenever ``order_by`` is non-empty and always precedes
    the paging clauses. OFFSET is added when any of offset, skip or limit is
    set; LIMIT only when limit is set.

    Args:
        sql: Base SELECT statement
        order_by: Comma-separated column list, or None for no ordering
        options: Discovery options carrying offset/skip/limit

    Returns:
        SQL with the clauses appended
    """
    opts = _as_options(options)

    if order_by:
        sql += f" ORDER BY {order_by}"

    if opts.paginated:
        # Offsets start from 0; values are validated non-negative ints
        sql += f" OFFSET {int(opts.start)}"
        if opts.limit:
            sql += f" LIMIT {int(opts.limit)}"

    return sql
