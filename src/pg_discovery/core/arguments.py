"""Normalization of the ``(table, options, callback)`` call shape."""

from typing import Any, Callable, Mapping, NamedTuple, Optional, Union

from pydantic import ValidationError

from pg_discovery.errors import InvalidArgument
from pg_discovery.models.options import DiscoveryOptions

Callback = Callable[[Optional[BaseException], Optional[list]], Any]
OptionsArg = Union[DiscoveryOptions, Mapping[str, Any], Callback, None]


class DiscoveryArgs(NamedTuple):
    """Resolved arguments of a per-table discovery call."""

    owner: Optional[str]
    table: str
    options: DiscoveryOptions
    callback: Optional[Callback]


def normalize_options(
    options: OptionsArg = None, callback: Optional[Callback] = None
) -> tuple[DiscoveryOptions, Optional[Callback]]:
    """
    Resolve options and callback.

    A callable passed in the options position is taken as the callback when
    no explicit callback was given.

    Raises:
        InvalidArgument: If options is not a mapping or fails validation
    """
    if callback is None and callable(options):
        callback = options
        options = None

    if options is None:
        return DiscoveryOptions(), callback
    if isinstance(options, DiscoveryOptions):
        return options, callback
    if not isinstance(options, Mapping):
        raise InvalidArgument(f"options must be a mapping: {options!r}")

    try:
        return DiscoveryOptions.model_validate(dict(options)), callback
    except ValidationError as e:
        raise InvalidArgument(f"Invalid discovery options: {e}") from e


def normalize_args(
    table: Any, options: OptionsArg = None, callback: Optional[Callback] = None
) -> DiscoveryArgs:
    """
    Validate and default the arguments of a per-table discovery call.

    Args:
        table: Table name, required non-empty string
        options: Discovery options, or the callback when no options are given
        callback: Completion callback for async calls

    Returns:
        Resolved owner, table, options and callback

    Raises:
        InvalidArgument: If table is not a non-empty string or options is invalid
    """
    if not isinstance(table, str) or not table:
        raise InvalidArgument(f"table is a required string argument: {table!r}")

    opts, callback = normalize_options(options, callback)
    return DiscoveryArgs(
        owner=opts.resolved_owner,
        table=table,
        options=opts,
        callback=callback,
    )
