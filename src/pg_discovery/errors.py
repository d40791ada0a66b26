"""Exception types raised by schema discovery."""

from typing import Optional


class DiscoveryError(Exception):
    """Base class for all schema discovery errors."""


class InvalidArgument(DiscoveryError, ValueError):
    """Raised when a table name or discovery options are malformed.

    Always raised before any query is issued, in both sync and async mode.
    """


class QueryError(DiscoveryError):
    """A catalog query failed in the executor.

    Wraps the driver/SQLAlchemy exception so callers only have to handle one
    error type. The original exception is kept on ``original`` and chained
    as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        original: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.sql = sql
        self.original = original

    @classmethod
    def from_exception(cls, exc: BaseException, sql: Optional[str] = None) -> "QueryError":
        """Build a QueryError from a driver exception."""
        return cls(f"{type(exc).__name__}: {exc}", sql=sql, original=exc)
