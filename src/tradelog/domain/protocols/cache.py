"""Query cache protocol."""

from typing import Protocol

__all__ = ["QueryInvalidator"]


class QueryInvalidator(Protocol):
    """Protocol for the client-side query cache.

    The connection manager only needs to mark every cached query stale once a
    new actor is ready, so dependent reads refetch against it.
    """

    def invalidate_all(self) -> None:
        """Mark every cached query result as stale."""
        ...
