"""In-memory query cache.

Stores the results of backend reads by query key. Invalidation marks entries
stale instead of dropping them, so readers can keep showing the last value
while a refetch against the new actor is in progress.
"""

from dataclasses import dataclass, field
import time
from typing import Any, Awaitable, Callable, Hashable, Optional

from tradelog.logger import get_logger

logger = get_logger("cache.memory")

QueryKey = Hashable


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False
    updated_at: float = field(default_factory=time.time)


class QueryCache:
    """Simple in-memory query cache with stale tracking.

    Example:
        >>> cache = QueryCache()
        >>> cache.set(("trades",), [])
        >>> cache.is_stale(("trades",))
        False
        >>> cache.invalidate_all()
        >>> cache.is_stale(("trades",))
        True
    """

    def __init__(self) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}

    def get(self, key: QueryKey) -> Any | None:
        """Get a cached value (stale or not), or None."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: QueryKey, value: Any) -> None:
        """Store a fresh value for ``key``."""
        self._entries[key] = CacheEntry(value=value)

    def clear(self, key: QueryKey | None = None) -> None:
        """Clear cache entries.

        Args:
            key: If provided, clear only this key. If None, clear all entries.
        """
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def is_stale(self, key: QueryKey) -> bool:
        """True when ``key`` is missing or has been invalidated."""
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def invalidate(self, key: QueryKey) -> None:
        entry = self._entries.get(key)
        if entry is not None:
            entry.stale = True

    def invalidate_all(self) -> None:
        """Mark every cached query result as stale."""
        for entry in self._entries.values():
            entry.stale = True
        logger.debug(f"Invalidated {len(self._entries)} cached queries")

    async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[Any]], *, force: bool = False) -> Any:
        """
        Return the cached value for ``key``, loading it when missing or stale.

        Args:
            key: Query key
            loader: Coroutine function producing a fresh value
            force: Reload even when the cached value is fresh

        Returns:
            The cached or freshly loaded value
        """
        if not force and not self.is_stale(key):
            return self._entries[key].value

        value = await loader()
        self.set(key, value)
        return value

    def updated_at(self, key: QueryKey) -> Optional[float]:
        entry = self._entries.get(key)
        return entry.updated_at if entry is not None else None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries
