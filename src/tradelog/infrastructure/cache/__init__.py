"""Caching implementations for tradelog.

Currently supports an in-memory query cache.
"""

from tradelog.infrastructure.cache.memory import QueryCache

__all__ = [
    "QueryCache",
]
