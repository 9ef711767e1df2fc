"""Tests for the in-memory query cache."""

import pytest

from tradelog.infrastructure.cache import QueryCache


def test_set_get_and_clear():
    cache = QueryCache()
    cache.set(("trades",), [1, 2])
    cache.set(("profile",), {"name": "a"})

    assert cache.get(("trades",)) == [1, 2]
    assert ("profile",) in cache
    assert len(cache) == 2

    cache.clear(("trades",))
    assert cache.get(("trades",)) is None

    cache.clear()
    assert len(cache) == 0


def test_invalidate_all_marks_entries_stale_but_keeps_values():
    cache = QueryCache()
    cache.set(("trades",), [1])
    cache.set(("mistakes",), [])

    cache.invalidate_all()

    assert cache.is_stale(("trades",))
    assert cache.is_stale(("mistakes",))
    assert cache.get(("trades",)) == [1]


def test_missing_key_is_stale():
    assert QueryCache().is_stale(("nothing",))


@pytest.mark.asyncio
async def test_fetch_uses_fresh_value_and_reloads_stale():
    cache = QueryCache()
    loads = []

    async def loader():
        loads.append(True)
        return len(loads)

    assert await cache.fetch(("count",), loader) == 1
    assert await cache.fetch(("count",), loader) == 1

    cache.invalidate(("count",))
    assert await cache.fetch(("count",), loader) == 2
    assert await cache.fetch(("count",), loader, force=True) == 3
    assert cache.updated_at(("count",)) is not None
