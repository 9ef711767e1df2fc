"""Shared fixtures for tradelog tests."""

import pytest

from tradelog.domain.events import EventBus
from tests.fakes import FakeClock, RecordingCache


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache() -> RecordingCache:
    return RecordingCache()
