"""Tests for the connection snapshot value."""

from dataclasses import FrozenInstanceError

import pytest

from tradelog.domain.types import ConnectionSnapshot, ConnectionStatus


def _snapshot(status: ConnectionStatus) -> ConnectionSnapshot:
    return ConnectionSnapshot(client=None, status=status, last_error=None, retry_count=0, next_retry_in_seconds=None)


def test_status_flags():
    snapshot = _snapshot(ConnectionStatus.CONNECTING)

    assert snapshot.is_connecting
    assert not snapshot.is_ready
    assert not snapshot.has_error


def test_snapshot_is_frozen():
    snapshot = _snapshot(ConnectionStatus.IDLE)

    with pytest.raises(FrozenInstanceError):
        snapshot.retry_count = 3  # type: ignore[misc]
