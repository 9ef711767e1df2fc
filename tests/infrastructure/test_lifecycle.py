"""Tests for the connection state record."""

import pytest

from tradelog.domain.types import ConnectionStatus
from tradelog.infrastructure.backend.connection import ConnectionLifecycle


class TestConnectionLifecycle:
    """Tests for ConnectionLifecycle."""

    def test_initial_state(self):
        lifecycle = ConnectionLifecycle()
        snapshot = lifecycle.snapshot()

        assert snapshot.status == ConnectionStatus.IDLE
        assert snapshot.client is None
        assert snapshot.last_error is None
        assert snapshot.retry_count == 0
        assert snapshot.next_retry_in_seconds is None
        assert not (snapshot.is_connecting or snapshot.is_ready or snapshot.has_error)

    def test_ready_holds_client_without_error(self):
        lifecycle = ConnectionLifecycle()
        client = object()

        lifecycle.begin_attempt(3)
        assert lifecycle.status == ConnectionStatus.CONNECTING
        assert lifecycle.retry_count == 3

        lifecycle.mark_ready(client)
        assert lifecycle.status == ConnectionStatus.READY
        assert lifecycle.client is client
        assert lifecycle.last_error is None
        assert lifecycle.retry_count == 0

    def test_error_drops_client(self):
        lifecycle = ConnectionLifecycle()
        lifecycle.mark_ready(object())

        error = RuntimeError("down")
        lifecycle.begin_attempt(0)
        lifecycle.mark_error(error)

        assert lifecycle.status == ConnectionStatus.ERROR
        assert lifecycle.client is None
        assert lifecycle.last_error is error

    def test_ready_requires_client(self):
        with pytest.raises(ValueError):
            ConnectionLifecycle().mark_ready(None)

    def test_new_attempt_clears_error_and_countdown(self):
        lifecycle = ConnectionLifecycle()
        lifecycle.mark_error(RuntimeError("down"))
        lifecycle.set_countdown(3)

        lifecycle.begin_attempt(1)

        assert lifecycle.last_error is None
        assert lifecycle.next_retry_in_seconds is None

    def test_status_change_callback(self):
        changes = []
        lifecycle = ConnectionLifecycle(on_status_change=lambda new, old: changes.append((old, new)))

        lifecycle.begin_attempt(0)
        lifecycle.begin_attempt(0)
        lifecycle.mark_error(RuntimeError("x"))

        assert changes == [
            (ConnectionStatus.IDLE, ConnectionStatus.CONNECTING),
            (ConnectionStatus.CONNECTING, ConnectionStatus.ERROR),
        ]

    def test_callback_errors_are_swallowed(self):
        def broken(new, old):
            raise RuntimeError("listener failed")

        lifecycle = ConnectionLifecycle(on_status_change=broken)
        lifecycle.begin_attempt(0)

        assert lifecycle.status == ConnectionStatus.CONNECTING
