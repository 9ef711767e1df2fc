"""Connection state record for the backend actor."""

from typing import Any, Callable, Optional

from tradelog.domain.types import ConnectionSnapshot, ConnectionStatus
from tradelog.logger import get_logger

logger = get_logger("connection.lifecycle")


class ConnectionLifecycle:
    """Owns the mutable connection state and keeps its invariants.

    - READY holds a client and no error
    - ERROR holds an error and no client
    - CONNECTING and IDLE hold neither
    """

    def __init__(
        self,
        on_status_change: Optional[Callable[[ConnectionStatus, ConnectionStatus], None]] = None,
    ):
        """
        Initialize the connection state.

        Args:
            on_status_change: Callback invoked with (new_status, previous_status)
        """
        self._status = ConnectionStatus.IDLE
        self._client: Optional[Any] = None
        self._last_error: Optional[BaseException] = None
        self._retry_count = 0
        self._next_retry_in_seconds: Optional[int] = None
        self._on_status_change = on_status_change

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def client(self) -> Optional[Any]:
        return self._client

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def next_retry_in_seconds(self) -> Optional[int]:
        return self._next_retry_in_seconds

    def snapshot(self) -> ConnectionSnapshot:
        """Return an immutable copy of the current state."""
        return ConnectionSnapshot(
            client=self._client,
            status=self._status,
            last_error=self._last_error,
            retry_count=self._retry_count,
            next_retry_in_seconds=self._next_retry_in_seconds,
        )

    def begin_attempt(self, retry_count: int) -> None:
        """Enter CONNECTING for the attempt numbered ``retry_count``."""
        self._client = None
        self._last_error = None
        self._next_retry_in_seconds = None
        self._retry_count = retry_count
        self._set_status(ConnectionStatus.CONNECTING)

    def mark_ready(self, client: Any) -> None:
        """Enter READY with a health-checked client."""
        if client is None:
            raise ValueError("READY requires a client")
        self._client = client
        self._last_error = None
        self._next_retry_in_seconds = None
        self._retry_count = 0
        self._set_status(ConnectionStatus.READY)

    def mark_error(self, error: BaseException) -> None:
        """Enter ERROR, dropping any client."""
        self._client = None
        self._last_error = error
        self._next_retry_in_seconds = None
        self._set_status(ConnectionStatus.ERROR)

    def set_countdown(self, seconds: Optional[int]) -> None:
        """Publish the seconds left before the pending automatic retry."""
        self._next_retry_in_seconds = seconds

    def reset_retries(self) -> None:
        self._retry_count = 0

    def _set_status(self, status: ConnectionStatus) -> None:
        if self._status == status:
            return

        previous = self._status
        self._status = status
        logger.debug(f"Status changed: {previous.value} -> {status.value}")

        if self._on_status_change:
            try:
                self._on_status_change(status, previous)
            except Exception as e:
                logger.error(f"Error in status change callback: {e}")
