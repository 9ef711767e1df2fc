"""Connection-related domain types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

__all__ = ["ConnectionStatus", "ConnectionSnapshot"]


class ConnectionStatus(Enum):
    """Status of the backend actor connection.

    ``IDLE`` is the initial state. Every attempt passes through ``CONNECTING``
    and settles in either ``READY`` or ``ERROR``.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionSnapshot:
    """Read-only view of the connection state handed to the rest of the app.

    Attributes:
        client: The health-checked backend actor, present only when ready
        status: Current connection status
        last_error: Last classified failure, present only in ERROR
        retry_count: Automatic retries attempted since the last manual reset
        next_retry_in_seconds: Countdown to the pending automatic retry, if any
    """

    client: Optional[Any]
    status: ConnectionStatus
    last_error: Optional[BaseException]
    retry_count: int
    next_retry_in_seconds: Optional[int]

    @property
    def is_connecting(self) -> bool:
        return self.status == ConnectionStatus.CONNECTING

    @property
    def is_ready(self) -> bool:
        return self.status == ConnectionStatus.READY

    @property
    def has_error(self) -> bool:
        return self.status == ConnectionStatus.ERROR
