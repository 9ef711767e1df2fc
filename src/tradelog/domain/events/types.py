"""Event types for the event bus system.

This module defines the events exchanged between the connection manager, the
identity provider and whatever renders the connection state.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Optional

from tradelog.domain.types import ConnectionStatus


@dataclass
class Event:
    """Base class for all events.

    The timestamp field is automatically set when the event is created.
    """

    timestamp: float = field(default_factory=time.time, init=False)
    """Timestamp when the event was created (Unix timestamp)."""


@dataclass
class ConnectionStatusChanged(Event):
    """Event published when the backend connection status changes.

    Attributes:
        status: New connection status
        previous_status: Previous connection status
        error_message: Text of the stored failure when status is ERROR
    """

    status: ConnectionStatus
    previous_status: Optional[ConnectionStatus] = None
    error_message: Optional[str] = None


@dataclass
class RetryCountdown(Event):
    """Event published once per second while an automatic retry is pending.

    Attributes:
        retry_count: Retries attempted so far (the pending one not included)
        max_retries: Automatic retry ceiling
        seconds_remaining: Whole seconds until the retry fires (0 right before it does)
    """

    retry_count: int
    max_retries: int
    seconds_remaining: int


@dataclass
class IdentityChanged(Event):
    """Event published by the identity provider when the caller changes.

    Attributes:
        identity: New identity, or None after logout
        is_initializing: Whether the provider is still restoring the identity
    """

    identity: Optional[Any] = None
    is_initializing: bool = False
