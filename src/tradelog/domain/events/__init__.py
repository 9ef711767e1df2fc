"""Event system for decoupled component communication.

The connection manager publishes status and countdown events; the identity
provider publishes identity changes that the manager reacts to.

Example:
    ```python
    from tradelog.domain.events import EventBus, ConnectionStatusChanged

    event_bus = EventBus()

    def handle_status(event: ConnectionStatusChanged):
        print(f"Backend is {event.status.value}")

    event_bus.subscribe(ConnectionStatusChanged, handle_status)
    ```
"""

from .bus import EventBus
from .types import (
    ConnectionStatusChanged,
    Event,
    IdentityChanged,
    RetryCountdown,
)

__all__ = [
    "EventBus",
    "Event",
    "ConnectionStatusChanged",
    "IdentityChanged",
    "RetryCountdown",
]
