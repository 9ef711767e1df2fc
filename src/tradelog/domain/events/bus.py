"""Event bus implementation for decoupled event-driven communication.

Event Handler Contract:
    Event handlers MUST be synchronous (non-async) functions. This is enforced
    at subscription time. Handlers should be fast coordinators that schedule
    async work rather than executing it directly.

    Good: handler schedules async work via asyncio.create_task()
    Bad:  handler is async and tries to await operations
"""

import inspect
from typing import Callable, Type, TypeVar

from tradelog.logger import get_logger

from .types import Event

logger = get_logger("events.bus")

T = TypeVar("T", bound=Event)

# Type alias for event handlers - must be synchronous
EventHandler = Callable[[Event], None]


class EventBus:
    """Event bus for publishing and subscribing to events.

    Example:
        ```python
        event_bus = EventBus()
        event_bus.subscribe(IdentityChanged, manager_handler)
        event_bus.publish(IdentityChanged(identity=principal))
        ```

    Thread safety:
        This implementation is NOT thread-safe. It assumes all operations
        happen within the same async event loop.
    """

    def __init__(self):
        self._handlers: dict[Type[Event], list[Callable[[Event], None]]] = {}
        """Registry of event handlers by event type."""

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to (e.g., ConnectionStatusChanged)
            handler: Synchronous callback receiving the event instance

        Raises:
            TypeError: If handler is an async function (coroutine function)
        """
        if inspect.iscoroutinefunction(handler):
            raise TypeError(
                f"Event handlers must be synchronous functions. "
                f"Handler {handler.__name__} is an async function (coroutine function). "
                f"To perform async work, schedule it using asyncio.create_task() instead."
            )

        handlers = self._handlers.setdefault(event_type, [])

        if handler not in handlers:
            handlers.append(handler)  # type: ignore[arg-type]
            logger.debug(f"Subscribed handler for {event_type.__name__}")
        else:
            logger.debug(f"Handler already subscribed for {event_type.__name__}, skipping")

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """
        Unsubscribe a handler from events of a specific type.

        If the handler was not subscribed, this is a no-op.
        """
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)  # type: ignore[arg-type]
                logger.debug(f"Unsubscribed handler for {event_type.__name__}")
            except ValueError:
                logger.debug(f"Handler not found in subscriptions for {event_type.__name__}")

    def publish(self, event: Event) -> None:
        """
        Publish an event to all subscribed handlers.

        Handlers are called synchronously in the order they were subscribed.
        If a handler raises, the error is logged and the remaining handlers
        still run.
        """
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(f"No handlers subscribed for {event_type.__name__}")
            return

        logger.debug(f"Publishing {event_type.__name__} to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.opt(exception=True).error(f"Error in event handler for {event_type.__name__}: {e}")

    def clear(self) -> None:
        """Clear all event subscriptions."""
        self._handlers.clear()
        logger.debug("Event bus cleared")

    def has_subscribers(self, event_type: Type[Event]) -> bool:
        """Check if there are any subscribers for a specific event type."""
        return bool(self._handlers.get(event_type))
