"""Caller identity store."""

from dataclasses import dataclass
from typing import Optional

from tradelog.domain.events import EventBus, IdentityChanged
from tradelog.logger import get_logger

logger = get_logger("identity")


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller.

    Attributes:
        principal: Stable caller id as known by the backend
        access_token: Bearer token presented to the backend, if any
    """

    principal: str
    access_token: Optional[str] = None


class IdentityStore:
    """Holds the current caller identity and announces changes on the event bus."""

    def __init__(self, event_bus: EventBus, identity: Optional[CallerIdentity] = None, *, initializing: bool = False):
        self._event_bus = event_bus
        self._identity = identity
        self._initializing = initializing

    @property
    def identity(self) -> Optional[CallerIdentity]:
        return self._identity

    @property
    def is_initializing(self) -> bool:
        return self._initializing

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def begin_initialization(self) -> None:
        """Mark the identity as being restored; connections wait for it."""
        if self._initializing:
            return
        self._initializing = True
        self._publish()

    def set_identity(self, identity: Optional[CallerIdentity]) -> None:
        """Finish initialization (if running) and switch to ``identity``."""
        if identity == self._identity and not self._initializing:
            logger.debug("Identity unchanged")
            return
        self._identity = identity
        self._initializing = False
        logger.info(f"Identity set to {identity.principal if identity else 'anonymous'}")
        self._publish()

    def clear(self) -> None:
        """Log out."""
        self.set_identity(None)

    def _publish(self) -> None:
        self._event_bus.publish(IdentityChanged(identity=self._identity, is_initializing=self._initializing))
