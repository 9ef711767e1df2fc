"""Backend actor protocols."""

from typing import Any, Optional, Protocol

__all__ = ["BackendActor", "ActorFactory"]


class BackendActor(Protocol):
    """Protocol for the generated backend client ("actor").

    Only the calls needed to bring a connection up are spelled out here. The
    domain operations (trades, mistakes, profiles, subscriptions, admin) are
    opaque to the connection layer.

    Actors holding resources may also define a synchronous ``close()``; the
    connection manager calls it on every actor it drops.
    """

    async def health_check(self) -> str:
        """Cheap liveness probe; raises when the service is unreachable."""
        ...

    async def initialize_access_control_with_secret(self, token: str) -> None:
        """One-time privileged setup for an authenticated caller.

        Args:
            token: Out-of-band admin secret, empty when none was supplied
        """
        ...


class ActorFactory(Protocol):
    """Protocol for creating backend actors."""

    async def create_actor(self, identity: Optional[Any] = None) -> BackendActor:
        """Create an actor, bound to ``identity`` when the caller is authenticated.

        Args:
            identity: Caller identity, or None for an anonymous actor

        Returns:
            A new, not yet health-checked actor
        """
        ...
