"""Identity provider protocol."""

from typing import Any, Optional, Protocol

__all__ = ["IdentityProvider"]


class IdentityProvider(Protocol):
    """Supplies the caller identity used to authenticate backend actors.

    Changes are announced on the event bus as ``IdentityChanged`` events.
    """

    @property
    def identity(self) -> Optional[Any]:
        """Current caller identity, or None when anonymous."""
        ...

    @property
    def is_initializing(self) -> bool:
        """True while the identity is still being restored."""
        ...
