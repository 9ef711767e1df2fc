"""Domain protocols - interfaces for all implementations.

This module defines protocols (structural types) that describe the contracts
that collaborators of the connection layer must satisfy. Using protocols allows
for easier testing with mocks and clearer documentation of expected interfaces.
"""

from tradelog.domain.protocols.backend import ActorFactory, BackendActor
from tradelog.domain.protocols.cache import QueryInvalidator
from tradelog.domain.protocols.identity import IdentityProvider

__all__ = [
    "ActorFactory",
    "BackendActor",
    "IdentityProvider",
    "QueryInvalidator",
]
