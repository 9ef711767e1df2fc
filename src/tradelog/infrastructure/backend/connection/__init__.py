"""Connection management components for the backend actor."""

from .countdown import RetryScheduler
from .lifecycle import ConnectionLifecycle
from .manager import ActorConnectionManager
from .reconnect import ExponentialBackoffStrategy, ReconnectionStrategy

__all__ = [
    "ReconnectionStrategy",
    "ExponentialBackoffStrategy",
    "RetryScheduler",
    "ConnectionLifecycle",
    "ActorConnectionManager",
]
