"""Wiring of the backend connection manager from settings."""

from __future__ import annotations

from functools import partial
from typing import Optional

from tradelog.application.config import ConnectionSettings
from tradelog.domain.events import EventBus
from tradelog.domain.protocols import ActorFactory, IdentityProvider, QueryInvalidator
from tradelog.infrastructure.backend.connection import (
    ActorConnectionManager,
    ExponentialBackoffStrategy,
    RetryScheduler,
)
from tradelog.infrastructure.secrets import get_secret_parameter
from tradelog.logger import get_logger

logger = get_logger("application.connection")


def build_connection_manager(
    settings: ConnectionSettings,
    *,
    event_bus: Optional[EventBus] = None,
    identity_provider: Optional[IdentityProvider] = None,
    query_cache: Optional[QueryInvalidator] = None,
    actor_factory: Optional[ActorFactory] = None,
    launch_url: Optional[str] = None,
) -> ActorConnectionManager:
    """
    Create a connection manager configured from ``settings``.

    Args:
        settings: Connection settings
        event_bus: Shared event bus (a new one if None)
        identity_provider: Caller identity source
        query_cache: Cache invalidated after each successful connect
        actor_factory: Actor factory (HTTP factory for ``settings.backend_url`` if None)
        launch_url: URL the app was opened with, searched for the admin secret

    Returns:
        A manager that has not been started yet
    """
    if actor_factory is None:
        from tradelog.infrastructure.backend import HttpActorFactory

        actor_factory = HttpActorFactory(settings.backend_url, request_timeout=settings.request_timeout)

    strategy = ExponentialBackoffStrategy(
        max_attempts=settings.max_auto_retries,
        initial_delay=settings.base_retry_delay,
        max_delay=settings.max_retry_delay,
        backoff_multiplier=settings.backoff_multiplier,
    )

    logger.debug(
        f"Building connection manager for {settings.backend_url} "
        f"(timeout={settings.connection_timeout}s, retries={settings.max_auto_retries})"
    )
    return ActorConnectionManager(
        actor_factory,
        identity_provider=identity_provider,
        query_cache=query_cache,
        event_bus=event_bus,
        reconnection_strategy=strategy,
        scheduler=RetryScheduler(tick_interval=settings.countdown_interval),
        secret_reader=partial(get_secret_parameter, url=launch_url),
        connection_timeout=settings.connection_timeout,
        admin_token_param=settings.admin_token_param,
    )
