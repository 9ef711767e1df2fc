"""Connection manager that creates, probes and maintains the backend actor."""

import asyncio
from typing import Any, Callable, Coroutine, Optional

from tradelog.domain.events import ConnectionStatusChanged, EventBus, IdentityChanged, RetryCountdown
from tradelog.domain.exceptions import (
    BackendConnectionError,
    ConnectionErrorKind,
    ConnectionTimeoutError,
    HealthCheckFailedError,
    InitializationError,
    error_message,
    infer_error_kind,
    is_stopped_service_message,
)
from tradelog.domain.protocols import ActorFactory, BackendActor, IdentityProvider, QueryInvalidator
from tradelog.domain.types import ConnectionSnapshot, ConnectionStatus
from tradelog.logger import get_logger
from .countdown import RetryScheduler
from .lifecycle import ConnectionLifecycle
from .reconnect import ExponentialBackoffStrategy, ReconnectionStrategy

logger = get_logger("connection.manager")

DEFAULT_CONNECTION_TIMEOUT = 30.0
DEFAULT_ADMIN_TOKEN_PARAM = "caffeineAdminToken"

# Initialization rejections that usually clear up once the service finishes starting
TRANSIENT_INIT_MARKERS = ("stopping", "access", "initialization")

TIMEOUT_MESSAGE = "Backend connection timed out. Please refresh the page."
INIT_RETRY_MESSAGE = "Backend initialization did not complete. Please refresh the page and try again."


class ActorConnectionManager:
    """
    Produces a single health-checked backend actor and keeps it available.

    This manager coordinates:
    - Actor creation, liveness probe and (for authenticated callers) the
      privileged access-control initialization, raced against a timeout
    - The connection state record (idle, connecting, ready, error)
    - Automatic retries with exponential backoff for transient failures
    - Reconnecting from scratch when the caller identity changes
    - Invalidating cached queries once a new actor is ready

    At most one connection attempt is in flight at any time. Failures are
    stored in the state, never raised to callers.
    """

    def __init__(
        self,
        actor_factory: ActorFactory,
        *,
        identity_provider: Optional[IdentityProvider] = None,
        query_cache: Optional[QueryInvalidator] = None,
        event_bus: Optional[EventBus] = None,
        reconnection_strategy: Optional[ReconnectionStrategy] = None,
        scheduler: Optional[RetryScheduler] = None,
        secret_reader: Optional[Callable[[str], Optional[str]]] = None,
        connection_timeout: float = DEFAULT_CONNECTION_TIMEOUT,
        admin_token_param: str = DEFAULT_ADMIN_TOKEN_PARAM,
    ):
        """
        Initialize connection manager.

        Args:
            actor_factory: Creates backend actors, optionally bound to an identity
            identity_provider: Source of the caller identity (anonymous if None)
            query_cache: Cache whose queries are invalidated on every successful connect
            event_bus: Bus for status/countdown events and identity changes
            reconnection_strategy: Backoff policy (defaults to 3s x 1.5^n capped at 15s, 8 retries)
            scheduler: Retry scheduler (defaults to one ticking every second)
            secret_reader: Looks up the admin secret by parameter name
            connection_timeout: Seconds allowed for creation, probe and initialization together
            admin_token_param: Name of the secret parameter passed to initialization
        """
        self._actor_factory = actor_factory
        self._identity_provider = identity_provider
        self._query_cache = query_cache
        self.event_bus = event_bus or EventBus()
        self._reconnect_strategy = reconnection_strategy or ExponentialBackoffStrategy()
        self._scheduler = scheduler or RetryScheduler()
        self._secret_reader = secret_reader
        self._connection_timeout = connection_timeout
        self._admin_token_param = admin_token_param

        self._lifecycle = ConnectionLifecycle(on_status_change=self._publish_status)
        self._identity: Optional[Any] = identity_provider.identity if identity_provider else None
        self._in_flight = False
        self._identity_reconnect_pending = False
        self._started = False
        self._disposed = False
        self._tasks: set[asyncio.Task] = set()
        self._settled = asyncio.Event()
        self._settled.set()

    # --------------------------------------------------------------------- #
    # State projection
    # --------------------------------------------------------------------- #

    @property
    def client(self) -> Optional[BackendActor]:
        return self._lifecycle.client

    @property
    def status(self) -> ConnectionStatus:
        return self._lifecycle.status

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._lifecycle.last_error

    @property
    def is_connecting(self) -> bool:
        return self._lifecycle.status == ConnectionStatus.CONNECTING

    @property
    def is_ready(self) -> bool:
        return self._lifecycle.status == ConnectionStatus.READY

    @property
    def has_error(self) -> bool:
        return self._lifecycle.status == ConnectionStatus.ERROR

    @property
    def retry_count(self) -> int:
        return self._lifecycle.retry_count

    @property
    def next_retry_in_seconds(self) -> Optional[int]:
        return self._lifecycle.next_retry_in_seconds

    @property
    def max_auto_retries(self) -> int:
        return self._reconnect_strategy.max_attempts

    def snapshot(self) -> ConnectionSnapshot:
        """Return an immutable view of the connection state."""
        return self._lifecycle.snapshot()

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #

    async def start(self) -> None:
        """Subscribe to identity changes and connect unless the identity is still initializing."""
        if self._disposed:
            raise RuntimeError("Connection manager has been disposed")
        if self._started:
            logger.warning("Connection manager already started")
            return

        self._started = True
        self.event_bus.subscribe(IdentityChanged, self._on_identity_changed)
        logger.info("Connection manager started")

        if self._identity_provider is not None and self._identity_provider.is_initializing:
            logger.info("Identity still initializing, deferring connection")
            return

        await self.connect()

    async def dispose(self) -> None:
        """Cancel timers and pending work; later results are dropped."""
        if self._disposed:
            return

        logger.info("Disposing connection manager")
        self._disposed = True
        self.event_bus.unsubscribe(IdentityChanged, self._on_identity_changed)
        await self._scheduler.stop()
        self._lifecycle.set_countdown(None)

        current = asyncio.current_task()
        pending = [task for task in self._tasks if task is not current and not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        _close_actor(self._lifecycle.client)
        self._settled.set()
        logger.info("Connection manager disposed")

    async def wait_until_settled(self, timeout: Optional[float] = None) -> ConnectionSnapshot:
        """
        Wait until no attempt is in flight and no automatic retry is pending.

        Args:
            timeout: Optional limit in seconds

        Returns:
            Snapshot of the settled state

        Raises:
            asyncio.TimeoutError: If the state did not settle within ``timeout``
        """
        await asyncio.wait_for(self._settled.wait(), timeout)
        return self.snapshot()

    # --------------------------------------------------------------------- #
    # Connect / retry
    # --------------------------------------------------------------------- #

    async def retry(self) -> None:
        """Manually retry: reset the retry counter and start a fresh attempt."""
        if self._disposed:
            logger.warning("Retry requested after dispose, ignoring")
            return
        if self._in_flight:
            logger.debug("Manual retry ignored, an attempt is already in flight")
            return

        logger.info("Manual retry requested")
        self._scheduler.cancel()
        self._lifecycle.reset_retries()
        await self.connect()

    async def connect(self, *, automatic: bool = False) -> None:
        """
        Run one connection attempt.

        Args:
            automatic: True when fired by the retry scheduler; increments the
                retry counter instead of resetting it
        """
        if self._disposed:
            logger.warning("Connect requested after dispose, ignoring")
            return
        if self._in_flight:
            logger.debug("Connection attempt already in flight, ignoring")
            return

        self._in_flight = True
        self._settled.clear()
        self._scheduler.cancel()

        retry_count = self._lifecycle.retry_count + 1 if automatic else 0
        identity = self._identity
        previous_client = self._lifecycle.client
        self._lifecycle.begin_attempt(retry_count)
        _close_actor(previous_client)
        logger.info(
            f"Connection attempt (retry {retry_count}/{self._reconnect_strategy.max_attempts}, "
            f"{'authenticated' if identity is not None else 'anonymous'})"
        )

        try:
            actor = await self._with_timeout(self._establish(identity))
        except Exception as e:
            self._in_flight = False
            if self._disposed:
                return
            error = self._normalize(e)
            logger.warning(f"Connection failed ({error.kind.value}): {error}")
            self._lifecycle.mark_error(error)
            self._schedule_retry(error)
        else:
            self._in_flight = False
            if self._disposed:
                _close_actor(actor)
                return
            self._lifecycle.mark_ready(actor)
            logger.info("Backend actor ready")
            self._invalidate_queries()
        finally:
            self._in_flight = False
            if self._identity_reconnect_pending and not self._disposed:
                self._identity_reconnect_pending = False
                self._spawn(self._reconnect_for_identity())
            self._update_settled()

    async def _with_timeout(self, chain: Coroutine[Any, Any, BackendActor]) -> BackendActor:
        task = asyncio.ensure_future(chain)
        try:
            # shield: a timeout stops waiting without cancelling the network calls
            return await asyncio.wait_for(asyncio.shield(task), self._connection_timeout)
        except asyncio.TimeoutError:
            task.add_done_callback(_discard_abandoned)
            raise ConnectionTimeoutError(
                TIMEOUT_MESSAGE, detail=f"no response within {self._connection_timeout:g}s"
            ) from None
        except asyncio.CancelledError:
            task.cancel()
            task.add_done_callback(_discard_abandoned)
            raise

    async def _establish(self, identity: Optional[Any]) -> BackendActor:
        try:
            actor = await self._actor_factory.create_actor(identity)
        except Exception as e:
            message = error_message(e)
            raise BackendConnectionError(
                f"Failed to create backend actor: {message}", kind=infer_error_kind(e), detail=message
            ) from e

        try:
            await self._probe(actor)
            if identity is not None:
                await self._initialize_access_control(actor)
        except BaseException:
            _close_actor(actor)
            raise

        return actor

    async def _probe(self, actor: BackendActor) -> None:
        try:
            await actor.health_check()
        except Exception as e:
            message = error_message(e)
            kind = (
                ConnectionErrorKind.SERVICE_STOPPED
                if is_stopped_service_message(message)
                else ConnectionErrorKind.HEALTH_CHECK_FAILED
            )
            raise HealthCheckFailedError(f"Backend health check failed: {message}", kind=kind, detail=message) from e
        logger.debug("Health check passed")

    async def _initialize_access_control(self, actor: BackendActor) -> None:
        token = (self._secret_reader(self._admin_token_param) if self._secret_reader else None) or ""
        try:
            await actor.initialize_access_control_with_secret(token)
        except Exception as e:
            message = error_message(e)
            lowered = message.lower()
            if "already initialized" in lowered:
                logger.debug("Access control already initialized")
                return

            kind = (
                ConnectionErrorKind.SERVICE_STOPPED
                if is_stopped_service_message(message)
                else ConnectionErrorKind.INITIALIZATION_FAILED
            )
            if any(marker in lowered for marker in TRANSIENT_INIT_MARKERS):
                raise InitializationError(INIT_RETRY_MESSAGE, kind=kind, detail=message) from e
            raise InitializationError(
                f"Access control initialization failed: {message}", kind=kind, detail=message
            ) from e
        logger.debug("Access control initialized")

    @staticmethod
    def _normalize(error: Exception) -> BackendConnectionError:
        if isinstance(error, BackendConnectionError):
            return error
        message = error_message(error) or "Failed to connect to backend"
        return BackendConnectionError(message, kind=infer_error_kind(error))

    # --------------------------------------------------------------------- #
    # Automatic retries
    # --------------------------------------------------------------------- #

    def _schedule_retry(self, error: BackendConnectionError) -> None:
        retry_count = self._lifecycle.retry_count
        if not error.is_auto_retryable:
            logger.info("Failure is not retried automatically, waiting for manual retry")
            return
        if not self._reconnect_strategy.should_retry(retry_count):
            logger.error(
                f"Giving up after {retry_count} automatic retries, waiting for manual retry"
            )
            return

        delay = self._reconnect_strategy.calculate_delay(retry_count)
        logger.info(
            f"Retrying in {delay:.1f}s (retry {retry_count + 1}/{self._reconnect_strategy.max_attempts})"
        )
        self._scheduler.schedule(delay, on_fire=self._on_retry_due, on_tick=self._on_countdown_tick)

    def _on_countdown_tick(self, seconds: int) -> None:
        self._lifecycle.set_countdown(seconds)
        self.event_bus.publish(
            RetryCountdown(
                retry_count=self._lifecycle.retry_count,
                max_retries=self._reconnect_strategy.max_attempts,
                seconds_remaining=seconds,
            )
        )

    def _on_retry_due(self) -> None:
        if self._disposed:
            return
        self._spawn(self.connect(automatic=True))

    # --------------------------------------------------------------------- #
    # Identity changes
    # --------------------------------------------------------------------- #

    def _on_identity_changed(self, event: IdentityChanged) -> None:
        if self._disposed:
            return
        self._identity = event.identity
        if event.is_initializing:
            logger.debug("Identity initializing, waiting before reconnecting")
            return

        logger.info("Caller identity changed, reconnecting")
        self._settled.clear()
        self._spawn(self._reconnect_for_identity())

    async def _reconnect_for_identity(self) -> None:
        if self._in_flight:
            # Reconnect once the current attempt settles, with the new identity
            self._identity_reconnect_pending = True
            return
        self._scheduler.cancel()
        await self.connect()

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _update_settled(self) -> None:
        current = asyncio.current_task()
        busy = (
            self._in_flight
            or self._identity_reconnect_pending
            or self._scheduler.is_pending
            or any(task is not current and not task.done() for task in self._tasks)
        )
        if busy and not self._disposed:
            self._settled.clear()
        else:
            self._settled.set()

    def _invalidate_queries(self) -> None:
        if self._query_cache is None:
            return
        try:
            self._query_cache.invalidate_all()
        except Exception as e:
            logger.error(f"Error invalidating cached queries: {e}")

    def _publish_status(self, status: ConnectionStatus, previous: ConnectionStatus) -> None:
        last_error = self._lifecycle.last_error
        self.event_bus.publish(
            ConnectionStatusChanged(
                status=status,
                previous_status=previous,
                error_message=error_message(last_error) if last_error is not None else None,
            )
        )


def _discard_abandoned(task: asyncio.Future) -> None:
    """Consume the result of a chain abandoned after a timeout."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Abandoned connection attempt failed late: {exc}")
    else:
        logger.info("Abandoned connection attempt succeeded after timeout, result discarded")
        _close_actor(task.result())


def _close_actor(actor: Optional[Any]) -> None:
    """Release an actor's resources when it exposes ``close()``."""
    close = getattr(actor, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as e:
        logger.warning(f"Error closing backend actor: {e}")
