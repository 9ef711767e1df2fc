"""Domain exceptions for backend connection failures.

Every failure raised while bringing up the backend actor is normalized into a
``BackendConnectionError`` carrying a structured ``ConnectionErrorKind``.

The remote service only reports human-readable messages, so the kind of an
error that did not originate here is inferred by substring matching
(``infer_error_kind``). That inference is a compatibility shim for the
service's message texts and is kept deliberately narrow: callers should branch
on ``error.kind`` and only fall back to message matching for foreign errors.
"""

from enum import Enum
from typing import Optional

__all__ = [
    "ConnectionErrorKind",
    "BackendConnectionError",
    "HealthCheckFailedError",
    "InitializationError",
    "ConnectionTimeoutError",
    "error_message",
    "is_authorization_message",
    "is_stopped_service_message",
    "infer_error_kind",
]


class ConnectionErrorKind(Enum):
    """Structured classification of connection failures."""

    HEALTH_CHECK_FAILED = "health_check_failed"
    SERVICE_STOPPED = "service_stopped"
    INITIALIZATION_FAILED = "initialization_failed"
    TIMEOUT = "timeout"
    AUTHORIZATION = "authorization"
    UNKNOWN = "unknown"


# Kinds the connection manager recovers from on its own
AUTO_RETRY_KINDS = frozenset({ConnectionErrorKind.SERVICE_STOPPED, ConnectionErrorKind.HEALTH_CHECK_FAILED})


class BackendConnectionError(Exception):
    """Base class for failures while connecting to the backend."""

    default_kind = ConnectionErrorKind.UNKNOWN

    def __init__(self, message: str, *, kind: Optional[ConnectionErrorKind] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind
        self.detail = detail

    @property
    def is_auto_retryable(self) -> bool:
        """Whether the manager schedules an automatic retry for this failure."""
        return self.kind in AUTO_RETRY_KINDS


class HealthCheckFailedError(BackendConnectionError):
    """The liveness probe against a freshly created actor failed."""

    default_kind = ConnectionErrorKind.HEALTH_CHECK_FAILED


class InitializationError(BackendConnectionError):
    """The privileged access-control initialization call failed."""

    default_kind = ConnectionErrorKind.INITIALIZATION_FAILED


class ConnectionTimeoutError(BackendConnectionError):
    """Actor creation, probe and initialization did not settle in time."""

    default_kind = ConnectionErrorKind.TIMEOUT


def error_message(error: object) -> str:
    """Return the human-readable text of an error or arbitrary rejection value."""
    if isinstance(error, BaseException):
        return str(error)
    return "" if error is None else str(error)


def is_authorization_message(text: str) -> bool:
    lowered = text.lower()
    return (
        "unauthorized" in lowered
        or "only users can" in lowered
        or "only admins can" in lowered
        or "permission denied" in lowered
        or "access denied" in lowered
    )


def is_stopped_service_message(text: str) -> bool:
    """Detect the service's "stopped / unavailable" rejections."""
    lowered = text.lower()
    return (
        "is stopped" in lowered
        or "ic0508" in lowered
        or ("canister" in lowered and "stopped" in lowered)
    )


def infer_error_kind(error: object) -> ConnectionErrorKind:
    """Best-effort kind for an error, preferring its structured kind."""
    if isinstance(error, BackendConnectionError):
        return error.kind

    text = error_message(error)
    lowered = text.lower()
    if is_authorization_message(text):
        return ConnectionErrorKind.AUTHORIZATION
    if is_stopped_service_message(text):
        return ConnectionErrorKind.SERVICE_STOPPED
    if "health check failed" in lowered:
        return ConnectionErrorKind.HEALTH_CHECK_FAILED
    if "timed out" in lowered:
        return ConnectionErrorKind.TIMEOUT
    if "initializ" in lowered:
        return ConnectionErrorKind.INITIALIZATION_FAILED
    return ConnectionErrorKind.UNKNOWN
