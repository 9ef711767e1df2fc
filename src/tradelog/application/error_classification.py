"""Classify backend connection errors into user-facing messages."""

from dataclasses import dataclass
from typing import Optional

from tradelog.domain.exceptions import (
    BackendConnectionError,
    ConnectionErrorKind,
    error_message,
    infer_error_kind,
)

__all__ = ["ErrorClassification", "classify_backend_error"]


@dataclass(frozen=True)
class ErrorClassification:
    """How a connection failure should be presented.

    Attributes:
        kind: Structured failure kind
        title: Short heading
        description: Explanation shown under the heading
        show_raw_error: Whether the raw backend text is worth showing
        should_retry: Whether offering a retry makes sense
        raw_message: Original error text for diagnostics
    """

    kind: ConnectionErrorKind
    title: str
    description: str
    show_raw_error: bool
    should_retry: bool
    raw_message: str

    @property
    def is_stopped_service(self) -> bool:
        return self.kind == ConnectionErrorKind.SERVICE_STOPPED

    @property
    def is_authorization_error(self) -> bool:
        return self.kind == ConnectionErrorKind.AUTHORIZATION


def classify_backend_error(error: Optional[object]) -> ErrorClassification:
    """
    Classify a connection failure for display.

    Errors raised by the connection manager carry a structured kind. Anything
    else is classified from its message text.

    Args:
        error: The stored failure (exception or rejection value)

    Returns:
        The presentation classification
    """
    raw = error_message(error)
    if isinstance(error, BackendConnectionError) and error.detail:
        raw = error.detail
    kind = infer_error_kind(error)
    message = error_message(error)

    if kind == ConnectionErrorKind.AUTHORIZATION:
        return ErrorClassification(
            kind=kind,
            title="Authorization Error",
            description="You do not have permission to access this resource.",
            show_raw_error=False,
            should_retry=False,
            raw_message=raw,
        )

    if kind == ConnectionErrorKind.SERVICE_STOPPED:
        return ErrorClassification(
            kind=kind,
            title="Backend Starting",
            description="The backend is starting up. Please wait a moment.",
            show_raw_error=False,
            should_retry=True,
            raw_message=raw,
        )

    if kind == ConnectionErrorKind.HEALTH_CHECK_FAILED:
        return ErrorClassification(
            kind=kind,
            title="Backend Unreachable",
            description="The backend did not respond to a health check. Reconnecting automatically.",
            show_raw_error=True,
            should_retry=True,
            raw_message=raw,
        )

    if kind == ConnectionErrorKind.TIMEOUT:
        return ErrorClassification(
            kind=kind,
            title="Connection Timed Out",
            description="The backend took too long to respond. Please refresh the page.",
            show_raw_error=False,
            should_retry=True,
            raw_message=raw,
        )

    if kind == ConnectionErrorKind.INITIALIZATION_FAILED:
        return ErrorClassification(
            kind=kind,
            title="Backend Initializing",
            description=message or "The backend is still initializing. Please refresh the page.",
            show_raw_error=False,
            should_retry=True,
            raw_message=raw,
        )

    return ErrorClassification(
        kind=kind,
        title="Connection Error",
        description=message or "Failed to connect to backend",
        show_raw_error=True,
        should_retry=True,
        raw_message=raw,
    )
