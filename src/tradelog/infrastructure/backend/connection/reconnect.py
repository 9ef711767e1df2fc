"""Reconnection backoff for the backend actor connection."""

from abc import ABC, abstractmethod

from tradelog.logger import get_logger

logger = get_logger("connection.reconnect")


class ReconnectionStrategy(ABC):
    """Abstract base class for reconnection strategies."""

    @abstractmethod
    def calculate_delay(self, retry_count: int) -> float:
        """Seconds to wait before the retry following ``retry_count`` retries."""

    @abstractmethod
    def should_retry(self, retry_count: int) -> bool:
        """Check if another automatic retry is allowed."""

    @property
    @abstractmethod
    def max_attempts(self) -> int:
        """Get maximum number of automatic retries."""


class ExponentialBackoffStrategy(ReconnectionStrategy):
    """Reconnection strategy with capped exponential backoff.

    The delay before the next retry is ``initial_delay * multiplier ** retry_count``
    clamped to ``max_delay``, where ``retry_count`` counts the automatic retries
    already made (0 after the initial or a manual attempt).
    """

    def __init__(
        self,
        max_attempts: int = 8,
        initial_delay: float = 3.0,
        max_delay: float = 15.0,
        backoff_multiplier: float = 1.5,
    ):
        """
        Initialize exponential backoff strategy.

        Args:
            max_attempts: Maximum number of automatic retries
            initial_delay: Delay in seconds before the first automatic retry
            max_delay: Maximum delay in seconds
            backoff_multiplier: Multiplier for each retry
        """
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if initial_delay < 0 or max_delay < 0:
            raise ValueError("delays must be >= 0")

        self._max_attempts = max_attempts
        self._initial_delay = initial_delay
        self._max_delay = max_delay
        self._backoff_multiplier = backoff_multiplier

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def calculate_delay(self, retry_count: int) -> float:
        """
        Calculate delay for the retry following ``retry_count`` automatic retries.

        Args:
            retry_count: Automatic retries made so far (0-indexed)

        Returns:
            Delay in seconds
        """
        if retry_count <= 0:
            return min(self._initial_delay, self._max_delay)

        delay = self._initial_delay * (self._backoff_multiplier ** retry_count)
        return min(delay, self._max_delay)

    def should_retry(self, retry_count: int) -> bool:
        allowed = retry_count < self._max_attempts
        if not allowed:
            logger.debug(f"Retry budget exhausted ({retry_count}/{self._max_attempts})")
        return allowed
