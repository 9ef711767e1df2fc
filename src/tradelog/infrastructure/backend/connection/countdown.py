"""Scheduled automatic retries with a visible countdown."""

import asyncio
import math
from typing import Awaitable, Callable, Optional

from tradelog.logger import get_logger
from tradelog.utils import whole_seconds

logger = get_logger("connection.countdown")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class RetryScheduler:
    """Runs one pending retry as a single cancellable task.

    The task publishes the seconds left before the retry fires through
    ``on_tick`` once per ``tick_interval`` and finally calls ``on_fire``. Every
    tick is derived from the same deadline, so the displayed countdown and the
    actual firing time cannot drift apart.
    """

    def __init__(
        self,
        tick_interval: float = 1.0,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            tick_interval: Seconds between countdown updates
            clock: Monotonic clock (defaults to the running loop's clock)
            sleep: Awaitable sleep (defaults to asyncio.sleep)
        """
        if tick_interval <= 0:
            raise ValueError("tick_interval must be > 0")
        self._tick_interval = tick_interval
        self._clock = clock
        self._sleep = sleep or asyncio.sleep
        self._task: Optional[asyncio.Task] = None
        self._deadline: Optional[float] = None

    @property
    def is_pending(self) -> bool:
        """True while a retry is scheduled and has not fired yet."""
        return self._task is not None and not self._task.done()

    @property
    def seconds_remaining(self) -> Optional[int]:
        """Whole seconds until the pending retry fires, or None."""
        if not self.is_pending or self._deadline is None:
            return None
        return whole_seconds(self._deadline - self._now())

    def schedule(
        self,
        delay: float,
        on_fire: Callable[[], None],
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        """
        Schedule ``on_fire`` after ``delay`` seconds, replacing any pending retry.

        Args:
            delay: Seconds until the retry fires
            on_fire: Synchronous callback run once the deadline is reached
            on_tick: Synchronous callback receiving the seconds remaining
        """
        self.cancel()
        self._deadline = self._now() + max(delay, 0.0)
        self._task = asyncio.create_task(self._run(self._deadline, on_fire, on_tick))
        logger.debug(f"Retry scheduled in {delay:.1f}s")

    def cancel(self) -> None:
        """Cancel the pending retry and its countdown, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Pending retry cancelled")
        self._task = None
        self._deadline = None

    async def stop(self) -> None:
        """Cancel the pending retry and wait for its task to finish."""
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    async def _run(
        self,
        deadline: float,
        on_fire: Callable[[], None],
        on_tick: Optional[Callable[[int], None]],
    ) -> None:
        ticks = math.ceil(round((deadline - self._now()) / self._tick_interval, 6))

        for remaining_ticks in range(max(ticks, 0), -1, -1):
            tick_at = deadline - remaining_ticks * self._tick_interval
            wait = tick_at - self._now()
            if wait > 0:
                await self._sleep(wait)

            if on_tick is not None:
                try:
                    on_tick(whole_seconds(deadline - tick_at))
                except Exception as e:
                    logger.error(f"Error in countdown callback: {e}")

        # Detach before firing so the callback may schedule the next retry
        self._task = None
        self._deadline = None
        try:
            on_fire()
        except Exception as e:
            logger.error(f"Error in retry callback: {e}")
