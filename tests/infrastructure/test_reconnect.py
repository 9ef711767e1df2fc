"""Tests for backoff and the retry scheduler."""

import asyncio

import pytest

from tradelog.infrastructure.backend.connection import ExponentialBackoffStrategy, RetryScheduler
from tests.fakes import FakeClock


class TestExponentialBackoffStrategy:
    """Tests for ExponentialBackoffStrategy."""

    def test_default_delays(self):
        strategy = ExponentialBackoffStrategy()

        assert strategy.calculate_delay(0) == 3.0
        assert strategy.calculate_delay(1) == 4.5
        assert strategy.calculate_delay(2) == 6.75
        assert strategy.calculate_delay(3) == 10.125

        # Test max delay cap
        assert strategy.calculate_delay(4) == 15.0
        assert strategy.calculate_delay(7) == 15.0

    def test_should_retry_below_ceiling(self):
        strategy = ExponentialBackoffStrategy()

        assert strategy.max_attempts == 8
        assert strategy.should_retry(0) is True
        assert strategy.should_retry(7) is True
        assert strategy.should_retry(8) is False

    def test_initial_delay_is_capped(self):
        strategy = ExponentialBackoffStrategy(initial_delay=20.0, max_delay=15.0)
        assert strategy.calculate_delay(0) == 15.0

    def test_rejects_negative_configuration(self):
        with pytest.raises(ValueError):
            ExponentialBackoffStrategy(max_attempts=-1)
        with pytest.raises(ValueError):
            ExponentialBackoffStrategy(initial_delay=-1.0)


class TestRetryScheduler:
    """Tests for RetryScheduler."""

    @pytest.mark.asyncio
    async def test_counts_down_from_deadline_then_fires(self):
        clock = FakeClock()
        scheduler = RetryScheduler(clock=clock, sleep=clock.sleep)
        ticks: list[tuple[float, int]] = []
        fired = asyncio.Event()

        scheduler.schedule(3.0, on_fire=fired.set, on_tick=lambda s: ticks.append((clock.now, s)))
        assert scheduler.is_pending
        assert scheduler.seconds_remaining == 3

        await asyncio.wait_for(fired.wait(), 1)

        assert ticks == [(0.0, 3), (1.0, 2), (2.0, 1), (3.0, 0)]
        assert clock.now == 3.0
        assert not scheduler.is_pending
        assert scheduler.seconds_remaining is None

    @pytest.mark.asyncio
    async def test_fractional_delay_rounds_up_and_fires_on_time(self):
        clock = FakeClock()
        scheduler = RetryScheduler(clock=clock, sleep=clock.sleep)
        ticks: list[int] = []
        fired = asyncio.Event()

        scheduler.schedule(4.5, on_fire=fired.set, on_tick=ticks.append)
        await asyncio.wait_for(fired.wait(), 1)

        assert ticks == [5, 4, 3, 2, 1, 0]
        assert clock.now == pytest.approx(4.5)

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self):
        scheduler = RetryScheduler()
        fired = []

        scheduler.schedule(0.05, on_fire=lambda: fired.append(True))
        scheduler.cancel()
        await asyncio.sleep(0.1)

        assert fired == []
        assert not scheduler.is_pending

    @pytest.mark.asyncio
    async def test_schedule_replaces_pending_retry(self):
        scheduler = RetryScheduler(tick_interval=0.01)
        fired = []

        scheduler.schedule(0.05, on_fire=lambda: fired.append("first"))
        scheduler.schedule(0.02, on_fire=lambda: fired.append("second"))
        await asyncio.sleep(0.1)

        assert fired == ["second"]

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_stop_countdown(self):
        clock = FakeClock()
        scheduler = RetryScheduler(clock=clock, sleep=clock.sleep)
        fired = asyncio.Event()

        def bad_tick(seconds: int) -> None:
            raise RuntimeError("render failed")

        scheduler.schedule(2.0, on_fire=fired.set, on_tick=bad_tick)
        await asyncio.wait_for(fired.wait(), 1)

    @pytest.mark.asyncio
    async def test_stop_awaits_cancellation(self):
        scheduler = RetryScheduler()
        scheduler.schedule(10.0, on_fire=lambda: None)

        await scheduler.stop()

        assert not scheduler.is_pending

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            RetryScheduler(tick_interval=0)
