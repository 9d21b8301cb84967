"""Tests for WaitContext - cancellation and deadlines."""

import asyncio

import pytest

from diskprobe.domain.errors import DeadlineExceededError, WaitCancelledError
from diskprobe.runtime.context import WaitContext


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class TestWaitContextState:
    def test_fresh_context_is_active(self):
        context = WaitContext()

        assert context.cancelled is False
        assert context.cause is None
        assert context.remaining() is None
        assert context.deadline is None

    def test_cancel_records_reason(self):
        context = WaitContext()

        context.cancel("operator abort")

        assert context.cancelled is True
        assert isinstance(context.cause, WaitCancelledError)
        assert context.cause.reason == "operator abort"
        assert "operator abort" in str(context.cause)

    def test_first_reason_sticks(self):
        context = WaitContext()

        context.cancel("first")
        context.cancel("second")

        assert context.cause.reason == "first"

    def test_cancel_accepts_error_instance(self):
        context = WaitContext()
        error = WaitCancelledError("shutdown")

        context.cancel(error)

        assert context.cause is error

    def test_cancel_without_reason(self):
        context = WaitContext()

        context.cancel()

        assert str(context.cause) == "wait cancelled"

    def test_deadline_elapses(self):
        clock = FakeClock()
        context = WaitContext(timeout=5, clock=clock)

        assert context.remaining() == pytest.approx(5.0)
        clock.now += 4.0
        assert context.cancelled is False
        assert context.remaining() == pytest.approx(1.0)
        clock.now += 1.0

        assert context.cancelled is True
        assert isinstance(context.cause, DeadlineExceededError)
        assert isinstance(context.cause, WaitCancelledError)
        assert context.remaining() == 0.0

    def test_explicit_cancel_wins_over_later_deadline(self):
        clock = FakeClock()
        context = WaitContext(timeout=1, clock=clock)

        context.cancel("user")
        clock.now += 10

        assert not isinstance(context.cause, DeadlineExceededError)

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError):
            WaitContext(timeout=-1)


class TestWaitContextSleep:
    @pytest.mark.asyncio
    async def test_sleep_runs_full_interval_when_not_cancelled(self):
        context = WaitContext()
        loop = asyncio.get_running_loop()
        start = loop.time()

        cancelled = await context.sleep(0.05)

        assert cancelled is False
        assert loop.time() - start >= 0.04

    @pytest.mark.asyncio
    async def test_sleep_wakes_on_cancel(self):
        context = WaitContext()
        loop = asyncio.get_running_loop()
        loop.call_later(0.05, context.cancel, "stop")
        start = loop.time()

        cancelled = await context.sleep(10)

        assert cancelled is True
        assert loop.time() - start < 1.0

    @pytest.mark.asyncio
    async def test_sleep_is_bounded_by_deadline(self):
        context = WaitContext(timeout=0.05)
        loop = asyncio.get_running_loop()
        start = loop.time()

        while not await context.sleep(10):
            pass

        assert loop.time() - start < 1.0
        assert isinstance(context.cause, DeadlineExceededError)

    @pytest.mark.asyncio
    async def test_sleep_on_cancelled_context_returns_immediately(self):
        context = WaitContext()
        context.cancel()

        assert await context.sleep(10) is True
