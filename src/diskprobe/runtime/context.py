"""Cancellable wait handle with an optional deadline."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from diskprobe.domain.errors import DeadlineExceededError, WaitCancelledError


class WaitContext:
    """Cancellation signal shared between a caller and its waits.

    The context is cancelled either explicitly through ``cancel`` or when its
    deadline elapses. Once cancelled it stays cancelled and ``cause`` holds
    the reason. It must be used from the event loop thread.

    Usage:
        context = WaitContext(timeout=30)
        outcome = await waiter.wait(lun, context)
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")
        self._clock = clock
        self._timeout = timeout
        self._deadline = clock() + timeout if timeout is not None else None
        self._event = asyncio.Event()
        self._cause: Optional[WaitCancelledError] = None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        self._check_deadline()
        return self._cause is not None

    @property
    def cause(self) -> Optional[WaitCancelledError]:
        self._check_deadline()
        return self._cause

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def cancel(self, reason: Optional[object] = None) -> None:
        """Cancel the context; the first reason given sticks."""
        if self._cause is not None:
            return
        if isinstance(reason, WaitCancelledError):
            self._set_cause(reason)
        else:
            self._set_cause(WaitCancelledError(reason))

    def _set_cause(self, cause: WaitCancelledError) -> None:
        self._cause = cause
        self._event.set()

    def _check_deadline(self) -> None:
        if self._cause is not None or self._deadline is None:
            return
        if self._clock() >= self._deadline:
            self._set_cause(DeadlineExceededError(self._timeout))

    async def sleep(self, seconds: float) -> bool:
        """Suspend for ``seconds`` or until cancellation, whichever is first.

        Returns:
            True if the context is cancelled when the sleep ends
        """
        if self.cancelled:
            return True
        remaining = self.remaining()
        delay = seconds if remaining is None else min(seconds, remaining)
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass
        return self.cancelled

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"<WaitContext {state} deadline={self._deadline!r}>"
