"""Attachment Waiter - polls the resolver until a device shows up.

Disk attachment is asynchronous: the hypervisor reports success before the
guest has created the device node. The waiter re-probes on a fixed interval
until one of:
- the resolver finds the device
- the resolver fails hard (never retried)
- the caller's context is cancelled or its deadline elapses
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Iterable, Optional

import structlog

from diskprobe.config import Settings
from diskprobe.domain.results import WaitOutcome, WaitStatus, validate_lun
from diskprobe.resolver.resolver import LunResolver
from diskprobe.runtime.context import WaitContext


class AttachmentWaiter:
    """Wait for the device attached at a LUN.

    Each wait is independent; any number of LUNs can be waited on
    concurrently from separate tasks.

    Usage:
        waiter = AttachmentWaiter()
        outcome = await waiter.wait(3, WaitContext(timeout=30))
        if outcome.resolved:
            print(outcome.device_path)
    """

    def __init__(
        self,
        resolver: Optional[LunResolver] = None,
        *,
        poll_interval: Optional[float] = None,
        settings: Optional[Settings] = None,
        logger: Optional[Any] = None,
    ):
        """Initialize the waiter.

        Args:
            resolver: Resolver to poll; defaults to one built from ``settings``
            poll_interval: Seconds between probes; defaults to the settings value
            settings: Settings override; defaults to the global settings
            logger: structlog-style logger; defaults to a module logger
        """
        if settings is None:
            from diskprobe.config import settings as global_settings

            settings = global_settings
        if poll_interval is not None and poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {poll_interval}")
        self._settings = settings
        self._logger = logger if logger is not None else structlog.get_logger()
        self._resolver = resolver or LunResolver(settings=settings, logger=self._logger)
        self._poll_interval = poll_interval or settings.poll_interval_seconds

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def resolver(self) -> LunResolver:
        return self._resolver

    async def wait(self, lun: int, context: Optional[WaitContext] = None) -> WaitOutcome:
        """Poll until the device for ``lun`` is resolved, cancelled or failed.

        Args:
            lun: Attachment slot to wait for
            context: Cancellation handle; defaults to a context using the
                configured default timeout (none unless configured)

        Returns:
            WaitOutcome describing how the wait ended

        Raises:
            InvalidLunError: if ``lun`` is not a non-negative integer
        """
        lun = validate_lun(lun)
        if context is None:
            context = WaitContext(timeout=self._settings.default_timeout)

        started = time.monotonic()
        attempts = 0
        log = self._logger.bind(lun=lun)
        log.info("waiting_for_device", interval_ms=round(self._poll_interval * 1000))

        def finish(status: WaitStatus, **fields: Any) -> WaitOutcome:
            return WaitOutcome(
                status=status,
                lun=lun,
                attempts=attempts,
                duration_ms=(time.monotonic() - started) * 1000,
                **fields,
            )

        while True:
            if context.cancelled:
                log.info("wait_cancelled", attempts=attempts, reason=str(context.cause))
                return finish(WaitStatus.CANCELLED, cause=context.cause)

            attempts += 1
            result = self._resolver.resolve(lun)
            if result.failed:
                log.error("wait_failed", attempts=attempts, error=str(result.error))
                return finish(WaitStatus.FAILED, cause=result.error, strategy=result.strategy)
            if result.found:
                return finish(
                    WaitStatus.RESOLVED,
                    device_path=result.device_path,
                    strategy=result.strategy,
                )

            log.debug("device_not_attached", attempt=attempts)
            if await context.sleep(self._poll_interval):
                log.info("wait_cancelled", attempts=attempts, reason=str(context.cause))
                return finish(WaitStatus.CANCELLED, cause=context.cause)

    async def wait_for_device(self, lun: int, context: Optional[WaitContext] = None) -> str:
        """Wait and return the device path.

        Raises:
            WaitCancelledError: if the context was cancelled or timed out
            DeviceResolutionError: on a hard filesystem error
        """
        outcome = await self.wait(lun, context)
        return outcome.unwrap()

    async def wait_for_devices(
        self,
        luns: Iterable[int],
        context: Optional[WaitContext] = None,
    ) -> Dict[int, WaitOutcome]:
        """Wait for several LUNs concurrently under one context."""
        unique = list(dict.fromkeys(validate_lun(lun) for lun in luns))
        if context is None:
            context = WaitContext(timeout=self._settings.default_timeout)
        outcomes = await asyncio.gather(*(self.wait(lun, context) for lun in unique))
        return dict(zip(unique, outcomes))


# Global default waiter
_default_waiter: Optional[AttachmentWaiter] = None


def get_attachment_waiter() -> AttachmentWaiter:
    global _default_waiter
    if _default_waiter is None:
        _default_waiter = AttachmentWaiter()
    return _default_waiter


async def wait_for_device(lun: int, timeout: Optional[float] = None) -> str:
    """Convenience: wait for ``lun`` with the default waiter.

    Args:
        lun: Attachment slot to wait for
        timeout: Seconds before giving up; None uses the configured default
            timeout, 0 or less waits without a deadline

    Returns:
        The resolved device path
    """
    waiter = get_attachment_waiter()
    if timeout is None:
        context = None
    elif timeout <= 0:
        context = WaitContext()
    else:
        context = WaitContext(timeout=timeout)
    return await waiter.wait_for_device(lun, context)
