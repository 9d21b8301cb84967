"""LUN Resolver - maps a LUN to its block device.

Strategies run in a fixed order and the first one that finds a device, or
fails hard, decides the result. A probe is a single synchronous pass over
the filesystem; nothing is cached between calls.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import structlog

from diskprobe.config import Settings
from diskprobe.domain.results import ResolutionResult, validate_lun
from diskprobe.infrastructure.storage.filesystem import FileSystem
from diskprobe.resolver.strategies import ProbeStrategy, build_default_strategies


class LunResolver:
    """Probe device naming strategies for a LUN, first match wins.

    Usage:
        resolver = LunResolver()
        result = resolver.resolve(3)
        if result.found:
            print(result.device_path)
    """

    def __init__(
        self,
        strategies: Optional[Sequence[ProbeStrategy]] = None,
        *,
        settings: Optional[Settings] = None,
        fs: Optional[FileSystem] = None,
        logger: Optional[Any] = None,
    ):
        """Initialize the resolver.

        Args:
            strategies: Ordered strategies; defaults to the built-in list
                derived from ``settings``
            settings: Settings used to build the default strategies
            fs: Filesystem handed to the default strategies
            logger: structlog-style logger; defaults to the module logger
        """
        if strategies is None:
            strategies = build_default_strategies(settings, fs)
        self._strategies: Tuple[ProbeStrategy, ...] = tuple(strategies)
        self._logger = logger if logger is not None else structlog.get_logger()

    @property
    def strategies(self) -> Tuple[ProbeStrategy, ...]:
        return self._strategies

    def resolve(self, lun: int) -> ResolutionResult:
        """Probe every strategy in order and return the first decisive result.

        Raises:
            InvalidLunError: if ``lun`` is not a non-negative integer
        """
        lun = validate_lun(lun)
        for strategy in self._strategies:
            self._logger.debug(
                "probe_strategy",
                lun=lun,
                strategy=strategy.name,
                location=strategy.describe(lun),
            )
            result = strategy.probe(lun)
            if result.found:
                self._logger.info(
                    "device_found",
                    lun=lun,
                    strategy=result.strategy,
                    device=result.device_path,
                )
                return result
            if result.failed:
                self._logger.warning(
                    "probe_failed",
                    lun=lun,
                    strategy=result.strategy,
                    error=str(result.error),
                )
                return result
        return ResolutionResult.not_found()


_default_resolver: Optional[LunResolver] = None


def get_lun_resolver() -> LunResolver:
    """Resolver for the host filesystem built from the global settings."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = LunResolver()
    return _default_resolver


def resolve_lun(lun: int) -> ResolutionResult:
    """Convenience: probe once with the default resolver."""
    return get_lun_resolver().resolve(lun)
