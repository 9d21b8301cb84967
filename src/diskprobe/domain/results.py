"""Outcome types for device resolution and attachment waits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from diskprobe.domain.errors import InvalidLunError


class ResolutionStatus(Enum):
    """Result of a single probe."""
    FOUND = auto()
    NOT_FOUND = auto()
    ERROR = auto()


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of probing the filesystem once for a LUN.

    Attributes:
        status: probe status
        device_path: fully resolved device path (FOUND only)
        error: hard failure (ERROR only)
        strategy: name of the strategy that produced this result
    """
    status: ResolutionStatus
    device_path: str = ""
    error: Optional[Exception] = None
    strategy: str = ""

    @classmethod
    def found_at(cls, device_path: str, strategy: str = "") -> "ResolutionResult":
        return cls(ResolutionStatus.FOUND, device_path=device_path, strategy=strategy)

    @classmethod
    def not_found(cls, strategy: str = "") -> "ResolutionResult":
        return cls(ResolutionStatus.NOT_FOUND, strategy=strategy)

    @classmethod
    def failure(cls, error: Exception, strategy: str = "") -> "ResolutionResult":
        return cls(ResolutionStatus.ERROR, error=error, strategy=strategy)

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND

    @property
    def failed(self) -> bool:
        return self.status == ResolutionStatus.ERROR


class WaitStatus(Enum):
    """Terminal state of an attachment wait."""
    RESOLVED = auto()
    CANCELLED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class WaitOutcome:
    """Terminal result of waiting for a LUN to show up.

    Attributes:
        status: terminal status
        lun: the LUN that was waited on
        device_path: resolved device path (RESOLVED only, empty otherwise)
        cause: cancellation reason or hard error
        attempts: number of probes performed
        duration_ms: wall time spent waiting
        strategy: strategy that located the device
    """
    status: WaitStatus
    lun: int
    device_path: str = ""
    cause: Optional[Exception] = None
    attempts: int = 0
    duration_ms: float = 0.0
    strategy: str = ""

    @property
    def resolved(self) -> bool:
        return self.status == WaitStatus.RESOLVED

    @property
    def cancelled(self) -> bool:
        return self.status == WaitStatus.CANCELLED

    @property
    def failed(self) -> bool:
        return self.status == WaitStatus.FAILED

    def unwrap(self) -> str:
        """Return the device path, or raise the cancellation/failure cause."""
        if self.resolved:
            return self.device_path
        if self.cause is not None:
            raise self.cause
        raise RuntimeError(f"wait for lun {self.lun} ended without a cause: {self.status.name}")


def validate_lun(lun: object) -> int:
    """Return ``lun`` as an int, rejecting negatives, bools and non-integers."""
    if isinstance(lun, bool) or not isinstance(lun, int):
        raise InvalidLunError(f"LUN must be a non-negative integer, got {lun!r}")
    if lun < 0:
        raise InvalidLunError(f"LUN must be a non-negative integer, got {lun}")
    return int(lun)
