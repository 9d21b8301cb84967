"""Domain models for diskprobe."""

from .errors import (
    DeadlineExceededError,
    DeviceResolutionError,
    DiskProbeError,
    InvalidLunError,
    WaitCancelledError,
)
from .results import (
    ResolutionResult,
    ResolutionStatus,
    WaitOutcome,
    WaitStatus,
    validate_lun,
)

__all__ = [
    # Errors
    "DiskProbeError",
    "InvalidLunError",
    "DeviceResolutionError",
    "WaitCancelledError",
    "DeadlineExceededError",
    # Results
    "ResolutionResult",
    "ResolutionStatus",
    "WaitOutcome",
    "WaitStatus",
    "validate_lun",
]
