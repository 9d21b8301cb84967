"""Domain errors."""

from typing import Optional


class DiskProbeError(Exception):
    """Base error."""
    pass


class InvalidLunError(DiskProbeError, ValueError):
    """LUN is not a non-negative integer."""
    pass


class DeviceResolutionError(DiskProbeError):
    """A device path exists but could not be inspected.

    Raised for every filesystem failure other than plain absence: the path
    and the failing operation are kept so callers can tell which probe broke.
    """

    def __init__(self, operation: str, path: str, reason: object = ""):
        self.operation = operation
        self.path = path
        self.reason = reason
        message = f"{operation} {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class WaitCancelledError(DiskProbeError):
    """The wait was cancelled before a device showed up."""

    def __init__(self, reason: Optional[object] = None):
        self.reason = reason
        if reason is None or reason == "":
            super().__init__("wait cancelled")
        else:
            super().__init__(f"wait cancelled: {reason}")


class DeadlineExceededError(WaitCancelledError):
    """The wait deadline elapsed."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        reason = "deadline exceeded"
        if timeout is not None:
            reason = f"deadline exceeded after {timeout:g}s"
        super().__init__(reason)
