"""Runtime - waiting for asynchronously attached disks."""

from diskprobe.runtime.context import WaitContext
from diskprobe.runtime.waiter import (
    AttachmentWaiter,
    get_attachment_waiter,
    wait_for_device,
)

__all__ = [
    "AttachmentWaiter",
    "WaitContext",
    "get_attachment_waiter",
    "wait_for_device",
]
