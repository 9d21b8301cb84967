"""Storage infrastructure for diskprobe.

Provides read-only filesystem access for device probing.
"""

from .filesystem import (
    FileSystem,
    OSFileSystem,
    get_default_filesystem,
    is_absent,
)

__all__ = [
    "FileSystem",
    "OSFileSystem",
    "get_default_filesystem",
    "is_absent",
]
