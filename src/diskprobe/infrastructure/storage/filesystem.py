"""Read-only filesystem access used by the device probes.

Probing code never touches ``os`` directly; it goes through a ``FileSystem``
so tests can point it at fixture trees or inject faults.
"""

from __future__ import annotations

import glob as _glob
import os
from abc import ABC, abstractmethod
from typing import List, Optional


class FileSystem(ABC):
    """Filesystem primitives needed to locate block devices."""

    @abstractmethod
    def stat(self, path: str) -> os.stat_result:
        """Stat ``path``, following symlinks."""

    @abstractmethod
    def realpath(self, path: str) -> str:
        """Resolve every symlink hop in ``path``; raise if any hop is missing."""

    @abstractmethod
    def glob(self, pattern: str) -> List[str]:
        """Expand ``pattern``; results are sorted."""

    @abstractmethod
    def listdir(self, path: str) -> List[str]:
        """List entry names of ``path``, sorted."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        ...


class OSFileSystem(FileSystem):
    """FileSystem backed by the host OS."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def realpath(self, path: str) -> str:
        return os.path.realpath(path, strict=True)

    def glob(self, pattern: str) -> List[str]:
        return sorted(_glob.glob(pattern))

    def listdir(self, path: str) -> List[str]:
        return sorted(os.listdir(path))

    def read_text(self, path: str) -> str:
        # sysfs attributes are not guaranteed to be valid UTF-8
        with open(path, "rb") as handle:
            data = handle.read()
        return data.decode("utf-8", errors="replace")


def is_absent(exc: BaseException) -> bool:
    """Check if an OS error means the path is not there (yet)."""
    return isinstance(exc, (FileNotFoundError, NotADirectoryError))


_default_filesystem: Optional[FileSystem] = None


def get_default_filesystem() -> FileSystem:
    global _default_filesystem
    if _default_filesystem is None:
        _default_filesystem = OSFileSystem()
    return _default_filesystem
