"""Device naming strategies.

Each strategy knows one way the guest kernel (or udev) can expose the disk
attached at a LUN. Strategies are pure readers: they never create, remove or
rename anything.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from diskprobe.domain.errors import DeviceResolutionError
from diskprobe.domain.results import ResolutionResult
from diskprobe.infrastructure.storage.filesystem import (
    FileSystem,
    get_default_filesystem,
    is_absent,
)

if TYPE_CHECKING:
    from diskprobe.config import Settings


LEGACY_SCSI = "legacy_scsi"
LEGACY_UNIFIED = "legacy_unified"
NVME_SERIAL = "nvme_serial"
SCSI_BY_PATH = "scsi_by_path"


class ProbeStrategy(ABC):
    """One device naming scheme.

    Subclasses implement ``_locate``: return the device path, return None
    when the scheme shows no device for the LUN, or raise
    ``DeviceResolutionError`` for anything else.
    """

    #: Stable identifier used in logs and results
    name: str = ""

    def __init__(self, fs: Optional[FileSystem] = None):
        self._fs = fs or get_default_filesystem()

    @abstractmethod
    def _locate(self, lun: int) -> Optional[str]:
        ...

    @abstractmethod
    def describe(self, lun: int) -> str:
        """Human readable location this strategy inspects for ``lun``."""

    def probe(self, lun: int) -> ResolutionResult:
        try:
            device_path = self._locate(lun)
        except DeviceResolutionError as exc:
            return ResolutionResult.failure(exc, self.name)
        if device_path:
            return ResolutionResult.found_at(device_path, self.name)
        return ResolutionResult.not_found(self.name)

    def _realpath(self, path: str) -> Optional[str]:
        """Dereference ``path``; None when it vanished mid-resolution."""
        try:
            return self._fs.realpath(path)
        except OSError as exc:
            if is_absent(exc):
                return None
            raise DeviceResolutionError("realpath", path, exc) from exc

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class AliasSymlinkStrategy(ProbeStrategy):
    """Fixed alias symlink keyed only by LUN, e.g. ``/dev/disk/azure/lun3``."""

    def __init__(self, name: str, template: str, fs: Optional[FileSystem] = None):
        super().__init__(fs)
        if "{lun}" not in template:
            raise ValueError(f"alias template must contain '{{lun}}': {template}")
        self.name = name
        self.template = template

    def candidate_path(self, lun: int) -> str:
        return self.template.format(lun=lun)

    def describe(self, lun: int) -> str:
        return self.candidate_path(lun)

    def _locate(self, lun: int) -> Optional[str]:
        path = self.candidate_path(lun)
        try:
            self._fs.stat(path)
        except OSError as exc:
            if is_absent(exc):
                return None
            raise DeviceResolutionError("stat", path, exc) from exc
        return self._realpath(path)


class NvmeSerialStrategy(ProbeStrategy):
    """Match NVMe namespaces by the trailing digits of their serial.

    The serial of the namespace for LUN ``n`` is expected to end with
    ``n + offset``. The offset is 1 on the hypervisor generations seen so
    far; it is a plain suffix match, so LUN 0 also matches a serial ending
    in ``11``.
    """

    name = NVME_SERIAL

    def __init__(
        self,
        pattern: str,
        device_root: str = "/dev",
        *,
        offset: int = 1,
        fs: Optional[FileSystem] = None,
    ):
        super().__init__(fs)
        self.pattern = pattern
        self.device_root = device_root
        self.offset = offset

    def describe(self, lun: int) -> str:
        return f"{self.pattern} (serial suffix {lun + self.offset})"

    def expected_suffix(self, lun: int) -> str:
        return str(lun + self.offset)

    def _locate(self, lun: int) -> Optional[str]:
        try:
            serial_paths = self._fs.glob(self.pattern)
        except OSError as exc:
            raise DeviceResolutionError("glob", self.pattern, exc) from exc

        suffix = self.expected_suffix(lun)
        for serial_path in serial_paths:
            try:
                serial = self._fs.read_text(serial_path).strip()
            except OSError as exc:
                if is_absent(exc):
                    continue
                raise DeviceResolutionError("read", serial_path, exc) from exc
            if serial.endswith(suffix):
                return os.path.join(self.device_root, namespace_device_name(serial_path))
        return None


class ByPathStrategy(ProbeStrategy):
    """First udev ``by-path`` entry whose name contains ``lun<N>``."""

    name = SCSI_BY_PATH

    def __init__(self, directory: str, fs: Optional[FileSystem] = None):
        super().__init__(fs)
        self.directory = directory

    def describe(self, lun: int) -> str:
        return os.path.join(self.directory, f"*lun{lun}*")

    def _locate(self, lun: int) -> Optional[str]:
        try:
            entries = self._fs.listdir(self.directory)
        except OSError as exc:
            if is_absent(exc):
                return None
            raise DeviceResolutionError("readdir", self.directory, exc) from exc

        needle = f"lun{lun}"
        for entry in entries:
            if needle in entry:
                return self._realpath(os.path.join(self.directory, entry))
        return None


def namespace_device_name(serial_path: str) -> str:
    """Name of the NVMe namespace directory holding ``serial_path``.

    ``/sys/class/nvme/nvme0/nvme0n1/device/serial`` -> ``nvme0n1``; a serial
    directly inside the namespace directory works as well.
    """
    parent = os.path.dirname(serial_path)
    if os.path.basename(parent) == "device":
        parent = os.path.dirname(parent)
    return os.path.basename(parent)


def build_default_strategies(
    settings: Optional["Settings"] = None,
    fs: Optional[FileSystem] = None,
) -> List[ProbeStrategy]:
    """The fixed, ordered strategy list; earlier entries win."""
    if settings is None:
        from diskprobe.config import settings as global_settings

        settings = global_settings
    fs = fs or get_default_filesystem()
    return [
        AliasSymlinkStrategy(LEGACY_SCSI, settings.legacy_scsi_template, fs),
        AliasSymlinkStrategy(LEGACY_UNIFIED, settings.legacy_unified_template, fs),
        NvmeSerialStrategy(
            settings.nvme_serial_glob,
            settings.device_root,
            offset=settings.nvme_serial_offset,
            fs=fs,
        ),
        ByPathStrategy(settings.by_path_dir, fs),
    ]
