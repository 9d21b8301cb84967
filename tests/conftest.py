"""Shared fixtures: fake device trees under tmp_path."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from diskprobe.config import Settings
from diskprobe.infrastructure.storage.filesystem import OSFileSystem


class DeviceTree:
    """A miniature /dev + /sys layout rooted in a temp directory."""

    def __init__(self, root: Path):
        self.root = root
        self.dev = root / "dev"
        self.alias_root = self.dev / "disk" / "azure"
        self.by_path = self.dev / "disk" / "by-path"
        self.sys_nvme = root / "sys" / "class" / "nvme"
        self.dev.mkdir(parents=True)

    def settings(self, **overrides) -> Settings:
        values = {
            "azure_alias_root": str(self.alias_root),
            "nvme_serial_glob": str(self.sys_nvme / "nvme*" / "nvme*n1" / "device" / "serial"),
            "nvme_serial_offset": 1,
            "by_path_dir": str(self.by_path),
            "device_root": str(self.dev),
            "poll_interval_ms": 100,
            "default_timeout_seconds": 0.0,
        }
        values.update(overrides)
        return Settings(**values)

    def add_device(self, name: str) -> Path:
        node = self.dev / name
        node.touch(exist_ok=True)
        return node

    @staticmethod
    def link(link: Path, target: Path) -> None:
        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(target)

    def scsi_alias(self, lun: int) -> Path:
        return self.alias_root / "scsi1" / f"lun{lun}"

    def unified_alias(self, lun: int) -> Path:
        return self.alias_root / f"lun{lun}"

    def add_scsi_alias(self, lun: int, device: str = "sdc") -> str:
        target = self.add_device(device)
        self.link(self.scsi_alias(lun), target)
        return os.path.realpath(target)

    def add_unified_alias(self, lun: int, device: str = "sdd") -> str:
        target = self.add_device(device)
        self.link(self.unified_alias(lun), target)
        return os.path.realpath(target)

    def add_nvme(
        self,
        serial: str,
        controller: str = "nvme0",
        namespace: str = "nvme0n1",
    ) -> str:
        device_dir = self.sys_nvme / controller / namespace / "device"
        device_dir.mkdir(parents=True, exist_ok=True)
        (device_dir / "serial").write_text(f"{serial}\n")
        return os.path.join(str(self.dev), namespace)

    def nvme_serial_path(self, controller: str = "nvme0", namespace: str = "nvme0n1") -> str:
        return str(self.sys_nvme / controller / namespace / "device" / "serial")

    def add_by_path(self, name: str, device: str = "sde") -> str:
        target = self.add_device(device)
        self.link(self.by_path / name, target)
        return os.path.realpath(target)


class FaultyFileSystem(OSFileSystem):
    """OSFileSystem that records calls and raises configured errors."""

    def __init__(self, failures: Optional[Dict[Tuple[str, str], OSError]] = None):
        self.failures = dict(failures or {})
        self.calls: List[Tuple[str, str]] = []

    def fail(self, operation: str, path: object, error: OSError) -> None:
        self.failures[(operation, str(path))] = error

    def _check(self, operation: str, path: str) -> None:
        self.calls.append((operation, path))
        error = self.failures.get((operation, path))
        if error is not None:
            raise error

    def stat(self, path):
        self._check("stat", path)
        return super().stat(path)

    def realpath(self, path):
        self._check("realpath", path)
        return super().realpath(path)

    def glob(self, pattern):
        self._check("glob", pattern)
        return super().glob(pattern)

    def listdir(self, path):
        self._check("listdir", path)
        return super().listdir(path)

    def read_text(self, path):
        self._check("read_text", path)
        return super().read_text(path)


@pytest.fixture
def tree(tmp_path) -> DeviceTree:
    return DeviceTree(tmp_path)


@pytest.fixture
def faulty_fs() -> FaultyFileSystem:
    return FaultyFileSystem()
