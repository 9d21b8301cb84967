"""LUN resolution - device naming strategies and the resolver."""

from diskprobe.resolver.resolver import LunResolver, get_lun_resolver, resolve_lun
from diskprobe.resolver.strategies import (
    LEGACY_SCSI,
    LEGACY_UNIFIED,
    NVME_SERIAL,
    SCSI_BY_PATH,
    AliasSymlinkStrategy,
    ByPathStrategy,
    NvmeSerialStrategy,
    ProbeStrategy,
    build_default_strategies,
    namespace_device_name,
)

__all__ = [
    "LunResolver",
    "get_lun_resolver",
    "resolve_lun",
    "ProbeStrategy",
    "AliasSymlinkStrategy",
    "NvmeSerialStrategy",
    "ByPathStrategy",
    "build_default_strategies",
    "namespace_device_name",
    "LEGACY_SCSI",
    "LEGACY_UNIFIED",
    "NVME_SERIAL",
    "SCSI_BY_PATH",
]
