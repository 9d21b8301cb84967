"""diskprobe configuration settings."""

import os
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from diskprobe.infrastructure.config.settings_utils import (
    env_bool,
    env_float,
    env_int,
    env_str,
)
from diskprobe.infrastructure.logging_setup import configure_logging


DEFAULT_AZURE_ALIAS_ROOT = "/dev/disk/azure"
DEFAULT_NVME_SERIAL_GLOB = "/sys/class/nvme/nvme*/nvme*n1/device/serial"
DEFAULT_BY_PATH_DIR = "/dev/disk/by-path"
DEFAULT_DEVICE_ROOT = "/dev"


class Settings(BaseSettings):
    """Application settings with env var support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Device naming locations
    azure_alias_root: str = Field(
        default_factory=lambda: env_str("DISKPROBE_AZURE_ALIAS_ROOT", DEFAULT_AZURE_ALIAS_ROOT)
    )
    nvme_serial_glob: str = Field(
        default_factory=lambda: env_str("DISKPROBE_NVME_SERIAL_GLOB", DEFAULT_NVME_SERIAL_GLOB)
    )
    nvme_serial_offset: int = Field(
        default_factory=lambda: env_int("DISKPROBE_NVME_SERIAL_OFFSET", 1, minimum=0)
    )
    by_path_dir: str = Field(
        default_factory=lambda: env_str("DISKPROBE_BY_PATH_DIR", DEFAULT_BY_PATH_DIR)
    )
    device_root: str = Field(
        default_factory=lambda: env_str("DISKPROBE_DEVICE_ROOT", DEFAULT_DEVICE_ROOT)
    )

    # Waiting
    poll_interval_ms: int = Field(
        default_factory=lambda: env_int("DISKPROBE_POLL_INTERVAL_MS", 100, minimum=1),
        ge=1,
    )
    default_timeout_seconds: float = Field(
        default_factory=lambda: env_float("DISKPROBE_TIMEOUT_SECONDS", 0.0, minimum=0.0),
        ge=0.0,
    )

    # Observability
    log_level: str = Field(default_factory=lambda: env_str("DISKPROBE_LOG_LEVEL", "INFO"))
    log_json: bool = Field(default_factory=lambda: env_bool("DISKPROBE_LOG_JSON", False))

    @model_validator(mode="after")
    def _normalize_paths_validator(self) -> "Settings":
        self.azure_alias_root = self.azure_alias_root.rstrip("/") or "/"
        self.by_path_dir = self.by_path_dir.rstrip("/") or "/"
        self.device_root = self.device_root.rstrip("/") or "/"
        return self

    @property
    def legacy_scsi_template(self) -> str:
        """Fixed SCSI alias, e.g. ``/dev/disk/azure/scsi1/lun3``."""
        return os.path.join(self.azure_alias_root, "scsi1", "lun{lun}")

    @property
    def legacy_unified_template(self) -> str:
        """Alias shared by NVMe and SCSI disks, e.g. ``/dev/disk/azure/lun3``."""
        return os.path.join(self.azure_alias_root, "lun{lun}")

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @property
    def default_timeout(self) -> Optional[float]:
        """Deadline applied when the caller passes no wait context, or None."""
        if self.default_timeout_seconds <= 0:
            return None
        return self.default_timeout_seconds

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)


# Global settings instance
settings = Settings()
