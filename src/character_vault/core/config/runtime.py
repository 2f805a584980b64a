"""
Runtime configuration for the Character Vault.

Contains storage, image and monitoring configuration classes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..exceptions import ConfigurationError
from .base import (
    DEFAULT_MAX_IMAGE_BYTES,
    DEFAULT_QUOTA_BYTES,
    DEFAULT_STORAGE_KEY,
    STORAGE_KEY_PATTERN,
)

STORAGE_BACKENDS = ("file", "memory")


@dataclass
class StorageConfig:
    """Where and how the character collection is persisted."""

    data_dir: Path = field(default_factory=lambda: Path.cwd() / "data")
    storage_key: str = DEFAULT_STORAGE_KEY
    backend: str = "file"  # file | memory
    quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES  # None = unlimited

    def __post_init__(self) -> None:
        """Validate storage configuration."""
        self.data_dir = Path(self.data_dir)
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Invalid storage backend: {self.backend}",
                error_code="INVALID_STORAGE_BACKEND",
                details={"backend": self.backend, "allowed": list(STORAGE_BACKENDS)},
            )
        if not STORAGE_KEY_PATTERN.fullmatch(self.storage_key):
            raise ConfigurationError(
                f"Invalid storage key: {self.storage_key!r}; use letters, digits, '_', '.' and '-'",
                error_code="INVALID_STORAGE_KEY",
                details={"storage_key": self.storage_key},
            )
        if self.quota_bytes is not None and self.quota_bytes <= 0:
            raise ConfigurationError(
                f"Storage quota must be positive, got {self.quota_bytes}",
                error_code="INVALID_STORAGE_QUOTA",
            )


@dataclass
class ImageConfig:
    """Limits applied when encoding appearance images."""

    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    allowed_types: List[str] = field(
        default_factory=lambda: [
            "image/png",
            "image/jpeg",
            "image/gif",
            "image/webp",
            "image/bmp",
            "image/svg+xml",
        ]
    )

    def __post_init__(self) -> None:
        if self.max_bytes <= 0:
            raise ConfigurationError(
                f"Image size limit must be positive, got {self.max_bytes}",
                error_code="INVALID_IMAGE_LIMIT",
            )


@dataclass
class MonitoringConfig:
    """Logging configuration."""

    log_level: str = "WARNING"
    structured_logging: bool = False  # JSON lines instead of console output
