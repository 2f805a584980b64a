"""
Main configuration class for the Character Vault.

Contains the Config class that gathers the storage, image and monitoring
settings and knows how to read them from YAML files and the environment.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import ConfigurationError
from .base import ENV_PREFIX, Environment
from .runtime import ImageConfig, MonitoringConfig, StorageConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Main configuration class for the Character Vault."""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    storage: StorageConfig = field(default_factory=StorageConfig)
    images: ImageConfig = field(default_factory=ImageConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self) -> None:
        """Apply environment-specific defaults."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
        elif self.environment == Environment.TESTING:
            self.debug = True
            self.monitoring.log_level = "DEBUG"

        if self.debug:
            self.monitoring.log_level = "DEBUG"

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        data = YAMLConfigLoader.load_yaml(config_path)

        environment = _parse_environment(data.get("environment", "development"))
        storage_data = dict(data.get("storage") or {})

        # An explicitly configured backend always wins; testing defaults to
        # the in-memory store so test runs never touch the data directory.
        if environment == Environment.TESTING and "backend" not in storage_data:
            storage_data["backend"] = "memory"

        try:
            return cls(
                environment=environment,
                debug=bool(data.get("debug", False)),
                storage=StorageConfig(**storage_data),
                images=ImageConfig(**(data.get("images") or {})),
                monitoring=MonitoringConfig(**(data.get("monitoring") or {})),
            )
        except TypeError as e:
            raise ConfigurationError(
                f"Unknown configuration option in {config_path}: {e}",
                error_code="CONFIG_UNKNOWN_OPTION",
                details={"path": str(config_path)},
            ) from e

    @classmethod
    def from_env(cls, base: Optional["Config"] = None) -> "Config":
        """Load configuration from CHARVAULT_* environment variables.

        Values not present in the environment come from ``base`` (or the
        defaults when no base is given).
        """
        base = base or cls()

        def getenv_bool(name: str, default: bool) -> bool:
            v = os.getenv(ENV_PREFIX + name)
            return default if v is None else v.lower() in {"1", "true", "yes", "on"}

        def getenv_int(name: str, default: Optional[int]) -> Optional[int]:
            v = os.getenv(ENV_PREFIX + name)
            if v is None:
                return default
            if v.lower() in {"", "none", "unlimited"}:
                return None
            try:
                return int(v)
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_PREFIX + name} must be an integer, got {v!r}",
                    error_code="CONFIG_INVALID_ENV",
                ) from e

        def getenv_str(name: str, default: str) -> str:
            return os.getenv(ENV_PREFIX + name, default)

        env = _parse_environment(getenv_str("ENV", base.environment.value))
        backend_default = base.storage.backend
        if env == Environment.TESTING and os.getenv(ENV_PREFIX + "STORAGE__BACKEND") is None:
            backend_default = "memory"

        storage = StorageConfig(
            data_dir=Path(getenv_str("STORAGE__DATA_DIR", str(base.storage.data_dir))),
            storage_key=getenv_str("STORAGE__STORAGE_KEY", base.storage.storage_key),
            backend=getenv_str("STORAGE__BACKEND", backend_default),
            quota_bytes=getenv_int("STORAGE__QUOTA_BYTES", base.storage.quota_bytes),
        )

        images = ImageConfig(
            max_bytes=getenv_int("IMAGES__MAX_BYTES", base.images.max_bytes)
            or base.images.max_bytes,
            allowed_types=list(base.images.allowed_types),
        )

        monitoring = MonitoringConfig(
            log_level=getenv_str("MONITORING__LOG_LEVEL", base.monitoring.log_level),
            structured_logging=getenv_bool(
                "MONITORING__STRUCTURED_LOGGING", base.monitoring.structured_logging
            ),
        )

        return cls(
            environment=env,
            debug=getenv_bool("DEBUG", base.debug),
            storage=storage,
            images=images,
            monitoring=monitoring,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "storage": {
                "data_dir": str(self.storage.data_dir),
                "storage_key": self.storage.storage_key,
                "backend": self.storage.backend,
                "quota_bytes": self.storage.quota_bytes,
            },
            "images": {f.name: getattr(self.images, f.name) for f in fields(self.images)},
            "monitoring": {
                "log_level": self.monitoring.log_level,
                "structured_logging": self.monitoring.structured_logging,
            },
        }

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        YAMLConfigLoader.save_yaml(self.to_dict(), Path(config_path))


def _parse_environment(value: Union[str, Environment]) -> Environment:
    if isinstance(value, Environment):
        return value
    try:
        return Environment(str(value).lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown environment: {value}",
            error_code="CONFIG_UNKNOWN_ENVIRONMENT",
            details={"allowed": [env.value for env in Environment]},
        ) from e
