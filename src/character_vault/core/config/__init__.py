"""
Configuration management for the Character Vault.

Provides a clean public API for all configuration components.
"""

# Base infrastructure
from .base import DEFAULT_QUOTA_BYTES, DEFAULT_STORAGE_KEY, Environment

# Main configuration class
from .main import Config

# Runtime configuration
from .runtime import ImageConfig, MonitoringConfig, StorageConfig

# Public API
__all__ = [
    # Main class
    "Config",
    # Base
    "Environment",
    "DEFAULT_STORAGE_KEY",
    "DEFAULT_QUOTA_BYTES",
    # Runtime
    "ImageConfig",
    "MonitoringConfig",
    "StorageConfig",
]
