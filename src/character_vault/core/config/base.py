"""
Base configuration infrastructure for the Character Vault.

Contains shared constants and the Environment enum.
"""

import logging
import re
from enum import Enum

logger = logging.getLogger(__name__)

# Key the whole character collection is stored under. Kept stable so data
# written by earlier builds of the sheet app is still found.
DEFAULT_STORAGE_KEY = "pw_characters_v1"

# Storage keys double as file names in the file backend.
STORAGE_KEY_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")

# Browsers give localStorage roughly 5 MiB per origin.
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

DEFAULT_MAX_IMAGE_BYTES = 2 * 1024 * 1024

ENV_PREFIX = "CHARVAULT_"


class Environment(Enum):
    """Environment types for configuration."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
