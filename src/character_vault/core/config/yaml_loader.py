"""
YAML loading utilities for configuration files.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class YAMLConfigLoader:
    """YAML loader that reports malformed files as ConfigurationError."""

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load a YAML mapping from disk.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary containing YAML data, empty dict if the file is empty

        Raises:
            FileNotFoundError: If file doesn't exist
            ConfigurationError: If the file is not valid YAML or not a mapping
        """
        if not path.exists():
            raise FileNotFoundError(f"YAML file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file {path}: {e}")
            raise ConfigurationError(
                f"Invalid YAML in {path}",
                error_code="CONFIG_PARSE_ERROR",
                details={"path": str(path), "reason": str(e)},
            ) from e

        if data is None:
            logger.warning(f"YAML file is empty or contains only comments: {path}")
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Expected a mapping at the top of {path}, got {type(data).__name__}",
                error_code="CONFIG_PARSE_ERROR",
                details={"path": str(path)},
            )

        logger.debug(f"Successfully loaded YAML from {path}")
        return data

    @staticmethod
    def save_yaml(data: Dict[str, Any], path: Path) -> None:
        """
        Save data to YAML file with consistent formatting.

        Args:
            data: Dictionary to save
            path: Path to save YAML file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

        logger.debug(f"Successfully saved YAML to {path}")
