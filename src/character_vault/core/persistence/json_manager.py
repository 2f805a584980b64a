"""
JSON persistence on top of a key-value store.

Every load and save goes through here so that parse failures, quota
problems and I/O errors are logged the same way and never escape to the
caller: loads fall back to a default, saves report success as a bool.
"""

import json
import logging
from typing import Any, Optional

from ..exceptions import StorageError
from .key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

CORRUPT_SUFFIX = ".corrupt"


class JSONRepository:
    """JSON documents stored under keys of a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load_json(self, key: str, default: Any = None) -> Any:
        """
        Load and parse the JSON document stored under ``key``.

        Args:
            key: Storage key
            default: Value returned when nothing is stored or loading fails

        Returns:
            The parsed document, or ``default``
        """
        try:
            raw = self.store.get_item(key)
        except StorageError as e:
            logger.error(f"Failed to read '{key}': {e}")
            if e.error_code == "STORAGE_DECODE_ERROR":
                self.quarantine(key)
            return default

        if raw is None:
            logger.debug(f"Nothing stored under '{key}'")
            return default

        if not raw.strip():
            logger.warning(f"Stored value for '{key}' is empty")
            return default

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON stored under '{key}': {e}")
            self.quarantine(key, raw)
            return default

        logger.debug(f"Successfully loaded JSON from '{key}'")
        return data

    def save_json(self, key: str, data: Any) -> bool:
        """
        Serialize ``data`` and store it under ``key``, replacing the old value.

        Returns:
            True if successful, False otherwise
        """
        try:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize data for '{key}': {e}")
            return False

        try:
            self.store.set_item(key, payload)
        except StorageError as e:
            logger.error(f"Failed to save JSON under '{key}': {e}")
            return False

        logger.debug(f"Successfully saved JSON under '{key}'")
        return True

    def quarantine(self, key: str, raw: Optional[str] = None) -> Optional[str]:
        """
        Copy an unreadable value aside so the next save cannot destroy it.

        Returns:
            The key the copy was written to, or None if nothing was copied
        """
        corrupt_key = key + CORRUPT_SUFFIX
        try:
            if raw is None:
                # Copy the stored value as-is; it may not even decode.
                if not self.store.copy_item(key, corrupt_key):
                    return None
            else:
                self.store.set_item(corrupt_key, raw)
        except StorageError as e:
            logger.error(f"Failed to quarantine '{key}': {e}")
            return None

        logger.warning(f"Moved unreadable value of '{key}' to '{corrupt_key}'")
        return corrupt_key
