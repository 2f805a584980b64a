"""
Synchronous key-value stores for device-local persistence.

The vault keeps its whole collection under one key, the way a browser app
keeps it in ``localStorage``. Values are text; every write replaces the
previous value for its key entirely.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..config.base import STORAGE_KEY_PATTERN
from ..exceptions import (
    StorageError,
    StorageQuotaExceededError,
    ValidationError,
    handle_storage_error,
)

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Text key-value store with an optional per-value size quota."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes

    def _check_key(self, key: str) -> None:
        if not STORAGE_KEY_PATTERN.fullmatch(key):
            raise ValidationError("key", key, "keys may only contain letters, digits, '_', '.' and '-'")

    def _check_quota(self, key: str, value: str) -> None:
        if self.quota_bytes is None:
            return
        size = len(value.encode("utf-8"))
        if size > self.quota_bytes:
            raise StorageQuotaExceededError(key, size, self.quota_bytes)

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if there is none."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List the stored keys."""

    def copy_item(self, source: str, target: str) -> bool:
        """Copy the value under ``source`` to ``target`` as-is.

        Returns:
            False if nothing is stored under ``source``
        """
        value = self.get_item(source)
        if value is None:
            return False
        self.set_item(target, value)
        return True


class MemoryKeyValueStore(KeyValueStore):
    """In-process store; contents last as long as the object."""

    def __init__(self, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes)
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        self._check_key(key)
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_key(key)
        self._check_quota(key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._check_key(key)
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._items)


class FileKeyValueStore(KeyValueStore):
    """One UTF-8 file per key under a root directory.

    Writes go to a temporary file which is then renamed over the target, so a
    reader sees either the old value or the new one, never a mix.
    """

    SUFFIX = ".json"

    def __init__(self, root: Path, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes)
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        self._check_key(key)
        return self.root / f"{key}{self.SUFFIX}"

    @handle_storage_error
    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"No stored value for key '{key}' at {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageError(
                f"Stored value for '{key}' is not valid UTF-8: {e}",
                error_code="STORAGE_DECODE_ERROR",
                details={"key": key, "path": str(path)},
                component="get_item",
            ) from e

    @handle_storage_error
    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        self._check_quota(key, value)

        self.root.mkdir(parents=True, exist_ok=True)
        temp_file = path.with_name(path.name + ".tmp")
        try:
            temp_file.write_text(value, encoding="utf-8")
            temp_file.replace(path)
        finally:
            if temp_file.exists():
                temp_file.unlink()

        logger.debug(f"Wrote {len(value)} characters to {path}")

    @handle_storage_error
    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()

    @handle_storage_error
    def copy_item(self, source: str, target: str) -> bool:
        """Copy the stored bytes of ``source`` to ``target`` without decoding them."""
        source_path = self.path_for(source)
        target_path = self.path_for(target)
        if not source_path.exists():
            return False
        shutil.copyfile(source_path, target_path)
        return True

    def keys(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.name[: -len(self.SUFFIX)] for p in self.root.glob(f"*{self.SUFFIX}"))
