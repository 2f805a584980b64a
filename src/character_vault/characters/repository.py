"""
Persistence adapter for the character collection.

The whole collection is one JSON array stored under a single key. Loading
never raises: a missing value is an empty collection, an unreadable one is
logged, copied aside and treated as empty. Saving replaces the stored array
wholesale and reports failure as ``False`` without touching in-memory state.
"""

import logging
from typing import Any, List, Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.config import DEFAULT_STORAGE_KEY, Config
from ..core.persistence import (
    FileKeyValueStore,
    JSONRepository,
    KeyValueStore,
    MemoryKeyValueStore,
)
from .models import Character

logger = logging.getLogger(__name__)

_collection_adapter = TypeAdapter(List[Character])


class CorruptCollectionError(ValueError):
    """Stored data parsed as JSON but is not a valid character collection."""


def parse_collection(data: Any) -> List[Character]:
    """Validate a decoded JSON document as a character collection.

    Raises:
        CorruptCollectionError: if the document is not a list of valid
            characters with unique ids
    """
    if not isinstance(data, list):
        raise CorruptCollectionError(
            f"expected a JSON array of characters, got {type(data).__name__}"
        )

    try:
        characters = _collection_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise CorruptCollectionError(str(e)) from e

    seen = set()
    for character in characters:
        if character.id in seen:
            raise CorruptCollectionError(f"duplicate character id '{character.id}'")
        seen.add(character.id)
    return characters


class CharacterRepository:
    """Reads and writes the full character collection under one storage key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.key = key
        self._json = JSONRepository(store)

    @classmethod
    def from_config(cls, config: Config) -> "CharacterRepository":
        """Build the repository and its store from configuration."""
        storage = config.storage
        store: KeyValueStore
        if storage.backend == "memory":
            store = MemoryKeyValueStore(quota_bytes=storage.quota_bytes)
        else:
            store = FileKeyValueStore(storage.data_dir, quota_bytes=storage.quota_bytes)
        return cls(store, key=storage.storage_key)

    @property
    def store(self) -> KeyValueStore:
        return self._json.store

    def load(self) -> List[Character]:
        """Load the stored collection; empty when absent or unreadable."""
        data = self._json.load_json(self.key, default=None)
        if data is None:
            return []

        try:
            characters = parse_collection(data)
        except CorruptCollectionError as e:
            logger.error(f"Stored character collection '{self.key}' is invalid: {e}")
            self._json.quarantine(self.key)
            return []

        logger.info(f"Loaded {len(characters)} characters from '{self.key}'")
        return characters

    def save(self, characters: Sequence[Character]) -> bool:
        """Replace the stored collection with ``characters``."""
        ok = self._json.save_json(self.key, [c.to_storage() for c in characters])
        if ok:
            logger.debug(f"Saved {len(characters)} characters to '{self.key}'")
        else:
            logger.error(
                f"Could not persist {len(characters)} characters; "
                "changes are kept for this session only"
            )
        return ok
