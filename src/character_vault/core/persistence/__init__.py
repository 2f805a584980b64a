"""
Persistence utilities for the Character Vault.

Provides device-local key-value stores and JSON persistence on top of them.
"""

from .json_manager import JSONRepository
from .key_value_store import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "FileKeyValueStore",
    "JSONRepository",
    "KeyValueStore",
    "MemoryKeyValueStore",
]
