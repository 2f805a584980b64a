"""
Pytest configuration and fixtures for the Character Vault.
Storage uses the in-memory store unless a test asks for files; prompts are
answered by an AutoPrompter instead of a terminal.
"""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, List

import pytest

from character_vault.characters import (
    AutoPrompter,
    Character,
    CharacterController,
    CharacterRepository,
)
from character_vault.core.config import DEFAULT_STORAGE_KEY, Config, Environment, StorageConfig
from character_vault.core.persistence import MemoryKeyValueStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    return Config(
        environment=Environment.TESTING,
        storage=StorageConfig(data_dir=temp_dir / "data", backend="file"),
    )


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def repository(store: MemoryKeyValueStore) -> CharacterRepository:
    return CharacterRepository(store)


@pytest.fixture
def prompter() -> AutoPrompter:
    """Answers yes to every confirmation and records what was asked."""
    return AutoPrompter(answer=True)


@pytest.fixture
def make_character() -> Callable[..., Character]:
    """Factory for committed-looking characters with explicit ids."""

    def _make(character_id: str, name: str = "", **fields: Any) -> Character:
        return Character(id=character_id, name=name, **fields)

    return _make


@pytest.fixture
def seed_store(store: MemoryKeyValueStore) -> Callable[[List[Character]], None]:
    """Write characters straight into the store, as an earlier session would have."""

    def _seed(characters: List[Character]) -> None:
        store.set_item(
            DEFAULT_STORAGE_KEY, json.dumps([c.to_storage() for c in characters])
        )

    return _seed


@pytest.fixture
def controller(
    repository: CharacterRepository, prompter: AutoPrompter
) -> CharacterController:
    return CharacterController(repository, prompter)
