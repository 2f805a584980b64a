"""
Tests for the collection and edit-session controller.
"""

import json
from pathlib import Path
from typing import Callable, List

import pytest

from character_vault.characters import (
    AutoPrompter,
    Character,
    CharacterController,
    CharacterRepository,
    ListView,
    SheetView,
    ViewMode,
)
from character_vault.characters.prompts import (
    DELETE_CONFIRMATION,
    DISCARD_CONFIRMATION,
    NAME_REQUIRED,
)
from character_vault.core.config import DEFAULT_STORAGE_KEY
from character_vault.core.exceptions import NoActiveSessionError, ValidationError
from character_vault.core.persistence import FileKeyValueStore, MemoryKeyValueStore


def _stored(store: MemoryKeyValueStore) -> List[dict]:
    return json.loads(store.get_item(DEFAULT_STORAGE_KEY) or "null")


class TestStartup:
    """Test loading the committed collection."""

    def test_starts_in_list_with_empty_collection(
        self, controller: CharacterController
    ) -> None:
        assert controller.view_mode is ViewMode.LIST
        assert isinstance(controller.view, ListView)
        assert controller.characters == ()
        assert controller.session is None

    def test_loads_stored_collection(
        self,
        store: MemoryKeyValueStore,
        seed_store: Callable[[List[Character]], None],
        make_character: Callable[..., Character],
        prompter: AutoPrompter,
    ) -> None:
        seed_store([make_character("1", "Aria"), make_character("2", "Bryn")])
        controller = CharacterController(CharacterRepository(store), prompter)
        assert [c.name for c in controller.characters] == ["Aria", "Bryn"]

    def test_corrupt_storage_starts_empty(
        self, store: MemoryKeyValueStore, prompter: AutoPrompter
    ) -> None:
        store.set_item(DEFAULT_STORAGE_KEY, "not json at all")
        controller = CharacterController(CharacterRepository(store), prompter)
        assert controller.characters == ()
        assert controller.view_mode is ViewMode.LIST

    def test_undecodable_file_starts_empty(
        self, temp_dir: Path, prompter: AutoPrompter
    ) -> None:
        """Test a stored file that is not UTF-8 does not stop the vault from starting."""
        blob = b'[{"id": "1", "name": "\xff\xfe"}]'
        (temp_dir / f"{DEFAULT_STORAGE_KEY}.json").write_bytes(blob)

        controller = CharacterController(
            CharacterRepository(FileKeyValueStore(temp_dir)), prompter
        )
        assert controller.characters == ()
        assert controller.view_mode is ViewMode.LIST
        assert (temp_dir / f"{DEFAULT_STORAGE_KEY}.corrupt.json").read_bytes() == blob

    def test_reload(
        self,
        controller: CharacterController,
        seed_store: Callable[[List[Character]], None],
        make_character: Callable[..., Character],
    ) -> None:
        seed_store([make_character("1", "Aria")])
        assert controller.reload() is True
        assert controller.get_character("1") is not None

    def test_reload_refused_while_editing(self, controller: CharacterController) -> None:
        controller.start_create()
        assert controller.reload() is False
        assert controller.view_mode is ViewMode.SHEET


class TestCreate:
    """Test creating characters."""

    def test_create_and_save(
        self, controller: CharacterController, store: MemoryKeyValueStore
    ) -> None:
        """Test a named new character is appended with eight blank properties."""
        session = controller.start_create()
        assert session is not None
        assert controller.view_mode is ViewMode.SHEET
        assert controller.characters == ()

        controller.update_field("name", "Aria")
        assert controller.save() is True

        assert controller.view_mode is ViewMode.LIST
        assert controller.session is None
        assert len(controller.characters) == 1
        saved = controller.characters[0]
        assert saved.name == "Aria"
        assert saved.id == session.id
        assert len(saved.properties) == 8
        assert all(prop.is_blank for prop in saved.properties)

        stored = _stored(store)
        assert [record["name"] for record in stored] == ["Aria"]

    def test_empty_name_is_rejected(
        self,
        controller: CharacterController,
        prompter: AutoPrompter,
        store: MemoryKeyValueStore,
    ) -> None:
        """Test saving without a name alerts and keeps the sheet open."""
        controller.start_create()
        controller.update_field("name", "")
        assert controller.save() is False

        assert prompter.alerts == [NAME_REQUIRED]
        assert controller.view_mode is ViewMode.SHEET
        assert controller.characters == ()
        assert store.get_item(DEFAULT_STORAGE_KEY) is None

    def test_whitespace_name_is_accepted(self, controller: CharacterController) -> None:
        """Test a name of only spaces counts as present and is saved untrimmed."""
        controller.start_create()
        controller.update_field("name", "   ")
        assert controller.save() is True
        assert controller.view_mode is ViewMode.LIST
        assert [c.name for c in controller.characters] == ["   "]

    def test_name_can_be_fixed_after_rejection(self, controller: CharacterController) -> None:
        controller.start_create()
        controller.update_field("gender", "F")
        assert controller.save() is False
        controller.update_field("name", "Aria")
        assert controller.save() is True
        assert controller.characters[0].gender == "F"

    def test_ids_are_unique(self, controller: CharacterController) -> None:
        for name in ("Aria", "Bryn", "Cato"):
            controller.start_create()
            controller.update_field("name", name)
            controller.save()
        ids = [c.id for c in controller.characters]
        assert len(set(ids)) == 3
        assert [c.name for c in controller.characters] == ["Aria", "Bryn", "Cato"]

    def test_each_sheet_gets_a_new_token(self, controller: CharacterController) -> None:
        controller.start_create()
        first = controller.view
        controller.update_field("name", "Aria")
        controller.save()
        controller.start_create()
        second = controller.view
        assert isinstance(first, SheetView) and isinstance(second, SheetView)
        assert first.token != second.token


class TestEdit:
    """Test editing existing characters."""

    @pytest.fixture
    def seeded(
        self,
        store: MemoryKeyValueStore,
        seed_store: Callable[[List[Character]], None],
        make_character: Callable[..., Character],
        prompter: AutoPrompter,
    ) -> CharacterController:
        seed_store(
            [
                make_character("1", "Aria", age="27").with_property(0, "name", "Keen eye"),
                make_character("2", "Bryn"),
            ]
        )
        return CharacterController(CharacterRepository(store), prompter)

    def test_break_property_and_save(
        self, seeded: CharacterController, store: MemoryKeyValueStore
    ) -> None:
        """Test a property edit replaces the record in place."""
        before = seeded.get_character("1")
        assert before is not None

        seeded.start_edit("1")
        seeded.update_property(3, "broken", True)
        assert seeded.save() is True

        assert len(seeded.characters) == 2
        after = seeded.characters[0]
        assert after.id == "1"
        assert after.properties[3].broken is True
        for i in range(8):
            if i != 3:
                assert after.properties[i] == before.properties[i]
        assert _stored(store)[0]["properties"][3]["broken"] is True

    def test_edits_are_isolated_until_save(self, seeded: CharacterController) -> None:
        """Test the open sheet never changes the committed record."""
        seeded.start_edit("1")
        seeded.update_field("name", "Changed")
        seeded.update_property(0, "notes", "scratch")

        committed = seeded.get_character("1")
        assert committed is not None
        assert committed.name == "Aria"
        assert committed.properties[0].notes == ""
        assert seeded.session is not None
        assert seeded.session.name == "Changed"

    def test_edit_unknown_id(self, seeded: CharacterController) -> None:
        assert seeded.start_edit("missing") is None
        assert seeded.view_mode is ViewMode.LIST

    def test_cannot_open_second_sheet(self, seeded: CharacterController) -> None:
        seeded.start_edit("1")
        assert seeded.start_edit("2") is None
        assert seeded.start_create() is None
        assert seeded.session is not None
        assert seeded.session.id == "1"

    def test_edit_then_save_without_changes(
        self, seeded: CharacterController
    ) -> None:
        before = seeded.characters
        seeded.start_edit("2")
        assert seeded.save() is True
        assert seeded.characters == before

    def test_cancel_confirmed(
        self, seeded: CharacterController, prompter: AutoPrompter
    ) -> None:
        seeded.start_edit("1")
        seeded.update_field("name", "Changed")
        assert seeded.cancel_edit() is True
        assert prompter.confirmations == [DISCARD_CONFIRMATION]
        assert seeded.view_mode is ViewMode.LIST
        assert seeded.get_character("1").name == "Aria"  # type: ignore[union-attr]

    def test_cancel_declined(
        self, seeded: CharacterController, prompter: AutoPrompter
    ) -> None:
        prompter.answer = False
        seeded.start_edit("1")
        seeded.update_field("name", "Changed")
        assert seeded.cancel_edit() is False
        assert seeded.view_mode is ViewMode.SHEET
        assert seeded.session.name == "Changed"  # type: ignore[union-attr]

    def test_cancel_in_list(
        self, seeded: CharacterController, prompter: AutoPrompter
    ) -> None:
        assert seeded.cancel_edit() is False
        assert prompter.confirmations == []

    def test_invalid_edits_leave_session_unchanged(self, seeded: CharacterController) -> None:
        seeded.start_edit("1")
        session = seeded.session
        with pytest.raises(ValidationError):
            seeded.update_property(8, "name", "x")
        with pytest.raises(ValidationError):
            seeded.update_field("id", "other")
        assert seeded.session == session


class TestSessionMisuse:
    """Test sheet operations outside an edit session."""

    def test_update_field_without_sheet(self, controller: CharacterController) -> None:
        with pytest.raises(NoActiveSessionError):
            controller.update_field("name", "Aria")

    def test_update_property_without_sheet(self, controller: CharacterController) -> None:
        with pytest.raises(NoActiveSessionError):
            controller.update_property(0, "name", "Keen eye")

    def test_attach_image_without_sheet(self, controller: CharacterController) -> None:
        with pytest.raises(NoActiveSessionError):
            controller.attach_image("data:image/png;base64,AA==")

    def test_save_without_sheet(self, controller: CharacterController) -> None:
        assert controller.save() is False
        assert controller.characters == ()


class TestDelete:
    """Test deleting characters."""

    @pytest.fixture
    def seeded(
        self,
        store: MemoryKeyValueStore,
        seed_store: Callable[[List[Character]], None],
        make_character: Callable[..., Character],
        prompter: AutoPrompter,
    ) -> CharacterController:
        seed_store([make_character("1", "Aria"), make_character("2", "Bryn")])
        return CharacterController(CharacterRepository(store), prompter)

    def test_delete_confirmed(
        self,
        seeded: CharacterController,
        prompter: AutoPrompter,
        store: MemoryKeyValueStore,
    ) -> None:
        assert seeded.delete_character("1") is True
        assert prompter.confirmations == [DELETE_CONFIRMATION]
        assert [c.id for c in seeded.characters] == ["2"]
        assert [record["id"] for record in _stored(store)] == ["2"]

    def test_delete_declined(
        self,
        seeded: CharacterController,
        prompter: AutoPrompter,
        store: MemoryKeyValueStore,
    ) -> None:
        prompter.answer = False
        stored_before = store.get_item(DEFAULT_STORAGE_KEY)
        assert seeded.delete_character("1") is False
        assert [c.id for c in seeded.characters] == ["1", "2"]
        assert store.get_item(DEFAULT_STORAGE_KEY) == stored_before

    def test_delete_unknown_id(
        self, seeded: CharacterController, store: MemoryKeyValueStore
    ) -> None:
        """Test deleting a missing id changes nothing but still persists."""
        store.remove_item(DEFAULT_STORAGE_KEY)
        assert seeded.delete_character("missing") is True
        assert [c.id for c in seeded.characters] == ["1", "2"]
        assert [record["id"] for record in _stored(store)] == ["1", "2"]

    def test_deleted_character_cannot_be_edited(self, seeded: CharacterController) -> None:
        seeded.delete_character("1")
        assert seeded.start_edit("1") is None
        assert seeded.view_mode is ViewMode.LIST


class TestPersistence:
    """Test the committed collection survives a restart."""

    def test_round_trip_through_new_controller(
        self, store: MemoryKeyValueStore, prompter: AutoPrompter
    ) -> None:
        first = CharacterController(CharacterRepository(store), prompter)
        first.start_create()
        first.update_field("name", "Aria")
        first.update_field("powerRecovery", "one night of sleep")
        first.update_property(5, "strength", "+6")
        first.attach_image("data:image/png;base64,AA==")
        first.save()

        second = CharacterController(CharacterRepository(store), prompter)
        assert second.characters == first.characters
        assert second.characters[0].power_recovery == "one night of sleep"
        assert second.characters[0].properties[5].strength == "+6"

    def test_failed_write_keeps_memory_state(self, prompter: AutoPrompter) -> None:
        """Test a save over quota still commits in memory and closes the sheet."""
        store = MemoryKeyValueStore(quota_bytes=2048)
        controller = CharacterController(CharacterRepository(store), prompter)

        controller.start_create()
        controller.update_field("name", "Aria")
        controller.attach_image("data:image/png;base64," + "A" * 4096)
        assert controller.save() is True

        assert controller.view_mode is ViewMode.LIST
        assert [c.name for c in controller.characters] == ["Aria"]
        assert store.get_item(DEFAULT_STORAGE_KEY) is None
