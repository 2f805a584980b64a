"""
Collection and edit-session controller.

Owns the committed character collection, the current view and the copy of a
character open on the sheet. Front ends call these operations and render
``state``; they never write to storage themselves.

Every change to the committed collection is flushed through the repository.
Edits to the open sheet stay in memory until ``save``.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Tuple

from ..core.config import Config
from ..core.exceptions import NoActiveSessionError
from ..core.logging import clear_session_context, get_logger, set_session_context
from .images import ImageEncoder
from .models import Character
from .prompts import DELETE_CONFIRMATION, DISCARD_CONFIRMATION, NAME_REQUIRED, Prompter
from .repository import CharacterRepository
from .view_state import LIST_VIEW, AppState, SheetView, ViewMode, ViewState

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageTicket:
    """Identifies the edit session an image request was started from."""

    token: str


class CharacterController:
    """Create, edit, save and delete characters."""

    def __init__(self, repository: CharacterRepository, prompter: Prompter):
        self._repository = repository
        self._prompter = prompter
        self._state = AppState(characters=tuple(repository.load()))
        logger.info("Character vault ready", count=len(self._state.characters))

    @classmethod
    def from_config(cls, config: Config, prompter: Prompter) -> "CharacterController":
        return cls(CharacterRepository.from_config(config), prompter)

    # State access

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def characters(self) -> Tuple[Character, ...]:
        return self._state.characters

    @property
    def view(self) -> ViewState:
        return self._state.view

    @property
    def view_mode(self) -> ViewMode:
        return self._state.view.mode

    @property
    def session(self) -> Optional[Character]:
        return self._state.session

    def get_character(self, character_id: str) -> Optional[Character]:
        return self._state.find(character_id)

    def reload(self) -> bool:
        """Re-read the committed collection from storage (list view only)."""
        if isinstance(self._state.view, SheetView):
            logger.warning("Refusing to reload while a sheet is open")
            return False
        self._state = AppState(characters=tuple(self._repository.load()))
        return True

    # Internal transitions

    def _open_sheet(self, session: Character) -> Character:
        view = SheetView(session=session)
        self._state = replace(self._state, view=view)
        set_session_context(session_id=view.token, character_id=session.id)
        return session

    def _close_sheet(self) -> None:
        self._state = replace(self._state, view=LIST_VIEW)
        clear_session_context()

    def _require_sheet(self, operation: str) -> SheetView:
        view = self._state.view
        if not isinstance(view, SheetView):
            raise NoActiveSessionError(operation, component="CharacterController")
        return view

    def _replace_session(self, view: SheetView, session: Character) -> Character:
        self._state = replace(self._state, view=view.with_session(session))
        return session

    def _commit(self, characters: Tuple[Character, ...]) -> bool:
        self._state = replace(self._state, characters=characters)
        return self._repository.save(characters)

    # List -> sheet

    def start_create(self) -> Optional[Character]:
        """Open a blank sheet for a new character."""
        if isinstance(self._state.view, SheetView):
            logger.warning("Ignoring create: a sheet is already open")
            return None
        session = self._open_sheet(Character.empty())
        logger.log_character_event("create_started", session.id)
        return session

    def start_edit(self, character_id: str) -> Optional[Character]:
        """Open the sheet for an existing character; unknown ids are ignored."""
        if isinstance(self._state.view, SheetView):
            logger.warning("Ignoring edit: a sheet is already open")
            return None
        found = self._state.find(character_id)
        if found is None:
            logger.debug("Edit requested for unknown character", character_id=character_id)
            return None
        session = self._open_sheet(found)
        logger.log_character_event("edit_started", session.id)
        return session

    # Sheet edits

    def update_field(self, field_name: str, value: Any) -> Character:
        """Replace one basic field of the open sheet."""
        view = self._require_sheet(f"update field '{field_name}'")
        return self._replace_session(view, view.session.with_field(field_name, value))

    def update_property(self, index: int, field_name: str, value: Any) -> Character:
        """Replace one field of property slot ``index`` on the open sheet."""
        view = self._require_sheet(f"update property {index}")
        return self._replace_session(
            view, view.session.with_property(index, field_name, value)
        )

    def attach_image(self, encoded_image: str) -> Character:
        """Set the open sheet's appearance image."""
        view = self._require_sheet("attach an image")
        return self._replace_session(view, view.session.with_field("image", encoded_image))

    def begin_image_request(self) -> ImageTicket:
        """Remember which sheet an image being encoded belongs to."""
        view = self._require_sheet("request an image")
        return ImageTicket(token=view.token)

    def apply_image(self, ticket: ImageTicket, encoded_image: str) -> bool:
        """Apply an encoded image if its sheet is still the one open."""
        view = self._state.view
        if not isinstance(view, SheetView) or view.token != ticket.token:
            logger.warning("Discarding image for a sheet that is no longer open")
            return False
        self._replace_session(view, view.session.with_field("image", encoded_image))
        return True

    async def attach_image_file(
        self, path: Optional[Path], encoder: ImageEncoder
    ) -> bool:
        """Encode ``path`` and attach it to the sheet that was open when asked."""
        ticket = self.begin_image_request()
        encoded = await encoder.encode(path)
        if encoded is None:
            return False
        return self.apply_image(ticket, encoded)

    # Sheet -> list

    def save(self) -> bool:
        """Commit the open sheet to the collection and return to the list.

        A sheet without a name is not saved; the user is told and the sheet
        stays open.
        """
        view = self._state.view
        if not isinstance(view, SheetView):
            logger.warning("Ignoring save: no sheet is open")
            return False

        session = view.session
        if not session.name:
            self._prompter.alert(NAME_REQUIRED)
            logger.info("Save rejected: name is empty", character_id=session.id)
            return False

        characters = self._state.characters
        index = self._state.index_of(session.id)
        if index is None:
            updated = characters + (session,)
            event = "created"
        else:
            updated = characters[:index] + (session,) + characters[index + 1 :]
            event = "updated"

        persisted = self._commit(updated)
        self._close_sheet()
        logger.log_character_event(event, session.id, persisted=persisted)
        return True

    def cancel_edit(self) -> bool:
        """Discard the open sheet after the user confirms."""
        if not isinstance(self._state.view, SheetView):
            return False
        if not self._prompter.confirm(DISCARD_CONFIRMATION):
            return False
        session_id = self._state.view.session.id
        self._close_sheet()
        logger.log_character_event("edit_discarded", session_id)
        return True

    # Destruction

    def delete_character(self, character_id: str) -> bool:
        """Remove a character after the user confirms.

        Returns True when the user confirmed, whether or not the id existed.
        """
        if not self._prompter.confirm(DELETE_CONFIRMATION):
            return False

        remaining = tuple(c for c in self._state.characters if c.id != character_id)
        existed = len(remaining) != len(self._state.characters)
        persisted = self._commit(remaining)
        logger.log_character_event(
            "deleted", character_id, existed=existed, persisted=persisted
        )
        return True
