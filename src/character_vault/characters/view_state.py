"""
Application state for the vault: the committed collection plus the view.

The view is either the list or an open sheet. An open sheet always carries
its session, so "sheet without a character" cannot be represented.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple, Union

from ..core.logging import generate_session_id
from .models import Character


class ViewMode(Enum):
    """Which screen the vault is showing."""

    LIST = "list"
    SHEET = "sheet"


@dataclass(frozen=True)
class ListView:
    """The character list; no edit in progress."""

    @property
    def mode(self) -> ViewMode:
        return ViewMode.LIST


@dataclass(frozen=True)
class SheetView:
    """A character sheet open for editing.

    ``token`` identifies this edit session; it changes every time a sheet is
    opened, even when the same record is opened twice.
    """

    session: Character
    token: str = field(default_factory=generate_session_id)

    @property
    def mode(self) -> ViewMode:
        return ViewMode.SHEET

    def with_session(self, session: Character) -> "SheetView":
        return replace(self, session=session)


ViewState = Union[ListView, SheetView]

LIST_VIEW = ListView()


@dataclass(frozen=True)
class AppState:
    """Committed collection and current view, replaced wholesale on change."""

    characters: Tuple[Character, ...] = ()
    view: ViewState = LIST_VIEW

    @property
    def session(self) -> Optional[Character]:
        return self.view.session if isinstance(self.view, SheetView) else None

    def find(self, character_id: str) -> Optional[Character]:
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def index_of(self, character_id: str) -> Optional[int]:
        for i, character in enumerate(self.characters):
            if character.id == character_id:
                return i
        return None
