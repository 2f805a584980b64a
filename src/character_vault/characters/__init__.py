"""
Character records, their storage and the edit-session controller.
"""

from .controller import CharacterController, ImageTicket
from .images import ImageEncoder
from .models import PROPERTY_SLOTS, Character, Property, export_json_schema
from .prompts import AutoPrompter, Prompter
from .repository import CharacterRepository
from .view_state import AppState, ListView, SheetView, ViewMode, ViewState

__all__ = [
    "AppState",
    "AutoPrompter",
    "Character",
    "CharacterController",
    "CharacterRepository",
    "ImageEncoder",
    "ImageTicket",
    "ListView",
    "PROPERTY_SLOTS",
    "Prompter",
    "Property",
    "SheetView",
    "ViewMode",
    "ViewState",
    "export_json_schema",
]
