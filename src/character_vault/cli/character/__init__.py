"""
Character management commands for the Character Vault CLI.

Provides Click-based commands for listing, creating, editing and deleting
characters.
"""

from .management import delete, list_characters, schema, show
from .sheet import create, edit

CHARACTER_COMMANDS = [list_characters, show, create, edit, delete, schema]

__all__ = [
    "CHARACTER_COMMANDS",
    "create",
    "delete",
    "edit",
    "list_characters",
    "schema",
    "show",
]
