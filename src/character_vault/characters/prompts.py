"""
Confirmation and alert capability used by the controller.

The controller never talks to a terminal or a dialog directly; it is handed a
Prompter and asks it yes/no questions or shows it acknowledge-only messages.
"""

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Delete this character?"
DISCARD_CONFIRMATION = "Unsaved changes will be lost. Return to the list?"
NAME_REQUIRED = "A name is required!"


class Prompter(Protocol):
    """Synchronous yes/no and acknowledge prompts."""

    def confirm(self, message: str) -> bool:
        ...

    def alert(self, message: str) -> None:
        ...


class AutoPrompter:
    """Non-interactive prompter that answers every question the same way.

    Questions and alerts are kept in ``confirmations`` and ``alerts`` so
    callers can report them.
    """

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.confirmations: List[str] = []
        self.alerts: List[str] = []

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        logger.debug(f"Auto-answering {self.answer!r} to: {message}")
        return self.answer

    def alert(self, message: str) -> None:
        logger.warning(message)
        self.alerts.append(message)
