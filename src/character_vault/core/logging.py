"""
Structured logging configuration with edit-session correlation.

Provides centralized logging configuration with context variables so every
event emitted while a character sheet is open carries the session and
character it belongs to.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog
from structlog.stdlib import LoggerFactory

# Context variables for session correlation
session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
character_id_var: ContextVar[Optional[str]] = ContextVar("character_id", default=None)


class StructuredLogger:
    """Structured logger with session correlation support."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(name)

    def _get_context(self) -> Dict[str, Any]:
        """Get current session context for logging."""
        context = {}

        if session_id := session_id_var.get():
            context["session_id"] = session_id
        if character_id := character_id_var.get():
            context["character_id"] = character_id

        return context

    def _merge(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        # Explicit keyword arguments win over the ambient context.
        return {**self._get_context(), **kwargs}

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message with context."""
        self.logger.debug(message, **self._merge(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message with context."""
        self.logger.info(message, **self._merge(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message with context."""
        self.logger.warning(message, **self._merge(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message with context."""
        self.logger.error(message, **self._merge(kwargs))

    def log_character_event(
        self, event_type: str, character_id: Optional[str], **kwargs: Any
    ) -> None:
        """Log a change to the committed collection or the edit session."""
        self.logger.info(
            f"Character event: {event_type}",
            **self._merge(
                {"event_type": event_type, "character_id": character_id, **kwargs}
            ),
        )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


def set_session_context(
    session_id: Optional[str] = None,
    character_id: Optional[str] = None,
) -> None:
    """Set edit-session context for correlation."""
    if session_id:
        session_id_var.set(session_id)
    if character_id:
        character_id_var.set(character_id)


def clear_session_context() -> None:
    """Clear edit-session context."""
    session_id_var.set(None)
    character_id_var.set(None)


def generate_session_id() -> str:
    """Generate a unique edit-session ID."""
    return str(uuid.uuid4())


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging for the application."""

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


# Initialize logging configuration
configure_logging()
