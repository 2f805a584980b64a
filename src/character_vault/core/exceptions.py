"""
Exception hierarchy for the Character Vault.

Provides structured error handling with specific error types for storage,
configuration, validation and edit-session failures.
"""

import functools
from typing import Any, Callable, Dict, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class CharacterVaultError(Exception):
    """Base exception for all Character Vault errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        component: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.component = component

    def __str__(self) -> str:
        """String representation of the error."""
        base_msg = f"[{self.component or 'CharacterVault'}] {self.message}"
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "details": self.details,
        }


class ConfigurationError(CharacterVaultError):
    """Exception raised when configuration is invalid or missing."""

    pass


class StorageError(CharacterVaultError):
    """Exception raised when the key-value store cannot be read or written."""

    pass


class SessionError(CharacterVaultError):
    """Exception raised when an edit-session operation is misused."""

    pass


class ImageEncodingError(CharacterVaultError):
    """Exception raised when an image file cannot be encoded."""

    pass


# Specific error types for common failure modes


class StorageQuotaExceededError(StorageError):
    """Exception raised when a value does not fit in the store's quota."""

    def __init__(self, key: str, size: int, quota: int, **kwargs: Any) -> None:
        super().__init__(
            f"Storage quota exceeded writing '{key}': {size} bytes > {quota} bytes",
            error_code="STORAGE_QUOTA_EXCEEDED",
            details={"key": key, "size": size, "quota": quota},
            **kwargs,
        )


class ValidationError(CharacterVaultError):
    """Exception raised when input validation fails."""

    def __init__(self, field: str, value: Any, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Validation failed for field '{field}': {reason}",
            error_code="VALIDATION_ERROR",
            details={
                "field": field,
                "value": str(value),
                "reason": reason,
            },
            **kwargs,
        )


class NoActiveSessionError(SessionError):
    """Exception raised when a sheet operation runs without an edit session."""

    def __init__(self, operation: str, **kwargs: Any) -> None:
        super().__init__(
            f"No character is being edited; cannot {operation}",
            error_code="NO_ACTIVE_SESSION",
            details={"operation": operation},
            **kwargs,
        )


# Error handling utilities


def handle_storage_error(func: F) -> F:
    """Decorator to turn OS-level failures into StorageError."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except OSError as e:
            raise StorageError(
                message=f"Storage error in {func.__name__}: {str(e)}",
                error_code="STORAGE_IO_ERROR",
                component=func.__name__,
            ) from e

    return wrapper  # type: ignore
