"""Custom exception hierarchy for the idle RPG engine.

Exceptions are reserved for programmer and data errors: invalid content,
broken configuration, corrupt save data or an internally inconsistent
state. Ordinary gameplay failures (unknown ids, locked actions, not enough
gold) are reported as falsy results and never raised.

Example:
    >>> from idle_rpg.core.exceptions import ContentValidationError
    >>> raise ContentValidationError("Content validation failed", errors=["..."])
"""

from __future__ import annotations

from typing import Any


class IdleRpgError(Exception):
    """Base exception for all idle RPG errors.

    All custom exceptions in this package inherit from this class,
    enabling unified error handling at the application boundary.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(IdleRpgError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Content Domain Exceptions
# =============================================================================


class ContentError(IdleRpgError):
    """Base exception for static content (definition) errors."""


class ContentValidationError(ContentError):
    """Raised when content definitions fail validation.

    Every problem found during a load is collected so that the content
    author sees the whole list at once instead of fixing one error per run.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content validation error with the collected problems.

        Args:
            message: Human-readable error description.
            errors: Every validation problem found.
            details: Optional dictionary containing additional error context.
        """
        self.errors = list(errors or [])
        combined_details = details or {}
        if self.errors:
            combined_details["error_count"] = len(self.errors)
        super().__init__(message, details=combined_details)

    def _format_message(self) -> str:
        base = super()._format_message()
        if not self.errors:
            return base
        return "\n".join([base, *(f" - {error}" for error in self.errors)])


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(IdleRpgError):
    """Base exception for game engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when the game state is internally inconsistent.

    This signals a programming error (for example a state record with no
    matching definition), never a gameplay condition.
    """

    def __init__(
        self,
        message: str,
        *,
        record_id: str | None = None,
        category: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with record context.

        Args:
            message: Human-readable error description.
            record_id: Id of the offending record.
            category: Definition category of the offending record.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_id:
            combined_details["record_id"] = record_id
        if category:
            combined_details["category"] = category
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(IdleRpgError):
    """Base exception for persistence errors."""


class SaveDataError(StorageError):
    """Raised when saved data cannot be decoded or restored."""

    def __init__(
        self,
        message: str,
        *,
        slot: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize save data error with slot context.

        Args:
            message: Human-readable error description.
            slot: Save slot that held the bad data.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if slot:
            combined_details["slot"] = slot
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "IdleRpgError",
    # Configuration exceptions
    "ConfigurationError",
    # Content exceptions
    "ContentError",
    "ContentValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    # Storage exceptions
    "StorageError",
    "SaveDataError",
]
