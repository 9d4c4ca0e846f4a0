"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from idle_rpg import core
from idle_rpg.core.exceptions import (
    ConfigurationError,
    ContentError,
    ContentValidationError,
    GameEngineError,
    IdleRpgError,
    InvalidGameStateError,
    SaveDataError,
    StorageError,
)


class TestIdleRpgError:
    """Tests for IdleRpgError."""

    def test_message_only(self) -> None:
        """Test an error without details."""
        error = IdleRpgError("Something broke")
        assert str(error) == "Something broke"
        assert error.details == {}

    def test_message_with_details(self) -> None:
        """Test that details are rendered into the message."""
        error = IdleRpgError("Something broke", details={"code": 7})
        assert str(error) == "Something broke [code=7]"

    def test_repr(self) -> None:
        """Test the detailed representation."""
        error = IdleRpgError("Oops", details={"a": 1})
        assert repr(error) == "IdleRpgError(message='Oops', details={'a': 1})"


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        ("error_class", "parent"),
        [
            (ConfigurationError, IdleRpgError),
            (ContentError, IdleRpgError),
            (ContentValidationError, ContentError),
            (GameEngineError, IdleRpgError),
            (InvalidGameStateError, GameEngineError),
            (StorageError, IdleRpgError),
            (SaveDataError, StorageError),
        ],
    )
    def test_inheritance(self, error_class: type[Exception], parent: type[Exception]) -> None:
        """Test that each error inherits from its domain base."""
        assert issubclass(error_class, parent)

    def test_every_error_is_exported(self) -> None:
        """Test that the package exports exactly the raised error types."""
        exported = [getattr(core, name) for name in core.__all__]
        errors = {
            item.__name__
            for item in exported
            if isinstance(item, type) and issubclass(item, IdleRpgError)
        }
        assert errors == {
            "IdleRpgError",
            "ConfigurationError",
            "ContentError",
            "ContentValidationError",
            "GameEngineError",
            "InvalidGameStateError",
            "StorageError",
            "SaveDataError",
        }


class TestContextualErrors:
    """Tests for errors carrying context fields."""

    def test_configuration_error_key(self) -> None:
        """Test that the config key lands in details."""
        error = ConfigurationError("Bad value", config_key="engine.tick_interval_ms")
        assert error.details["config_key"] == "engine.tick_interval_ms"

    def test_invalid_game_state_context(self) -> None:
        """Test record id and category context."""
        error = InvalidGameStateError("Broken", record_id="beg", category="actions")
        assert error.details == {"record_id": "beg", "category": "actions"}

    def test_save_data_error_slot(self) -> None:
        """Test that the slot lands in details."""
        error = SaveDataError("Corrupt", slot="default")
        assert error.details["slot"] == "default"


class TestContentValidationError:
    """Tests for ContentValidationError."""

    def test_collects_errors(self) -> None:
        """Test that every problem is kept and counted."""
        error = ContentValidationError("Content validation failed", errors=["a: bad", "b: worse"])
        assert error.errors == ["a: bad", "b: worse"]
        assert error.details["error_count"] == 2

    def test_lists_errors_in_message(self) -> None:
        """Test that each problem appears on its own line."""
        error = ContentValidationError("Content validation failed", errors=["a: bad", "b: worse"])
        lines = str(error).splitlines()
        assert lines[1:] == [" - a: bad", " - b: worse"]

    def test_without_errors(self) -> None:
        """Test a content error with no itemized problems."""
        error = ContentValidationError("Content must be an object")
        assert error.errors == []
        assert str(error) == "Content must be an object"
