"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        IdleRpgError: Base exception for all package errors.
        ConfigurationError: Configuration-related errors.
        ContentValidationError: Invalid content definitions.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Apply the logging settings.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from idle_rpg.core.config import (
    EngineSettings,
    ImprovementRule,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
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
from idle_rpg.core.logging import (
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "IdleRpgError",
    "ConfigurationError",
    "ContentError",
    "ContentValidationError",
    "GameEngineError",
    "InvalidGameStateError",
    "StorageError",
    "SaveDataError",
    # Configuration
    "Settings",
    "EngineSettings",
    "ImprovementRule",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
]
