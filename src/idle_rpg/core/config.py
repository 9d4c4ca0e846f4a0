"""Configuration management for the idle RPG engine.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files and
runtime overrides.

Example:
    >>> from idle_rpg.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.engine.action_log_limit
    100

Environment Variables:
    IDLE_RPG_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    IDLE_RPG_DATABASE_PATH: Path to the SQLite save database
    IDLE_RPG_SAVE_SLOT: Save slot used by default
    IDLE_RPG_ENGINE_TICK_INTERVAL_MS: Driver tick interval in milliseconds
    IDLE_RPG_ENGINE_RNG_SEED: Seed for reproducible reward rolls
    IDLE_RPG_ENGINE_IMPROVEMENTS: JSON list of improvement rules
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from idle_rpg.core.constants import (
    ACTION_LOG_LIMIT,
    CATCH_UP_STEP_MS,
    DEFAULT_IMPROVEMENTS,
    DEFAULT_SAVE_SLOT,
    DEFAULT_TICK_INTERVAL_MS,
    MAX_OFFLINE_SECONDS,
    SKILL_TIER_BASE,
)
from idle_rpg.core.exceptions import ConfigurationError


class ImprovementRule(BaseModel):
    """One row of the action escalation table.

    When an action's completion count reaches ``at_completions`` its
    runtime duration and/or reward values are scaled once.

    Attributes:
        at_completions: Completion count that triggers the rule.
        duration_multiplier: Factor applied to the base duration (≤ 1).
        reward_multiplier: Factor applied to reward values, rounded up (≥ 1).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    at_completions: int = Field(ge=1, description="Completion milestone")
    duration_multiplier: float | None = Field(default=None, gt=0, le=1)
    reward_multiplier: float | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def require_an_effect(self) -> "ImprovementRule":
        """Reject rules that would change nothing."""
        if self.duration_multiplier is None and self.reward_multiplier is None:
            raise ValueError("improvement rule needs duration_multiplier or reward_multiplier")
        return self


class EngineSettings(BaseSettings):
    """Configuration for the simulation engine.

    Attributes:
        tick_interval_ms: Interval between driver ticks.
        action_log_limit: Maximum number of action log entries kept.
        skill_tier_base: Base of the tier-scaled experience curve.
        max_offline_seconds: Cap on replayed offline time.
        catch_up_step_ms: Step size used when replaying offline time.
        rng_seed: Optional seed for reproducible reward rolls.
        improvements: Escalation table applied at completion milestones.
    """

    model_config = SettingsConfigDict(
        env_prefix="IDLE_RPG_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tick_interval_ms: int = Field(
        default=DEFAULT_TICK_INTERVAL_MS,
        ge=10,
        le=5000,
        description="Driver tick interval",
    )
    action_log_limit: int = Field(
        default=ACTION_LOG_LIMIT,
        ge=1,
        le=10_000,
        description="Maximum action log entries",
    )
    skill_tier_base: float = Field(
        default=SKILL_TIER_BASE,
        ge=1.0,
        description="Experience curve growth per tier",
    )
    max_offline_seconds: int = Field(
        default=MAX_OFFLINE_SECONDS,
        ge=0,
        description="Cap on replayed offline time",
    )
    catch_up_step_ms: int = Field(
        default=CATCH_UP_STEP_MS,
        ge=10,
        description="Offline replay step size",
    )
    rng_seed: int | None = Field(
        default=None,
        description="Seed for reproducible reward rolls",
    )
    improvements: list[ImprovementRule] = Field(
        default_factory=lambda: [ImprovementRule(**rule) for rule in DEFAULT_IMPROVEMENTS],
        description="Completion milestone escalation table",
    )

    @model_validator(mode="after")
    def validate_improvements(self) -> "EngineSettings":
        """Ensure each completion milestone appears at most once.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If two rules share a milestone.
        """
        milestones = [rule.at_completions for rule in self.improvements]
        duplicates = sorted({m for m in milestones if milestones.count(m) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate improvement milestones: {duplicates}",
                config_key="improvements",
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for save storage.

    Attributes:
        database_path: Path to the SQLite save database.
        save_slot: Slot used when none is named.
        autosave_interval_seconds: Interval between automatic saves.
    """

    model_config = SettingsConfigDict(
        env_prefix="IDLE_RPG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/idle_rpg.db"),
        description="Path to SQLite save database",
    )
    save_slot: str = Field(
        default=DEFAULT_SAVE_SLOT,
        min_length=1,
        description="Default save slot",
    )
    autosave_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Autosave interval",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        debug: Console log output instead of JSON lines.
        log_level: Lowest level that reaches the log.
        engine: Simulation engine settings.
        storage: Save storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="IDLE_RPG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "ImprovementRule",
    "EngineSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
