"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the idle RPG test suite.
"""

from __future__ import annotations

import copy
import random
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from idle_rpg.core.config import EngineSettings
    from idle_rpg.engine.game import Game
    from idle_rpg.models.definitions import DefinitionStore


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from idle_rpg.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore the default structlog configuration after each test."""
    import structlog

    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "IDLE_RPG_DEBUG": "true",
        "IDLE_RPG_LOG_LEVEL": "DEBUG",
        "IDLE_RPG_ENGINE_ACTION_LOG_LIMIT": "25",
        "IDLE_RPG_SAVE_SLOT": "test-slot",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def engine_settings() -> EngineSettings:
    """Provide default engine settings."""
    from idle_rpg.core.config import EngineSettings

    return EngineSettings()


# =============================================================================
# Time & Randomness Fixtures
# =============================================================================


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a controllable millisecond clock."""
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    """Provide a deterministic random source."""
    return random.Random(1234)


# =============================================================================
# Content Fixtures
# =============================================================================


SAMPLE_CONTENT: dict[str, Any] = {
    "resources": [
        {"id": "health", "kind": "stat", "amount": 10, "maximum": 10},
        {"id": "stamina", "kind": "stat", "amount": 10, "maximum": 10},
        {"id": "gold", "amount": 0, "maximum": 100},
        {"id": "gems", "maximum": 5, "requirements": [{"resource": "gold", "amt": 50}]},
        {"id": "mana", "maximum": 20, "regen_rate": 2},
        {
            "id": "crystals",
            "generates": {"target": "mana", "rate_per_unit": 0.5},
        },
    ],
    "skills": [
        {"id": "training", "next_level_experience": 10, "max_level": 3, "tier": 1},
        {
            "id": "mastery",
            "next_level_experience": 100,
            "tier": 2,
            "level_effects": {
                "stat_pool_maximum": {"health": 2},
                "currency_generation": {"mana": 0.5},
            },
        },
    ],
    "actions": [
        {
            "id": "work",
            "base_duration": 4000,
            "stat_pool_costs": {"stamina": 5},
            "currency_rewards": {"gold": {"min": 1, "max": 3}},
            "skill_experience": {"training": 1},
        },
        {
            "id": "rest",
            "is_rest_action": True,
            "base_duration": 1000,
            "stat_pool_restoration": {"stamina": 5, "health": 5},
        },
        {
            "id": "study",
            "base_duration": 1000,
            "currency_costs": {"gold": 2},
            "skill_experience": {"training": 5},
            "requirements": [{"skill": "training", "level": 1}],
        },
        {
            "id": "forge",
            "base_duration": 1000,
            "currency_rewards": {"gold": 10},
            "max_changes": {"gold": 10},
            "max_purchases": 2,
        },
        {
            "id": "chat",
            "base_duration": 1000,
            "currency_rewards": {"gold": 1},
        },
    ],
    "upgrades": [
        {
            "id": "satchel",
            "costs": {"currencies": {"gold": 10}},
            "gains": {"currency_maximum": {"gold": 50}},
            "requirements": [{"resource": "gold", "amt": 10}],
        },
        {
            "id": "endurance",
            "costs": {"currencies": {"gold": 5}, "stat_pools": {"stamina": 8}},
            "gains": {"stat_pool_maximum": {"stamina": 5}},
        },
        {
            "id": "twin",
            "costs": {"currencies": {"gold": 1}},
            "gains": {"special_effects": ["double_actions"]},
            "number_of_purchases_possible": 2,
        },
        {
            "id": "wellspring",
            "costs": {"currencies": {"gold": 1}},
            "gains": {"currency_generation": {"mana": 1}},
        },
    ],
    "classes": [
        {"id": "waif"},
        {"id": "scholar", "requirements": [{"skill": "training", "level": 2}]},
    ],
    "homes": [
        {"id": "street"},
        {
            "id": "hut",
            "floor_space": 3,
            "location": "village",
            "requirements": [{"skill": "training", "level": 1}],
        },
        {"id": "house", "floor_space": 5},
    ],
    "locations": [
        {"id": "town", "discovered": True},
        {"id": "village", "requirements": [{"class": "waif"}]},
        {"id": "forest", "requirements": [{"location": "village"}]},
    ],
    "furniture": [
        {
            "id": "cot",
            "floor_space": 2,
            "costs": {"gold": 3},
            "effects": {"stat_pool_maximum": {"stamina": 5}},
        },
        {
            "id": "desk",
            "floor_space": 2,
            "effects": {"unlock_actions": ["study"]},
        },
        {
            "id": "shrine",
            "floor_space": 3,
            "effects": {"currency_generation": {"mana": 1}, "currency_maximum": {"mana": 10}},
        },
        {
            "id": "wardrobe",
            "floor_space": 1,
            "requirements": [{"skill": "training", "level": 3}],
        },
    ],
    "default_rest_action": "rest",
    "starting_home": "street",
}


@pytest.fixture
def sample_content() -> dict[str, Any]:
    """Provide a fresh copy of the raw sample catalog."""
    return copy.deepcopy(SAMPLE_CONTENT)


@pytest.fixture
def sample_definitions(sample_content: dict[str, Any]) -> DefinitionStore:
    """Provide the validated sample catalog."""
    from idle_rpg.content.loader import load_definitions

    return load_definitions(sample_content)


@pytest.fixture
def make_game(
    sample_definitions: DefinitionStore,
    engine_settings: EngineSettings,
    rng: random.Random,
    fake_clock: FakeClock,
) -> Callable[..., Game]:
    """Provide a factory for games over the sample catalog.

    Keyword arguments override the Game constructor arguments.
    """
    from idle_rpg.engine.game import Game

    def _make(**overrides: Any) -> Game:
        kwargs: dict[str, Any] = {
            "settings": engine_settings,
            "rng": rng,
            "clock": fake_clock,
        }
        kwargs.update(overrides)
        definitions = kwargs.pop("definitions", sample_definitions)
        return Game(definitions, **kwargs)

    return _make


@pytest.fixture
def game(make_game: Callable[..., Game]) -> Game:
    """Provide a fresh game over the sample catalog."""
    return make_game()
