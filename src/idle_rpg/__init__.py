"""Idle RPG - action/progress simulation engine for an incremental RPG.

A character performs time-gated actions that consume and produce typed
resources (gold, stamina, research, skill experience), unlocking skills,
actions, upgrades, homes and locations as thresholds are crossed.

Example:
    >>> from idle_rpg import create_game
    >>>
    >>> game = create_game()
    >>> game.start_action("beg")
    True
    >>> result = game.tick(2000)
    >>> game.state.action_log[0].message
    'You completed Beg for Coins and gained ...'

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 definitions, runtime state and results.
    content: Content loading, validation and starter content.
    engine: Ledger, skills, actions, upgrades, unlocks, game and loop.
    storage: Snapshot/merge/restore and SQLite save slots.
"""

from __future__ import annotations

# Core
from idle_rpg.core.config import Settings, get_settings
from idle_rpg.core.exceptions import IdleRpgError
from idle_rpg.core.logging import configure_logging, get_logger

# Content
from idle_rpg.content import default_definitions, load_definitions, load_definitions_file

# Engine
from idle_rpg.engine import Game, GameLoop, create_game

# Models
from idle_rpg.models import (
    DefinitionStore,
    FailureReason,
    GameState,
    OperationResult,
    create_game_state,
)

# Storage
from idle_rpg.storage import SaveStore, get_save_store


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "IdleRpgError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Content
    "default_definitions",
    "load_definitions",
    "load_definitions_file",
    # Engine
    "Game",
    "GameLoop",
    "create_game",
    # Models
    "DefinitionStore",
    "FailureReason",
    "GameState",
    "OperationResult",
    "create_game_state",
    # Storage
    "SaveStore",
    "get_save_store",
]
