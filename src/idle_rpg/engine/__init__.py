"""Simulation engine for the idle RPG.

Components:
    ResourceLedger: Typed pools, capacity clamping and passive generation.
    SkillProgression: Experience, level-up rollover and level ceilings.
    ActionEngine: Timed actions, completion, rest fallback and resume.
    UpgradeEvaluator: All-or-nothing upgrade purchases.
    HomeManager: Moving home, furniture and floor space.
    ContentUnlocker: Requirement-driven unlock sweeps.
    ActionLog / EventBus: Narration sink and notifications.
    Game: Composition root with ``tick(delta_ms)``.
    GameLoop: Fixed-interval driver with autosave.
"""

from __future__ import annotations

from idle_rpg.engine.actions import ActionEngine, CompletionResult, UpdateResult
from idle_rpg.engine.events import ActionLog, EventBus
from idle_rpg.engine.game import Game, create_game
from idle_rpg.engine.homes import HomeManager
from idle_rpg.engine.ledger import ResourceLedger
from idle_rpg.engine.loop import GameLoop
from idle_rpg.engine.skills import SkillProgression, next_threshold
from idle_rpg.engine.unlocks import ContentUnlocker, requirement_met, requirements_met
from idle_rpg.engine.upgrades import UpgradeEvaluator


__all__ = [
    "ActionEngine",
    "CompletionResult",
    "UpdateResult",
    "ActionLog",
    "EventBus",
    "Game",
    "create_game",
    "HomeManager",
    "ResourceLedger",
    "GameLoop",
    "SkillProgression",
    "next_threshold",
    "ContentUnlocker",
    "requirement_met",
    "requirements_met",
    "UpgradeEvaluator",
]
