"""Pydantic V2 schemas for the idle RPG engine.

Submodules:
    enums: Enumeration types (ResourceKind, FailureReason, GameEvent, ...)
    definitions: Frozen content catalog (DefinitionStore and entries)
    state: Mutable session state (GameState and runtime records)
    results: Operation results returned instead of raised errors

Example:
    >>> from idle_rpg.models import ActionDefinition, DefinitionStore, create_game_state
    >>> defs = DefinitionStore(actions={"rest": ActionDefinition(
    ...     id="rest", base_duration=1000, is_rest_action=True)})
    >>> create_game_state(defs).default_rest_action
    'rest'
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from idle_rpg.models.enums import (
    DefinitionCategory,
    FailureReason,
    GameEvent,
    ResourceKind,
)

# =============================================================================
# Definitions
# =============================================================================
from idle_rpg.models.definitions import (
    ActionDefinition,
    ClassDefinition,
    ClassEquals,
    Definition,
    DefinitionStore,
    FixedReward,
    FurnitureDefinition,
    FurnitureEffects,
    GenerationCapability,
    HomeDefinition,
    LocationDefinition,
    LocationDiscovered,
    RangeReward,
    Requirement,
    ResourceAtLeast,
    ResourceDefinition,
    ResourceEffects,
    Reward,
    SkillDefinition,
    SkillLevelAtLeast,
    UpgradeCosts,
    UpgradeDefinition,
    UpgradeGains,
    normalize_requirement,
    normalize_reward,
)

# =============================================================================
# Runtime State
# =============================================================================
from idle_rpg.models.state import (
    ActionState,
    CharacterState,
    ClassState,
    FurnitureState,
    GameState,
    HomeState,
    LocationState,
    LogEntry,
    ResourceState,
    SkillState,
    UpgradeState,
    create_game_state,
)

# =============================================================================
# Results
# =============================================================================
from idle_rpg.models.results import OperationResult


__all__ = [
    # Enums
    "DefinitionCategory",
    "FailureReason",
    "GameEvent",
    "ResourceKind",
    # Definitions
    "ActionDefinition",
    "ClassDefinition",
    "ClassEquals",
    "Definition",
    "DefinitionStore",
    "FixedReward",
    "FurnitureDefinition",
    "FurnitureEffects",
    "GenerationCapability",
    "HomeDefinition",
    "LocationDefinition",
    "LocationDiscovered",
    "RangeReward",
    "Requirement",
    "ResourceAtLeast",
    "ResourceDefinition",
    "ResourceEffects",
    "Reward",
    "SkillDefinition",
    "SkillLevelAtLeast",
    "UpgradeCosts",
    "UpgradeDefinition",
    "UpgradeGains",
    "normalize_requirement",
    "normalize_reward",
    # State
    "ActionState",
    "CharacterState",
    "ClassState",
    "FurnitureState",
    "GameState",
    "HomeState",
    "LocationState",
    "LogEntry",
    "ResourceState",
    "SkillState",
    "UpgradeState",
    "create_game_state",
    # Results
    "OperationResult",
]
