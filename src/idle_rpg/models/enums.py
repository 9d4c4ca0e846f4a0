"""Enumeration types for the idle RPG engine.

These enums give the string-valued categories used across definitions,
runtime state and operation results a single typed home.
"""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Kind of a resource pool.

    Stat pools (health, stamina) regenerate and are what a rest action
    refills; currencies (gold, research) are earned and spent.
    """

    STAT = "stat"
    CURRENCY = "currency"


class FailureReason(StrEnum):
    """Reason code attached to a failed engine operation.

    Callers surface these as messages; the engine never raises for them.
    """

    MISSING = "missing"
    MISSING_RESOURCE = "missing-resource"
    MISSING_SKILL = "missing-skill"
    LOCKED = "locked"
    INSUFFICIENT = "insufficient"
    MAX_LEVEL = "max-level"
    NOT_ENOUGH_XP = "not-enough-xp"
    SOLD_OUT = "sold-out"
    NO_FLOOR_SPACE = "no-floor-space"
    ALREADY_PLACED = "already-placed"


class DefinitionCategory(StrEnum):
    """Top-level categories of the definition catalog."""

    RESOURCES = "resources"
    SKILLS = "skills"
    ACTIONS = "actions"
    UPGRADES = "upgrades"
    CLASSES = "classes"
    HOMES = "homes"
    LOCATIONS = "locations"
    FURNITURE = "furniture"


class GameEvent(StrEnum):
    """Names of notifications published on the event bus."""

    ACTION_STARTED = "action:started"
    ACTION_COMPLETED = "action:completed"
    ACTION_STOPPED = "action:stopped"
    REST_STARTED = "rest:started"
    RESOURCE_UNLOCKED = "resource:unlocked"
    SKILL_LEVELED = "skill:leveled"
    UPGRADE_PURCHASED = "upgrade:purchased"
    CONTENT_UNLOCKED = "content:unlocked"
    HOME_CHANGED = "home:changed"
    FURNITURE_ADDED = "furniture:added"
    FURNITURE_REMOVED = "furniture:removed"
    LOG_ADDED = "log:added"


__all__ = [
    "ResourceKind",
    "FailureReason",
    "DefinitionCategory",
    "GameEvent",
]
