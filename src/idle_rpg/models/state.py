"""Mutable runtime state for the idle RPG engine.

``GameState`` is the single State Store of a session: one runtime record
per definition id plus the session fields (current and previous action,
action log, home, character). It is a plain pydantic model so that the
persistence layer can dump it to JSON-safe data and merge it back.

Example:
    >>> from idle_rpg.content.defaults import default_definitions
    >>> state = create_game_state(default_definitions())
    >>> state.resources["gold"].amount
    0.0
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from idle_rpg.models.definitions import Reward
from idle_rpg.models.enums import DefinitionCategory, ResourceKind


if TYPE_CHECKING:
    from idle_rpg.models.definitions import DefinitionStore


class _Record(BaseModel):
    """Base for per-id runtime records."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Definition id")
    unlocked: bool = Field(default=False, description="Unlock flag")


# =============================================================================
# Runtime Records
# =============================================================================


class ResourceState(_Record):
    """Runtime pool for one resource.

    A single composed value type covers both stat pools and currencies;
    ``kind`` and ``regen_rate`` carry the behavioural differences.

    Invariant: ``minimum <= amount <= maximum`` whenever observed.
    """

    kind: ResourceKind = ResourceKind.CURRENCY
    amount: float = Field(default=0, description="Current holding")
    maximum: float | None = Field(default=None, description="Capacity, None for unbounded")
    minimum: float = Field(default=0, description="Floor of the holding")
    regen_rate: float = Field(default=0, description="Passive change per second")

    @property
    def capacity(self) -> float:
        """Capacity as a number; unbounded pools report infinity."""
        return float("inf") if self.maximum is None else self.maximum

    @property
    def is_full(self) -> bool:
        return self.maximum is not None and self.amount >= self.maximum


class SkillState(_Record):
    """Runtime progress of one skill."""

    level: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    next_level_experience: int = Field(default=100, gt=0)
    max_level: int | None = Field(default=None, description="Level ceiling")
    tier: int = Field(default=1, ge=0)

    @property
    def is_maxed(self) -> bool:
        return self.max_level is not None and self.level >= self.max_level


class ActionState(_Record):
    """Runtime progress of one action.

    ``base_duration`` and ``currency_rewards`` are copies of the definition
    values that improvements adjust over time.
    """

    current_progress: float = Field(default=0, ge=0, description="Fraction of duration elapsed")
    base_duration: float = Field(gt=0, description="Current duration in milliseconds")
    currency_rewards: dict[str, Reward] = Field(default_factory=dict)
    completion_count: int = Field(default=0, ge=0)
    total_time_spent: float = Field(default=0, ge=0)
    last_action_start_time: float | None = Field(default=None)
    exhausted: bool = Field(default=False, description="Completion limit reached")


class UpgradeState(_Record):
    """Purchase history of one upgrade."""

    purchased: int = Field(default=0, ge=0)


class ClassState(_Record):
    """Availability of one character class."""


class HomeState(_Record):
    """Availability of one home."""


class LocationState(_Record):
    """Discovery state of one location."""

    discovered: bool = False
    visited: bool = False


class FurnitureState(_Record):
    """Whether one piece of furniture stands in the current home."""

    placed: bool = False


class CharacterState(BaseModel):
    """The player character."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    class_id: str | None = None


class LogEntry(BaseModel):
    """One line of player-facing narration."""

    model_config = ConfigDict(extra="ignore")

    message: str
    timestamp: float


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """The State Store: every mutable value of one session.

    Attributes:
        current_action: Id of the active action, if any.
        previous_action: Action to resume after an involuntary rest.
        default_rest_action: Rest action used as the fallback.
        max_simultaneous_actions: Recorded by upgrades; not acted on.
        special_effects: Special effect name -> times purchased.
        action_log: Narration, newest first, bounded.
        last_saved_at: Clock time of the last save, in milliseconds.
    """

    model_config = ConfigDict(extra="ignore")

    resources: dict[str, ResourceState] = Field(default_factory=dict)
    skills: dict[str, SkillState] = Field(default_factory=dict)
    actions: dict[str, ActionState] = Field(default_factory=dict)
    upgrades: dict[str, UpgradeState] = Field(default_factory=dict)
    classes: dict[str, ClassState] = Field(default_factory=dict)
    homes: dict[str, HomeState] = Field(default_factory=dict)
    locations: dict[str, LocationState] = Field(default_factory=dict)
    furniture: dict[str, FurnitureState] = Field(default_factory=dict)

    character: CharacterState = Field(default_factory=CharacterState)
    home: str | None = None
    current_action: str | None = None
    previous_action: str | None = None
    default_rest_action: str | None = None
    max_simultaneous_actions: int = Field(default=1, ge=1)
    special_effects: dict[str, int] = Field(default_factory=dict)
    action_log: list[LogEntry] = Field(default_factory=list)
    last_saved_at: float | None = None

    def records(self, category: DefinitionCategory | str) -> dict[str, _Record]:
        """Return the runtime records of one category."""
        return getattr(self, DefinitionCategory(category).value)

    def stat_pools(self) -> list[ResourceState]:
        return [r for r in self.resources.values() if r.kind == ResourceKind.STAT]


def create_game_state(definitions: DefinitionStore) -> GameState:
    """Build a fresh session state from the definition catalog.

    Every record starts from its definition defaults with zero progress.

    Args:
        definitions: The loaded definition catalog.

    Returns:
        A new GameState.
    """
    resources = {
        rid: ResourceState(
            id=rid,
            kind=d.kind,
            amount=d.amount,
            maximum=d.maximum,
            regen_rate=d.regen_rate,
            unlocked=d.starts_unlocked,
        )
        for rid, d in definitions.resources.items()
    }
    skills = {
        sid: SkillState(
            id=sid,
            level=d.level,
            next_level_experience=d.next_level_experience,
            max_level=d.max_level,
            tier=d.tier,
            unlocked=d.starts_unlocked,
        )
        for sid, d in definitions.skills.items()
    }
    actions = {
        aid: ActionState(
            id=aid,
            base_duration=d.base_duration,
            currency_rewards=dict(d.currency_rewards),
            unlocked=d.starts_unlocked,
        )
        for aid, d in definitions.actions.items()
    }
    upgrades = {
        uid: UpgradeState(id=uid, unlocked=d.starts_unlocked)
        for uid, d in definitions.upgrades.items()
    }
    classes = {
        cid: ClassState(id=cid, unlocked=d.starts_unlocked)
        for cid, d in definitions.classes.items()
    }
    homes = {
        hid: HomeState(id=hid, unlocked=d.starts_unlocked)
        for hid, d in definitions.homes.items()
    }
    locations = {
        lid: LocationState(id=lid, unlocked=d.starts_unlocked, discovered=d.discovered)
        for lid, d in definitions.locations.items()
    }
    furniture = {
        fid: FurnitureState(id=fid, unlocked=d.starts_unlocked)
        for fid, d in definitions.furniture.items()
    }

    # Skills that start above level 0 already hold their level effects
    for sid, d in definitions.skills.items():
        if d.level == 0:
            continue
        for rid, delta in d.level_effects.maximum_changes.items():
            resource = resources.get(rid)
            if resource is not None and resource.maximum is not None:
                resource.maximum = max(resource.minimum, resource.maximum + delta * d.level)
                resource.amount = min(resource.amount, resource.maximum)
        for rid, delta in d.level_effects.currency_generation.items():
            if rid in resources:
                resources[rid].regen_rate += delta * d.level

    home = definitions.starting_home
    if home is not None and home in homes:
        homes[home].unlocked = True

    return GameState(
        resources=resources,
        skills=skills,
        actions=actions,
        upgrades=upgrades,
        classes=classes,
        homes=homes,
        locations=locations,
        furniture=furniture,
        home=home,
        default_rest_action=definitions.rest_action_id,
    )


__all__ = [
    "ResourceState",
    "SkillState",
    "ActionState",
    "UpgradeState",
    "ClassState",
    "HomeState",
    "LocationState",
    "FurnitureState",
    "CharacterState",
    "LogEntry",
    "GameState",
    "create_game_state",
]
