"""Static content definitions for the idle RPG engine.

Definitions are the read-only catalog loaded once per session: resources,
skills, actions, upgrades, classes, homes, locations and furniture keyed
by id. They
are frozen pydantic models and the engine never mutates them; all runtime
values live in ``idle_rpg.models.state``.

Two tagged variants replace the ad hoc shapes found in raw content:

- ``Requirement``: ``ResourceAtLeast | SkillLevelAtLeast |
  LocationDiscovered | ClassEquals`` discriminated on ``kind``.
- ``Reward``: ``FixedReward | RangeReward`` discriminated on ``kind``.

Raw shapes such as ``{"resource": "gold", "amt": 10}`` or
``{"min": 1, "max": 3}`` are normalized by before-validators, so content
files may use either form.

Example:
    >>> action = ActionDefinition(
    ...     id="beg",
    ...     base_duration=2000,
    ...     stat_pool_costs={"stamina": 2},
    ...     currency_rewards={"gold": {"min": 0, "max": 2}},
    ... )
    >>> action.currency_rewards["gold"]
    RangeReward(kind='range', min=0, max=2)
"""

from __future__ import annotations

import math
import random
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from idle_rpg.core.constants import DEFAULT_SKILL_TIER
from idle_rpg.models.enums import DefinitionCategory, ResourceKind


NonNegativeAmount = Annotated[float, Field(ge=0)]
"""A cost, restoration or capacity amount that may not be negative."""


def _rename_keys(data: Any, aliases: Mapping[str, str]) -> Any:
    """Map legacy camelCase keys of raw content onto field names.

    Keys already given under their field name win over their alias.
    """
    if not isinstance(data, dict):
        return data
    renamed = dict(data)
    for alias, field_name in aliases.items():
        if alias in renamed:
            value = renamed.pop(alias)
            renamed.setdefault(field_name, value)
    return renamed


# =============================================================================
# Requirements
# =============================================================================


class ResourceAtLeast(BaseModel):
    """Satisfied when a resource holding reaches an amount."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["resource"] = "resource"
    resource: str = Field(min_length=1, description="Resource id")
    amount: float = Field(gt=0, description="Minimum holding")


class SkillLevelAtLeast(BaseModel):
    """Satisfied when a skill reaches a level."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["skill"] = "skill"
    skill: str = Field(min_length=1, description="Skill id")
    level: int = Field(ge=0, description="Minimum level")


class LocationDiscovered(BaseModel):
    """Satisfied once a location has been discovered."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["location"] = "location"
    location: str = Field(min_length=1, description="Location id")


class ClassEquals(BaseModel):
    """Satisfied when the character has chosen a class."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["class"] = "class"
    class_id: str = Field(min_length=1, description="Character class id")


Requirement = Annotated[
    ResourceAtLeast | SkillLevelAtLeast | LocationDiscovered | ClassEquals,
    Field(discriminator="kind", description="One unlock prerequisite"),
]
"""Discriminated union of every prerequisite kind.

The 'kind' field serves as the discriminator:
- "resource" -> ResourceAtLeast
- "skill" -> SkillLevelAtLeast
- "location" -> LocationDiscovered
- "class" -> ClassEquals
"""


def normalize_requirement(raw: Any) -> Any:
    """Convert a raw requirement object into its tagged form.

    Objects that match no known shape are returned unchanged so that
    validation reports them.

    Example:
        >>> normalize_requirement({"resource": "gold", "amt": 10})
        {'kind': 'resource', 'resource': 'gold', 'amount': 10}
    """
    if not isinstance(raw, dict) or "kind" in raw:
        return raw
    if "resource" in raw:
        return {
            "kind": "resource",
            "resource": raw["resource"],
            "amount": raw.get("amount", raw.get("amt")),
        }
    if "skill" in raw:
        return {"kind": "skill", "skill": raw["skill"], "level": raw.get("level")}
    if "location" in raw:
        return {"kind": "location", "location": raw["location"]}
    if "class" in raw or "class_id" in raw:
        return {"kind": "class", "class_id": raw.get("class_id", raw.get("class"))}
    return raw


# =============================================================================
# Rewards
# =============================================================================


class FixedReward(BaseModel):
    """A reward that always grants the same amount."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["fixed"] = "fixed"
    amount: int = Field(ge=0, description="Amount granted")

    def resolve(self, rng: random.Random) -> int:
        return self.amount

    def scaled(self, multiplier: float) -> FixedReward:
        """Return a copy scaled by ``multiplier``, rounded up."""
        return FixedReward(amount=math.ceil(self.amount * multiplier))


class RangeReward(BaseModel):
    """A reward drawn uniformly from an inclusive integer range."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["range"] = "range"
    min: int = Field(ge=0, description="Smallest amount granted")
    max: int = Field(ge=0, description="Largest amount granted")

    @model_validator(mode="after")
    def validate_bounds(self) -> RangeReward:
        if self.min > self.max:
            msg = f"Reward range min ({self.min}) exceeds max ({self.max})"
            raise ValueError(msg)
        return self

    def resolve(self, rng: random.Random) -> int:
        """Draw one amount; both bounds are possible outcomes."""
        return rng.randint(self.min, self.max)

    def scaled(self, multiplier: float) -> RangeReward:
        """Return a copy with both bounds scaled by ``multiplier``, rounded up."""
        return RangeReward(
            min=math.ceil(self.min * multiplier),
            max=math.ceil(self.max * multiplier),
        )


Reward = Annotated[
    FixedReward | RangeReward,
    Field(discriminator="kind", description="A fixed or ranged reward"),
]
"""Discriminated union of reward shapes."""


def normalize_reward(raw: Any) -> Any:
    """Convert a raw reward value into its tagged form.

    Example:
        >>> normalize_reward(3)
        {'kind': 'fixed', 'amount': 3}
        >>> normalize_reward({"min": 1, "max": 3})
        {'kind': 'range', 'min': 1, 'max': 3}
    """
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int | float):
        return {"kind": "fixed", "amount": raw}
    if isinstance(raw, dict) and "kind" not in raw:
        if "min" in raw or "max" in raw:
            return {"kind": "range", "min": raw.get("min"), "max": raw.get("max")}
        if "amount" in raw or "amt" in raw:
            return {"kind": "fixed", "amount": raw.get("amount", raw.get("amt"))}
    return raw


# =============================================================================
# Definition Base
# =============================================================================


class Definition(BaseModel):
    """Fields shared by every catalog entry.

    Attributes:
        id: Unique id within its category.
        name: Display name; derived from the id when omitted.
        description: Flavour text.
        requirements: Prerequisites, all of which must hold to unlock.
        unlocked: Explicit initial unlock flag. When omitted, an entry with
            no requirements starts unlocked.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Unique id")
    name: str = Field(default="", description="Display name")
    description: str = Field(default="", description="Flavour text")
    requirements: tuple[Requirement, ...] = Field(
        default=(),
        description="Unlock prerequisites (logical AND)",
    )
    unlocked: bool | None = Field(
        default=None,
        description="Initial unlock flag; derived from requirements when omitted",
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_raw(cls, data: Any) -> Any:
        """Accept the singular ``requirement`` key and derive a display name."""
        data = _rename_keys(data, {"requirement": "requirements"})
        if isinstance(data, dict) and not data.get("name") and data.get("id"):
            data["name"] = str(data["id"]).replace("_", " ").replace("-", " ").title()
        return data

    @field_validator("requirements", mode="before")
    @classmethod
    def normalize_requirements(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, dict):
            value = [value]
        if isinstance(value, list | tuple):
            return tuple(normalize_requirement(item) for item in value)
        return value

    @property
    def starts_unlocked(self) -> bool:
        """Whether the runtime record begins unlocked."""
        if self.unlocked is not None:
            return self.unlocked
        return not self.requirements


# =============================================================================
# Resources & Skills
# =============================================================================


class GenerationCapability(BaseModel):
    """Passive production of another resource proportional to the holding.

    Each second, ``rate_per_unit * holding`` of ``target`` is produced.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    target: str = Field(min_length=1, description="Resource id produced")
    rate_per_unit: float = Field(ge=0, description="Production per unit held per second")


class ResourceEffects(BaseModel):
    """Capacity and rate changes applied to resources.

    Shared by upgrade gains, skill level effects and furniture. Applying
    the same effects with a negative scale reverses them.

    Attributes:
        currency_maximum: Currency id -> capacity delta.
        stat_pool_maximum: Stat pool id -> capacity delta.
        currency_generation: Resource id -> passive change per second delta.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    currency_maximum: dict[str, float] = Field(default_factory=dict)
    stat_pool_maximum: dict[str, float] = Field(default_factory=dict)
    currency_generation: dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {
                "currencyMaximum": "currency_maximum",
                "statPoolMaximum": "stat_pool_maximum",
                "statPools": "stat_pool_maximum",
                "currencyGeneration": "currency_generation",
            },
        )

    @property
    def resource_ids(self) -> set[str]:
        return (
            set(self.currency_maximum)
            | set(self.stat_pool_maximum)
            | set(self.currency_generation)
        )

    @property
    def maximum_changes(self) -> dict[str, float]:
        """Every capacity delta, currencies and stat pools combined."""
        combined = dict(self.currency_maximum)
        for resource_id, delta in self.stat_pool_maximum.items():
            combined[resource_id] = combined.get(resource_id, 0) + delta
        return combined


class ResourceDefinition(Definition):
    """A currency or stat pool.

    Attributes:
        kind: ``stat`` for health-like pools, ``currency`` for earned resources.
        amount: Starting holding.
        maximum: Capacity; ``None`` means unbounded. Stat pools need one.
        regen_rate: Passive change per second (negative values decay).
        generates: Optional production of another resource.
    """

    kind: ResourceKind = Field(default=ResourceKind.CURRENCY, description="Pool kind")
    amount: NonNegativeAmount = Field(default=0, description="Starting holding")
    maximum: float | None = Field(default=None, gt=0, description="Capacity")
    regen_rate: float = Field(default=0, description="Passive change per second")
    generates: GenerationCapability | None = Field(
        default=None,
        description="Production of another resource",
    )

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {
                "type": "kind",
                "changePerTick": "regen_rate",
                "generationRate": "regen_rate",
                "regenRate": "regen_rate",
                "max": "maximum",
                "current": "amount",
            },
        )

    @model_validator(mode="after")
    def validate_capacity(self) -> ResourceDefinition:
        if self.kind == ResourceKind.STAT and self.maximum is None:
            msg = f"Stat pool {self.id!r} needs a maximum"
            raise ValueError(msg)
        if self.maximum is not None and self.amount > self.maximum:
            msg = f"Resource {self.id!r} amount {self.amount} exceeds maximum {self.maximum}"
            raise ValueError(msg)
        return self


class SkillDefinition(Definition):
    """A skill that levels up from action experience.

    Attributes:
        next_level_experience: Experience needed for the first level-up.
        max_level: Level ceiling; ``None`` means uncapped.
        tier: Steepness of the experience curve.
        level: Starting level.
        level_effects: Effects gained with every level, e.g. survival
            raising maximum stamina by one per level.
    """

    next_level_experience: int = Field(default=100, gt=0, description="Experience to level")
    max_level: int | None = Field(default=None, ge=0, description="Level ceiling")
    tier: int = Field(default=DEFAULT_SKILL_TIER, ge=0, description="Curve tier")
    level: int = Field(default=0, ge=0, description="Starting level")
    level_effects: ResourceEffects = Field(default_factory=ResourceEffects)

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {
                "nextLevelExperience": "next_level_experience",
                "maxLevel": "max_level",
                "levelEffects": "level_effects",
            },
        )

    @model_validator(mode="after")
    def validate_level(self) -> SkillDefinition:
        if self.max_level is not None and self.level > self.max_level:
            msg = f"Skill {self.id!r} starts above its max level"
            raise ValueError(msg)
        return self


# =============================================================================
# Actions
# =============================================================================


class ActionDefinition(Definition):
    """A timed task exchanging costs for rewards on completion.

    Costs are charged and rewards granted only when the action completes.

    Attributes:
        is_rest_action: Whether this action is a rest (cost-free refill) action.
        base_duration: Milliseconds needed for one completion.
        stat_pool_costs: Stat pool id -> amount consumed.
        currency_costs: Currency id -> amount consumed.
        currency_rewards: Resource id -> reward granted.
        skill_experience: Skill id -> experience granted.
        stat_pool_restoration: Stat pool id -> amount restored.
        max_changes: Resource id -> capacity delta applied.
        max_purchases: Completion limit after which the action locks.
    """

    is_rest_action: bool = Field(default=False, description="Rest action flag")
    base_duration: float = Field(gt=0, description="Duration in milliseconds")
    stat_pool_costs: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    currency_costs: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    currency_rewards: dict[str, Reward] = Field(default_factory=dict)
    skill_experience: dict[str, Annotated[int, Field(ge=0)]] = Field(default_factory=dict)
    stat_pool_restoration: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    max_changes: dict[str, float] = Field(default_factory=dict)
    max_purchases: int | None = Field(default=None, ge=1, description="Completion limit")

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {
                "isRestAction": "is_rest_action",
                "baseDuration": "base_duration",
                "duration": "base_duration",
                "statPoolCosts": "stat_pool_costs",
                "currencyCosts": "currency_costs",
                "currencyRewards": "currency_rewards",
                "skillExperience": "skill_experience",
                "statPoolRestoration": "stat_pool_restoration",
                "maxChanges": "max_changes",
                "maxPurchases": "max_purchases",
            },
        )

    @field_validator("currency_rewards", mode="before")
    @classmethod
    def normalize_rewards(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: normalize_reward(reward) for key, reward in value.items()}
        return value

    @property
    def costs(self) -> dict[str, float]:
        """Every completion cost, stat pools and currencies combined."""
        combined: dict[str, float] = dict(self.stat_pool_costs)
        for resource_id, amount in self.currency_costs.items():
            combined[resource_id] = combined.get(resource_id, 0) + amount
        return combined


# =============================================================================
# Upgrades
# =============================================================================


class UpgradeCosts(BaseModel):
    """Everything deducted by one upgrade purchase."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    currencies: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    stat_pools: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    stat_pool_maximums: dict[str, NonNegativeAmount] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {"statPools": "stat_pools", "statPoolMaximums": "stat_pool_maximums"},
        )

    @property
    def resource_ids(self) -> set[str]:
        return set(self.currencies) | set(self.stat_pools) | set(self.stat_pool_maximums)


class UpgradeGains(ResourceEffects):
    """Permanent effects of one upgrade purchase."""

    special_effects: tuple[str, ...] = Field(default=())

    @model_validator(mode="before")
    @classmethod
    def rename_effect_fields(cls, data: Any) -> Any:
        return _rename_keys(data, {"specialEffects": "special_effects"})

    @field_validator("special_effects", mode="before")
    @classmethod
    def normalize_effects(cls, value: Any) -> Any:
        # Raw content may list effects as {"doubleActions": true}
        if isinstance(value, dict):
            return tuple(name for name, enabled in value.items() if enabled)
        if isinstance(value, str):
            return (value,)
        return value


class UpgradeDefinition(Definition):
    """A one-shot (or few-shot) purchase that changes capacities and rates.

    Attributes:
        costs: Amounts deducted per purchase.
        gains: Effects applied per purchase.
        number_of_purchases_possible: Purchase limit.
    """

    costs: UpgradeCosts = Field(default_factory=UpgradeCosts)
    gains: UpgradeGains = Field(default_factory=UpgradeGains)
    number_of_purchases_possible: int = Field(default=1, ge=1, description="Purchase limit")

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(
            data,
            {
                "numberOfPurchasesPossible": "number_of_purchases_possible",
                "cost": "costs",
                "gain": "gains",
            },
        )


# =============================================================================
# Classes, Homes, Locations & Furniture
# =============================================================================


class ClassDefinition(Definition):
    """A character class the player may choose."""


class HomeDefinition(Definition):
    """A place the character can live in.

    Attributes:
        floor_space: Room available for furnishings.
        location: Location id where the home stands, if any.
    """

    floor_space: int = Field(default=0, ge=0, description="Available floor space")
    location: str | None = Field(default=None, description="Location id")

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(data, {"floorSpace": "floor_space"})


class FurnitureEffects(ResourceEffects):
    """Effects of a placed piece of furniture.

    Removing the furniture reverses the resource effects; actions it
    unlocked stay unlocked.
    """

    unlock_actions: tuple[str, ...] = Field(default=(), description="Action ids unlocked")

    @model_validator(mode="before")
    @classmethod
    def rename_action_effects(cls, data: Any) -> Any:
        data = _rename_keys(data, {"unlockActions": "unlock_actions"})
        # Raw content lists unlocks as {"type": "unlock", "id": ...}
        if isinstance(data, dict) and isinstance(data.get("actions"), list):
            actions = data.pop("actions")
            data.setdefault(
                "unlock_actions",
                [a.get("id") for a in actions if isinstance(a, dict) and a.get("type") == "unlock"],
            )
        return data


class FurnitureDefinition(Definition):
    """Something the character can place in their home.

    Attributes:
        floor_space: Floor space taken while placed.
        costs: Currency id -> amount paid each time it is placed.
        effects: Effects held while placed.
    """

    floor_space: int = Field(default=1, ge=0, description="Floor space taken")
    costs: dict[str, NonNegativeAmount] = Field(default_factory=dict)
    effects: FurnitureEffects = Field(default_factory=FurnitureEffects)

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_fields(cls, data: Any) -> Any:
        return _rename_keys(data, {"floorSpace": "floor_space", "cost": "costs"})


class LocationDefinition(Definition):
    """A map location.

    Attributes:
        discovered: Whether the location is known from the start.
    """

    discovered: bool = Field(default=False, description="Initially discovered")


# =============================================================================
# Definition Store
# =============================================================================


class DefinitionStore(BaseModel):
    """Immutable catalog of every definition, keyed by category then id.

    Attributes:
        default_rest_action: Id of the rest action used as fallback. When
            omitted, the first action flagged ``is_rest_action`` is used.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    resources: dict[str, ResourceDefinition] = Field(default_factory=dict)
    skills: dict[str, SkillDefinition] = Field(default_factory=dict)
    actions: dict[str, ActionDefinition] = Field(default_factory=dict)
    upgrades: dict[str, UpgradeDefinition] = Field(default_factory=dict)
    classes: dict[str, ClassDefinition] = Field(default_factory=dict)
    homes: dict[str, HomeDefinition] = Field(default_factory=dict)
    locations: dict[str, LocationDefinition] = Field(default_factory=dict)
    furniture: dict[str, FurnitureDefinition] = Field(default_factory=dict)
    default_rest_action: str | None = Field(default=None, description="Fallback rest action id")
    starting_home: str | None = Field(default=None, description="Home id at session start")

    @model_validator(mode="after")
    def validate_keys(self) -> DefinitionStore:
        for category in DefinitionCategory:
            for key, definition in self.category(category).items():
                if key != definition.id:
                    msg = f"{category}: key {key!r} does not match id {definition.id!r}"
                    raise ValueError(msg)
        return self

    def category(self, category: DefinitionCategory | str) -> Mapping[str, Definition]:
        """Return the id mapping for one category."""
        return getattr(self, DefinitionCategory(category).value)

    @property
    def rest_action_id(self) -> str | None:
        """Id of the rest action the engine falls back to."""
        if self.default_rest_action is not None:
            return self.default_rest_action
        for action in self.actions.values():
            if action.is_rest_action:
                return action.id
        return None


__all__ = [
    # Requirements
    "ResourceAtLeast",
    "SkillLevelAtLeast",
    "LocationDiscovered",
    "ClassEquals",
    "Requirement",
    "normalize_requirement",
    # Rewards
    "FixedReward",
    "RangeReward",
    "Reward",
    "normalize_reward",
    # Definitions
    "Definition",
    "GenerationCapability",
    "ResourceEffects",
    "ResourceDefinition",
    "SkillDefinition",
    "ActionDefinition",
    "UpgradeCosts",
    "UpgradeGains",
    "UpgradeDefinition",
    "ClassDefinition",
    "HomeDefinition",
    "FurnitureEffects",
    "FurnitureDefinition",
    "LocationDefinition",
    "DefinitionStore",
]
