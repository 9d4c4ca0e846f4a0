"""Skill progression: experience, level-up rollover and the level ceiling.

The ceiling of each skill is the ``max_level`` of that skill's own
definition (``None`` for uncapped). Once a skill sits at its ceiling its
experience is pinned to ``next_level_experience`` and no longer grows.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from idle_rpg.core.constants import SKILL_TIER_BASE
from idle_rpg.core.logging import get_logger
from idle_rpg.models.enums import FailureReason, GameEvent
from idle_rpg.models.results import OperationResult


if TYPE_CHECKING:
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.engine.ledger import ResourceLedger
    from idle_rpg.models.definitions import DefinitionStore
    from idle_rpg.models.state import GameState, SkillState

logger = get_logger(__name__)


def next_threshold(current: int, tier: int, base: float = SKILL_TIER_BASE) -> int:
    """Experience needed for the level after a level-up.

    Example:
        >>> next_threshold(50, tier=1)
        55
        >>> next_threshold(50, tier=2)
        60
    """
    return max(current, math.floor(current * base**tier))


class SkillProgression:
    """Adds experience to skills and levels them up.

    With a ledger, each level gained applies the skill's ``level_effects``.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState,
        *,
        tier_base: float = SKILL_TIER_BASE,
        ledger: ResourceLedger | None = None,
        log: ActionLog | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._defs = definitions
        self._state = state
        self._tier_base = tier_base
        self._ledger = ledger
        self._log = log
        self._events = events

    def get(self, skill_id: str) -> SkillState | None:
        return self._state.skills.get(skill_id)

    def add_xp(self, skill_id: str, amount: int) -> OperationResult:
        """Accumulate experience, levelling up as many times as it allows.

        Args:
            skill_id: Skill to credit.
            amount: Experience to add (non-negative).

        Returns:
            Result whose ``applied`` is the number of levels gained.
        """
        if amount < 0:
            msg = f"experience must be non-negative, got {amount}"
            raise ValueError(msg)
        skill = self.get(skill_id)
        if skill is None:
            return OperationResult.failure(FailureReason.MISSING_SKILL, skill_id)

        if skill.is_maxed:
            skill.experience = skill.next_level_experience
            return OperationResult.success(0)

        skill.experience += amount
        levels = 0
        while self.level_up(skill_id):
            levels += 1

        if skill.is_maxed:
            skill.experience = skill.next_level_experience
        return OperationResult.success(levels)

    def level_up(self, skill_id: str) -> OperationResult:
        """Spend ``next_level_experience`` to gain one level.

        Excess experience carries over, and the threshold for the next
        level grows by ``tier_base ** tier``.
        """
        skill = self.get(skill_id)
        if skill is None:
            return OperationResult.failure(FailureReason.MISSING_SKILL, skill_id)
        if skill.is_maxed:
            return OperationResult.failure(FailureReason.MAX_LEVEL, skill_id)
        if skill.experience < skill.next_level_experience:
            return OperationResult.failure(FailureReason.NOT_ENOUGH_XP, skill_id)

        skill.experience -= skill.next_level_experience
        skill.level += 1
        skill.next_level_experience = next_threshold(
            skill.next_level_experience, skill.tier, self._tier_base
        )

        definition = self._defs.skills.get(skill_id)
        if definition is not None and self._ledger is not None:
            self._ledger.apply_effects(definition.level_effects)
        name = definition.name if definition is not None else skill_id
        logger.info(
            "Skill leveled up",
            skill_id=skill_id,
            level=skill.level,
            next_level_experience=skill.next_level_experience,
        )
        if self._log is not None:
            self._log.add(f"Your {name} skill increased to level {skill.level}!")
        if self._events is not None:
            self._events.emit(GameEvent.SKILL_LEVELED, skill_id=skill_id, level=skill.level)
        return OperationResult.success(1)


__all__ = ["SkillProgression", "next_threshold"]
