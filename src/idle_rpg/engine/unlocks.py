"""Requirement evaluation and content unlock sweeps.

Unlocking is a one-way transition: once a record is unlocked it stays
unlocked. A sweep visits every locked record once and flips those whose
requirements now all hold.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from idle_rpg.core.logging import get_logger
from idle_rpg.models.definitions import (
    ClassEquals,
    LocationDiscovered,
    ResourceAtLeast,
    SkillLevelAtLeast,
)
from idle_rpg.models.enums import DefinitionCategory, GameEvent


if TYPE_CHECKING:
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.models.definitions import DefinitionStore
    from idle_rpg.models.state import GameState

logger = get_logger(__name__)


# =============================================================================
# Requirement Evaluation
# =============================================================================


def requirement_met(requirement: Any, state: GameState) -> bool:
    """Evaluate one prerequisite against the current state.

    Objects that are not a known requirement kind are unsatisfied.
    """
    if isinstance(requirement, ResourceAtLeast):
        resource = state.resources.get(requirement.resource)
        return resource is not None and resource.amount >= requirement.amount
    if isinstance(requirement, SkillLevelAtLeast):
        skill = state.skills.get(requirement.skill)
        return skill is not None and skill.level >= requirement.level
    if isinstance(requirement, LocationDiscovered):
        location = state.locations.get(requirement.location)
        return location is not None and location.discovered
    if isinstance(requirement, ClassEquals):
        return state.character.class_id == requirement.class_id
    return False


def requirements_met(requirements: Iterable[Any], state: GameState) -> bool:
    """Logical AND over a requirement list; an empty list holds."""
    return all(requirement_met(requirement, state) for requirement in requirements)


# =============================================================================
# Content Unlocks
# =============================================================================


_UNLOCK_MESSAGES: dict[DefinitionCategory, str] = {
    DefinitionCategory.SKILLS: "You unlocked the {name} skill!",
    DefinitionCategory.ACTIONS: "You unlocked a new action: {name}!",
    DefinitionCategory.CLASSES: "You can now become a {name}.",
    DefinitionCategory.HOMES: "You found a new place to live: {name}!",
    DefinitionCategory.LOCATIONS: "You discovered {name}!",
    DefinitionCategory.FURNITURE: "You can now furnish your home with a {name}!",
}


class ContentUnlocker:
    """Unlock sweep over skills, actions, classes, homes, locations and furniture.

    Resources and upgrades have their own sweeps in the ledger and the
    upgrade evaluator.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState,
        *,
        log: ActionLog | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._defs = definitions
        self._state = state
        self._log = log
        self._events = events

    def can_unlock(self, category: DefinitionCategory | str, record_id: str) -> bool:
        """Whether a locked record's requirements now all hold."""
        category = DefinitionCategory(category)
        definition = self._defs.category(category).get(record_id)
        record = self._state.records(category).get(record_id)
        if definition is None or record is None or record.unlocked:
            return False
        if getattr(record, "exhausted", False):
            return False
        return requirements_met(definition.requirements, self._state)

    def check_unlocks(self) -> list[tuple[DefinitionCategory, str]]:
        """Run one sweep over every category this class owns.

        Returns:
            The (category, id) pairs unlocked by this sweep.
        """
        unlocked: list[tuple[DefinitionCategory, str]] = []
        for category, template in _UNLOCK_MESSAGES.items():
            for record_id, definition in self._defs.category(category).items():
                if not self.can_unlock(category, record_id):
                    continue
                record = self._state.records(category)[record_id]
                record.unlocked = True
                if category == DefinitionCategory.LOCATIONS:
                    record.discovered = True
                unlocked.append((category, record_id))

                logger.info("Content unlocked", category=str(category), record_id=record_id)
                if self._log is not None:
                    self._log.add(template.format(name=definition.name))
                if self._events is not None:
                    self._events.emit(
                        GameEvent.CONTENT_UNLOCKED,
                        category=str(category),
                        record_id=record_id,
                    )
        return unlocked


__all__ = [
    "requirement_met",
    "requirements_met",
    "ContentUnlocker",
]
