"""Homes and the furniture placed in them.

The current home's ``floor_space`` bounds the furniture that can stand in
it. Placing furniture pays its costs and applies its effects through the
ledger; removing it reverses those effects, clamping holdings that no
longer fit under a reduced capacity. Moving keeps furniture in catalog
order while it still fits the new home and removes the rest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from idle_rpg.core.logging import get_logger
from idle_rpg.models.enums import FailureReason, GameEvent
from idle_rpg.models.results import OperationResult


if TYPE_CHECKING:
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.engine.ledger import ResourceLedger
    from idle_rpg.models.definitions import DefinitionStore
    from idle_rpg.models.state import GameState

logger = get_logger(__name__)


class HomeManager:
    """Moves the character between homes and furnishes the current one."""

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState,
        ledger: ResourceLedger,
        *,
        log: ActionLog | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._defs = definitions
        self._state = state
        self._ledger = ledger
        self._log = log
        self._events = events

    def _emit(self, event: GameEvent, **payload: object) -> None:
        if self._events is not None:
            self._events.emit(event, **payload)

    def _narrate(self, message: str) -> None:
        if self._log is not None:
            self._log.add(message)

    # -------------------------------------------------------------------------
    # Floor Space
    # -------------------------------------------------------------------------

    def floor_space(self) -> int:
        """Floor space of the current home; 0 without one."""
        home = self._defs.homes.get(self._state.home) if self._state.home else None
        return home.floor_space if home is not None else 0

    def placed_furniture(self) -> list[str]:
        return [fid for fid, record in self._state.furniture.items() if record.placed]

    def floor_space_used(self) -> int:
        return sum(self._defs.furniture[fid].floor_space for fid in self.placed_furniture())

    def available_floor_space(self) -> int:
        return self.floor_space() - self.floor_space_used()

    # -------------------------------------------------------------------------
    # Furniture
    # -------------------------------------------------------------------------

    def add_furniture(self, furniture_id: str) -> OperationResult:
        """Place a piece of furniture in the current home.

        Returns:
            A falsy result with reason ``missing``, ``locked``,
            ``already-placed``, ``no-floor-space`` or ``insufficient`` when
            nothing was placed; otherwise ``applied`` is the floor space taken.
        """
        definition = self._defs.furniture.get(furniture_id)
        record = self._state.furniture.get(furniture_id)
        if definition is None or record is None:
            return OperationResult.failure(FailureReason.MISSING, furniture_id)
        if not record.unlocked:
            return OperationResult.failure(FailureReason.LOCKED, furniture_id)
        if record.placed:
            return OperationResult.failure(FailureReason.ALREADY_PLACED, furniture_id)
        available = self.available_floor_space()
        if definition.floor_space > available:
            return OperationResult.failure(
                FailureReason.NO_FLOOR_SPACE,
                f"{furniture_id}: needs {definition.floor_space}, {available} free",
            )
        if not self._ledger.can_afford(definition.costs):
            return OperationResult.failure(FailureReason.INSUFFICIENT, furniture_id)

        for resource_id, amount in definition.costs.items():
            self._ledger.spend(resource_id, amount)
        record.placed = True
        self._ledger.apply_effects(definition.effects)

        for action_id in definition.effects.unlock_actions:
            action = self._state.actions.get(action_id)
            if action is not None and not action.unlocked and not action.exhausted:
                action.unlocked = True
                self._narrate(f"You unlocked a new action: {self._defs.actions[action_id].name}!")

        self._narrate(f"You've added {definition.name} to your home!")
        logger.info(
            "Furniture added",
            furniture_id=furniture_id,
            floor_space_left=self.available_floor_space(),
        )
        self._emit(GameEvent.FURNITURE_ADDED, furniture_id=furniture_id)
        return OperationResult.success(definition.floor_space)

    def remove_furniture(self, furniture_id: str) -> OperationResult:
        """Take a placed piece of furniture out, reversing its effects.

        Actions it unlocked stay unlocked.
        """
        definition = self._defs.furniture.get(furniture_id)
        record = self._state.furniture.get(furniture_id)
        if definition is None or record is None or not record.placed:
            return OperationResult.failure(FailureReason.MISSING, furniture_id)

        record.placed = False
        self._ledger.apply_effects(definition.effects, scale=-1)

        self._narrate(f"You've removed {definition.name} from your home.")
        logger.info("Furniture removed", furniture_id=furniture_id)
        self._emit(GameEvent.FURNITURE_REMOVED, furniture_id=furniture_id)
        return OperationResult.success(definition.floor_space)

    # -------------------------------------------------------------------------
    # Moving
    # -------------------------------------------------------------------------

    def move_home(self, home_id: str) -> bool:
        """Move into an unlocked home other than the current one.

        Furniture that no longer fits is removed, in catalog order.
        """
        record = self._state.homes.get(home_id)
        if record is None or not record.unlocked or self._state.home == home_id:
            return False

        capacity = self._defs.homes[home_id].floor_space
        used = 0
        left_behind: list[str] = []
        for furniture_id in self.placed_furniture():
            size = self._defs.furniture[furniture_id].floor_space
            if used + size <= capacity:
                used += size
            else:
                left_behind.append(furniture_id)
        for furniture_id in left_behind:
            self.remove_furniture(furniture_id)

        previous = self._state.home
        self._state.home = home_id
        new_name = self._defs.homes[home_id].name
        if previous is not None and previous in self._defs.homes:
            self._narrate(f"You've moved from {self._defs.homes[previous].name} to {new_name}!")
        else:
            self._narrate(f"You've moved into {new_name}!")
        logger.info(
            "Home changed",
            previous=previous,
            home_id=home_id,
            furniture_removed=left_behind,
        )
        self._emit(GameEvent.HOME_CHANGED, previous=previous, home_id=home_id)
        return True


__all__ = ["HomeManager"]
