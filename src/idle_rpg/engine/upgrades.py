"""Upgrade purchases and upgrade visibility checks.

A purchase is all-or-nothing: every currency, stat-pool and stat-pool
maximum cost is checked before anything is deducted, so a failed purchase
leaves the state untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from idle_rpg.core.logging import get_logger
from idle_rpg.engine.unlocks import requirements_met
from idle_rpg.models.enums import FailureReason, GameEvent
from idle_rpg.models.results import OperationResult


if TYPE_CHECKING:
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.engine.ledger import ResourceLedger
    from idle_rpg.models.definitions import DefinitionStore, UpgradeDefinition
    from idle_rpg.models.state import GameState

logger = get_logger(__name__)

CONCURRENCY_EFFECTS = frozenset({"double_actions", "doubleActions"})
"""Special effects that raise ``max_simultaneous_actions``."""


class UpgradeEvaluator:
    """Buys upgrades and reveals them once their thresholds are crossed."""

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

    def _availability(self, upgrade_id: str) -> OperationResult:
        definition = self._defs.upgrades.get(upgrade_id)
        record = self._state.upgrades.get(upgrade_id)
        if definition is None or record is None:
            return OperationResult.failure(FailureReason.MISSING, upgrade_id)
        if not record.unlocked:
            return OperationResult.failure(FailureReason.LOCKED, upgrade_id)
        if record.purchased >= definition.number_of_purchases_possible:
            return OperationResult.failure(FailureReason.SOLD_OUT, upgrade_id)
        return OperationResult.success()

    def _spend_map(self, definition: UpgradeDefinition) -> dict[str, float]:
        costs: dict[str, float] = dict(definition.costs.currencies)
        for resource_id, amount in definition.costs.stat_pools.items():
            costs[resource_id] = costs.get(resource_id, 0) + amount
        return costs

    def can_afford_upgrade(self, upgrade_id: str) -> bool:
        """Whether every cost of ``upgrade_id`` is covered right now."""
        definition = self._defs.upgrades.get(upgrade_id)
        if definition is None:
            return False
        if not self._ledger.can_afford(self._spend_map(definition)):
            return False
        for resource_id, amount in definition.costs.stat_pool_maximums.items():
            resource = self._ledger.get(resource_id)
            if resource is None or resource.maximum is None:
                return False
            if resource.maximum - amount < resource.minimum:
                return False
        return True

    def purchase_upgrade(self, upgrade_id: str) -> OperationResult:
        """Buy one level of an upgrade.

        Returns:
            A falsy result with reason ``missing``, ``locked``, ``sold-out`` or
            ``insufficient`` when nothing was bought.
        """
        availability = self._availability(upgrade_id)
        if not availability:
            return availability
        if not self.can_afford_upgrade(upgrade_id):
            return OperationResult.failure(FailureReason.INSUFFICIENT, upgrade_id)

        definition = self._defs.upgrades[upgrade_id]
        record = self._state.upgrades[upgrade_id]

        for resource_id, amount in self._spend_map(definition).items():
            self._ledger.spend(resource_id, amount)
        for resource_id, amount in definition.costs.stat_pool_maximums.items():
            self._ledger.max_change(resource_id, -amount)

        gains = definition.gains
        self._ledger.apply_effects(gains)
        for effect in gains.special_effects:
            self._state.special_effects[effect] = self._state.special_effects.get(effect, 0) + 1
            if effect in CONCURRENCY_EFFECTS:
                self._state.max_simultaneous_actions += 1

        record.purchased += 1
        logger.info(
            "Upgrade purchased",
            upgrade_id=upgrade_id,
            purchased=record.purchased,
            limit=definition.number_of_purchases_possible,
        )
        if self._log is not None:
            self._log.add(f"You purchased {definition.name}!")
        if self._events is not None:
            self._events.emit(
                GameEvent.UPGRADE_PURCHASED,
                upgrade_id=upgrade_id,
                purchased=record.purchased,
            )
        return OperationResult.success(record.purchased)

    def check_upgrade_unlocks(self) -> list[str]:
        """Reveal every locked upgrade whose requirements now hold.

        Returns:
            Ids unlocked by this check.
        """
        unlocked: list[str] = []
        for upgrade_id, definition in self._defs.upgrades.items():
            record = self._state.upgrades.get(upgrade_id)
            if record is None or record.unlocked:
                continue
            if record.purchased >= definition.number_of_purchases_possible:
                continue
            if not requirements_met(definition.requirements, self._state):
                continue

            record.unlocked = True
            unlocked.append(upgrade_id)
            logger.info("Upgrade unlocked", upgrade_id=upgrade_id)
            if self._log is not None:
                self._log.add(f"You can now purchase a {definition.name}!")
        return unlocked


__all__ = ["UpgradeEvaluator", "CONCURRENCY_EFFECTS"]
