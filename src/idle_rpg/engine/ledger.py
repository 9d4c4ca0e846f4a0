"""Resource ledger: typed pools with capacity clamping.

Every mutation clamps at the point of change, so ``minimum <= amount <=
maximum`` holds for every resource at every observation point and no
fix-up pass is ever needed.

Failures (unknown id, not enough held) come back as falsy
``OperationResult`` values; nothing here raises for gameplay conditions.

Example:
    >>> ledger = ResourceLedger(definitions, state)
    >>> ledger.grant("gold", 25).applied   # gold maximum is 10
    10.0
    >>> ledger.spend("gold", 50).reason
    <FailureReason.INSUFFICIENT: 'insufficient'>
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from idle_rpg.core.logging import get_logger
from idle_rpg.engine.unlocks import requirements_met
from idle_rpg.models.enums import FailureReason, GameEvent, ResourceKind
from idle_rpg.models.results import OperationResult


if TYPE_CHECKING:
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.models.definitions import DefinitionStore, ResourceEffects
    from idle_rpg.models.state import GameState, ResourceState

logger = get_logger(__name__)


class ResourceLedger:
    """Grants, spends and passively generates resources.

    Attributes:
        definitions: Read-only catalog.
        state: The session state whose resource records are mutated.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState,
        *,
        log: ActionLog | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.definitions = definitions
        self.state = state
        self._log = log
        self._events = events

    def get(self, resource_id: str) -> ResourceState | None:
        return self.state.resources.get(resource_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def grant(self, resource_id: str, amount: float) -> OperationResult:
        """Add to a resource, clamped at its maximum.

        Args:
            resource_id: Resource to credit.
            amount: Requested amount (non-negative).

        Returns:
            Result whose ``applied`` is the amount actually added.
        """
        if amount < 0:
            msg = f"grant amount must be non-negative, got {amount}"
            raise ValueError(msg)
        resource = self.get(resource_id)
        if resource is None:
            return OperationResult.failure(FailureReason.MISSING_RESOURCE, resource_id)

        applied = max(0.0, min(amount, resource.capacity - resource.amount))
        resource.amount += applied
        return OperationResult.success(applied)

    def spend(self, resource_id: str, amount: float) -> OperationResult:
        """Deduct exactly ``amount`` or nothing at all."""
        if amount < 0:
            msg = f"spend amount must be non-negative, got {amount}"
            raise ValueError(msg)
        resource = self.get(resource_id)
        if resource is None:
            return OperationResult.failure(FailureReason.MISSING_RESOURCE, resource_id)
        if resource.amount - amount < resource.minimum:
            return OperationResult.failure(
                FailureReason.INSUFFICIENT,
                f"{resource_id}: have {resource.amount}, need {amount}",
            )

        resource.amount -= amount
        return OperationResult.success(amount)

    def consume(self, resource_id: str, amount: float) -> OperationResult:
        """Deduct up to ``amount``, stopping at the resource's minimum.

        Used for completion costs, which never drive a pool negative.
        """
        resource = self.get(resource_id)
        if resource is None:
            return OperationResult.failure(FailureReason.MISSING_RESOURCE, resource_id)

        applied = max(0.0, min(amount, resource.amount - resource.minimum))
        resource.amount -= applied
        return OperationResult.success(applied)

    def max_change(self, resource_id: str, delta: float) -> OperationResult:
        """Adjust a resource's capacity.

        A capacity lowered below the current holding clamps the holding to
        the new capacity. Capacity never drops below the minimum. Unbounded
        resources stay unbounded.

        Returns:
            Result whose ``applied`` is the capacity change actually made.
        """
        resource = self.get(resource_id)
        if resource is None:
            return OperationResult.failure(FailureReason.MISSING_RESOURCE, resource_id)
        if resource.maximum is None:
            return OperationResult.success(0)

        old_maximum = resource.maximum
        resource.maximum = max(resource.minimum, old_maximum + delta)
        if resource.amount > resource.maximum:
            logger.debug(
                "Holding clamped to reduced capacity",
                resource_id=resource_id,
                amount=resource.amount,
                maximum=resource.maximum,
            )
            resource.amount = resource.maximum
        return OperationResult.success(resource.maximum - old_maximum)

    def change_rate(self, resource_id: str, delta: float) -> OperationResult:
        """Adjust a resource's passive change per second."""
        resource = self.get(resource_id)
        if resource is None:
            return OperationResult.failure(FailureReason.MISSING_RESOURCE, resource_id)
        resource.regen_rate += delta
        return OperationResult.success(delta)

    def apply_effects(self, effects: ResourceEffects, scale: float = 1.0) -> None:
        """Apply capacity and rate effects, multiplied by ``scale``.

        A negative scale reverses earlier effects; holdings above a
        reduced capacity are clamped down to it.
        """
        for resource_id, delta in effects.maximum_changes.items():
            self.max_change(resource_id, delta * scale)
        for resource_id, delta in effects.currency_generation.items():
            self.change_rate(resource_id, delta * scale)

    def tick(self, delta_ms: float) -> None:
        """Apply passive regeneration and generation for ``delta_ms``.

        Only unlocked resources accrue. A resource with a ``generates``
        capability produces ``rate_per_unit * holding * seconds`` of its
        target, provided the target is unlocked.
        """
        if delta_ms <= 0:
            return
        seconds = delta_ms / 1000

        for resource in self.state.resources.values():
            if not resource.unlocked or resource.regen_rate == 0:
                continue
            change = resource.regen_rate * seconds
            if change > 0:
                self.grant(resource.id, change)
            else:
                self.consume(resource.id, -change)

        for resource_id, definition in self.definitions.resources.items():
            capability = definition.generates
            source = self.get(resource_id)
            if capability is None or source is None or not source.unlocked:
                continue
            target = self.get(capability.target)
            if target is None or not target.unlocked or source.amount <= 0:
                continue
            self.grant(target.id, capability.rate_per_unit * source.amount * seconds)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has(self, resource_id: str, amount: float) -> bool:
        """Whether ``amount`` could be spent right now; unknown ids hold nothing."""
        resource = self.get(resource_id)
        return resource is not None and resource.amount - amount >= resource.minimum

    def can_afford(self, costs: Mapping[str, float]) -> bool:
        """Whether every cost is covered by instantaneous holdings."""
        return all(self.has(resource_id, amount) for resource_id, amount in costs.items())

    def is_full(self, resource_id: str) -> bool:
        resource = self.get(resource_id)
        return resource is not None and resource.is_full

    def stat_pools_full(self) -> bool:
        """Whether every unlocked stat pool is at its maximum."""
        return all(
            resource.is_full
            for resource in self.state.resources.values()
            if resource.kind == ResourceKind.STAT and resource.unlocked
        )

    # -------------------------------------------------------------------------
    # Unlocks
    # -------------------------------------------------------------------------

    def can_unlock(self, resource_id: str) -> bool:
        """Whether a locked resource's requirements now all hold.

        Already-unlocked and unknown resources report False.
        """
        definition = self.definitions.resources.get(resource_id)
        resource = self.get(resource_id)
        if definition is None or resource is None or resource.unlocked:
            return False
        return requirements_met(definition.requirements, self.state)

    def check_unlocks(self) -> bool:
        """Sweep every resource once, unlocking those now eligible.

        Returns:
            True if at least one resource was unlocked.
        """
        changed = False
        for resource_id, definition in self.definitions.resources.items():
            if not self.can_unlock(resource_id):
                continue
            self.state.resources[resource_id].unlocked = True
            changed = True

            logger.info("Resource unlocked", resource_id=resource_id)
            if self._log is not None:
                self._log.add(f"You can now collect {definition.name}!")
            if self._events is not None:
                self._events.emit(GameEvent.RESOURCE_UNLOCKED, resource_id=resource_id)
        return changed


__all__ = ["ResourceLedger"]
