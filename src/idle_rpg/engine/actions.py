"""Action engine: timed actions, completion, rest fallback and resume.

The engine advances the single active action by elapsed time. Nothing
blocks and nothing polls a clock for progress: ``update(delta_ms)`` is a
pure accumulation step, and the injected clock is only read to timestamp
starts and log entries.

State machine per action slot::

    Idle --start--> Active --progress >= 1--> Completing --> Active
    Active --costs unaffordable--> Resting --pools full--> Active
    Active --stop--> Idle (progress kept)

Running out of resources mid-action is a state transition (forced rest),
never an error. Unknown or locked ids are reported with a False return.

Example:
    >>> engine.start_action("beg")
    True
    >>> result = engine.update(2000)
    >>> result.completions[0].action_id
    'beg'
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from idle_rpg.core.constants import PAUSE_MESSAGE
from idle_rpg.core.exceptions import InvalidGameStateError
from idle_rpg.core.logging import get_logger
from idle_rpg.models.enums import DefinitionCategory, GameEvent


if TYPE_CHECKING:
    import random

    from idle_rpg.core.config import ImprovementRule
    from idle_rpg.engine.events import ActionLog, EventBus
    from idle_rpg.engine.ledger import ResourceLedger
    from idle_rpg.engine.skills import SkillProgression
    from idle_rpg.models.definitions import ActionDefinition, DefinitionStore
    from idle_rpg.models.state import ActionState, GameState

logger = get_logger(__name__)

# Completion slack for float drift when fractional progress is summed.
PROGRESS_TOLERANCE_MS = 1e-6


# =============================================================================
# Results
# =============================================================================


@dataclass
class CompletionResult:
    """What one completion applied.

    Attributes:
        action_id: The completed action.
        rewards: Resource id -> amount actually granted.
        experience: Skill id -> experience granted.
        restored: Stat pool id -> amount actually restored.
        completion_count: Completion count after this completion.
    """

    action_id: str
    rewards: dict[str, float] = field(default_factory=dict)
    experience: dict[str, int] = field(default_factory=dict)
    restored: dict[str, float] = field(default_factory=dict)
    completion_count: int = 0


@dataclass
class UpdateResult:
    """Outcome of one ``update`` call.

    Attributes:
        action_id: Action current after the update, if any.
        progress: Its progress fraction after the update.
        completions: Every completion that fired, in order.
        rested: Whether the engine fell back to the rest action.
        resumed: Action automatically resumed after resting, if any.
    """

    action_id: str | None = None
    progress: float = 0.0
    completions: list[CompletionResult] = field(default_factory=list)
    rested: bool = False
    resumed: str | None = None


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:.2f}"


# =============================================================================
# Action Engine
# =============================================================================


class ActionEngine:
    """Runs the current action and applies its completions.

    The engine is the only writer of ``current_progress``,
    ``completion_count`` and ``last_action_start_time``.

    Attributes:
        improvements: Escalation rules applied at completion milestones.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState,
        ledger: ResourceLedger,
        skills: SkillProgression,
        *,
        log: ActionLog,
        rng: random.Random,
        clock: Callable[[], float],
        improvements: Sequence[ImprovementRule] = (),
        events: EventBus | None = None,
    ) -> None:
        self._defs = definitions
        self._state = state
        self._ledger = ledger
        self._skills = skills
        self._log = log
        self._rng = rng
        self._clock = clock
        self._events = events
        self.improvements = sorted(improvements, key=lambda rule: rule.at_completions)

    @property
    def current_action(self) -> str | None:
        return self._state.current_action

    def _lookup(self, action_id: str) -> tuple[ActionDefinition, ActionState]:
        definition = self._defs.actions.get(action_id)
        record = self._state.actions.get(action_id)
        if definition is None or record is None:
            raise InvalidGameStateError(
                f"Action {action_id!r} has no definition or runtime record",
                record_id=action_id,
                category=DefinitionCategory.ACTIONS,
            )
        return definition, record

    def is_affordable(self, action_id: str) -> bool:
        """Whether the completion costs of ``action_id`` are covered now."""
        definition = self._defs.actions.get(action_id)
        return definition is not None and self._ledger.can_afford(definition.costs)

    def _emit(self, event: GameEvent, **payload: object) -> None:
        if self._events is not None:
            self._events.emit(event, **payload)

    # -------------------------------------------------------------------------
    # Start / Stop
    # -------------------------------------------------------------------------

    def start_action(self, action_id: str) -> bool:
        """Make ``action_id`` the current action.

        Progress is never reset by starting; a partly done action resumes.
        A non-rest action whose costs are not covered sends the character
        to rest instead and is remembered for automatic resumption.

        Returns:
            True if ``action_id`` is now current.
        """
        definition = self._defs.actions.get(action_id)
        record = self._state.actions.get(action_id)
        if definition is None or record is None:
            logger.debug("Start ignored, unknown action", action_id=action_id)
            return False
        if not record.unlocked:
            logger.debug("Start ignored, action locked", action_id=action_id)
            return False
        if not definition.is_rest_action and not self._ledger.can_afford(definition.costs):
            self._fall_back_to_rest(action_id)
            return False

        self._state.previous_action = None
        self._activate(action_id)
        return True

    def _activate(self, action_id: str) -> None:
        definition, record = self._lookup(action_id)
        self._state.current_action = action_id
        record.last_action_start_time = self._clock()

        if record.current_progress > 0:
            self._log.add(f"You resumed {definition.name} at {record.current_progress:.0%} progress.")
        else:
            self._log.add(f"You started {definition.name}.")
        logger.info("Action started", action_id=action_id, progress=record.current_progress)
        self._emit(GameEvent.ACTION_STARTED, action_id=action_id, progress=record.current_progress)

    def _fall_back_to_rest(self, interrupted: str | None) -> None:
        """Switch to the default rest action, remembering what to resume."""
        rest_id = self._state.default_rest_action
        if interrupted is not None:
            name = self._defs.actions[interrupted].name
            self._log.add(f"You are too exhausted to {name.lower()}. You rest instead.")

        rest = self._state.actions.get(rest_id) if rest_id is not None else None
        if rest is None or not rest.unlocked:
            logger.warning("No rest action available", interrupted=interrupted)
            self._state.current_action = None
            self._state.previous_action = interrupted
            return

        if self._state.current_action != rest_id:
            self._activate(rest_id)
        self._state.previous_action = interrupted
        logger.info("Resting", rest_action=rest_id, interrupted=interrupted)
        self._emit(GameEvent.REST_STARTED, action_id=rest_id, interrupted=interrupted)

    def stop_current_action(self) -> str | None:
        """Pause the current action, keeping its progress.

        Safe to call when nothing is running.

        Returns:
            The id of the stopped action, or None.
        """
        action_id = self._state.current_action
        self._state.previous_action = None
        if action_id is None:
            return None

        record = self._state.actions.get(action_id)
        if record is not None:
            record.last_action_start_time = None
        self._state.current_action = None

        self._log.add(PAUSE_MESSAGE)
        logger.info("Action stopped", action_id=action_id)
        self._emit(GameEvent.ACTION_STOPPED, action_id=action_id)
        return action_id

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update(self, delta_ms: float) -> UpdateResult:
        """Advance the current action by ``delta_ms`` milliseconds.

        Time left over after a completion carries into the next cycle,
        with affordability re-checked between cycles.
        """
        if delta_ms < 0:
            msg = f"delta must be non-negative, got {delta_ms}"
            raise ValueError(msg)

        result = UpdateResult()
        remaining = float(delta_ms)

        while self._state.current_action is not None:
            action_id = self._state.current_action
            definition, record = self._lookup(action_id)

            if not definition.is_rest_action and not self._ledger.can_afford(definition.costs):
                self._fall_back_to_rest(action_id)
                result.rested = True
                if self._state.current_action == action_id:
                    break
                continue

            if remaining <= 0:
                break

            needed = max(0.0, (1.0 - record.current_progress) * record.base_duration)
            if remaining < needed - PROGRESS_TOLERANCE_MS:
                record.current_progress += remaining / record.base_duration
                break

            remaining = max(0.0, remaining - needed)
            result.completions.append(self._complete(action_id))

            resumed = self._return_from_rest()
            if resumed is not None:
                result.resumed = resumed

        resumed = self._return_from_rest()
        if resumed is not None:
            result.resumed = resumed

        result.action_id = self._state.current_action
        if result.action_id is not None:
            result.progress = self._state.actions[result.action_id].current_progress
        return result

    def _return_from_rest(self) -> str | None:
        """Resume the interrupted action once every stat pool is full."""
        current = self._state.current_action
        previous = self._state.previous_action
        if current is None or previous is None:
            return None
        if not self._defs.actions[current].is_rest_action:
            return None
        if not self._ledger.stat_pools_full():
            return None
        record = self._state.actions.get(previous)
        if record is None or not record.unlocked or not self.is_affordable(previous):
            return None

        self._state.previous_action = None
        self._activate(previous)
        logger.info("Returned from rest", action_id=previous)
        return previous

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    def _complete(self, action_id: str) -> CompletionResult:
        """Apply one completion atomically: costs, rewards, bookkeeping."""
        definition, record = self._lookup(action_id)
        completion = CompletionResult(action_id=action_id)

        for resource_id, amount in definition.costs.items():
            self._ledger.consume(resource_id, amount)

        for resource_id, reward in record.currency_rewards.items():
            granted = self._ledger.grant(resource_id, reward.resolve(self._rng))
            completion.rewards[resource_id] = granted.applied

        for skill_id, amount in definition.skill_experience.items():
            if self._skills.add_xp(skill_id, amount):
                completion.experience[skill_id] = amount

        for resource_id, amount in definition.stat_pool_restoration.items():
            restored = self._ledger.grant(resource_id, amount)
            completion.restored[resource_id] = restored.applied

        for resource_id, delta in definition.max_changes.items():
            self._ledger.max_change(resource_id, delta)

        record.completion_count += 1
        record.total_time_spent += record.base_duration
        record.current_progress = 0.0
        record.last_action_start_time = self._clock()
        completion.completion_count = record.completion_count

        self._log.add(self._summarize(definition, completion))
        logger.info(
            "Action completed",
            action_id=action_id,
            completion_count=record.completion_count,
            rewards=completion.rewards,
        )
        self._emit(
            GameEvent.ACTION_COMPLETED,
            action_id=action_id,
            completion_count=record.completion_count,
            rewards=dict(completion.rewards),
        )

        self._apply_improvements(definition, record)

        if definition.max_purchases is not None and record.completion_count >= definition.max_purchases:
            record.unlocked = False
            record.exhausted = True
            self._log.add(f"You have done all you can with {definition.name}.")
            logger.info("Action exhausted", action_id=action_id, limit=definition.max_purchases)
            if self._state.current_action == action_id:
                self._state.previous_action = None
                self._fall_back_to_rest(None)
                if self._state.current_action == action_id:
                    self._state.current_action = None

        return completion

    def _summarize(self, definition: ActionDefinition, completion: CompletionResult) -> str:
        parts: list[str] = []
        for resource_id, amount in completion.rewards.items():
            parts.append(f"{_format_amount(amount)} {self._resource_name(resource_id)}")
        for skill_id, amount in completion.experience.items():
            skill = self._defs.skills.get(skill_id)
            parts.append(f"{amount} {skill.name if skill else skill_id} experience")
        gained = f" and gained {', '.join(parts)}" if parts else ""

        restored = ", ".join(
            f"{_format_amount(amount)} {self._resource_name(resource_id)}"
            for resource_id, amount in completion.restored.items()
        )
        if restored:
            gained += f"{',' if parts else ''} and restored {restored}"
        return f"You completed {definition.name}{gained}."

    def _resource_name(self, resource_id: str) -> str:
        resource = self._defs.resources.get(resource_id)
        return resource.name if resource else resource_id

    def _apply_improvements(self, definition: ActionDefinition, record: ActionState) -> None:
        for rule in self.improvements:
            if record.completion_count != rule.at_completions:
                continue
            if rule.duration_multiplier is not None:
                record.base_duration *= rule.duration_multiplier
            if rule.reward_multiplier is not None:
                record.currency_rewards = {
                    resource_id: reward.scaled(rule.reward_multiplier)
                    for resource_id, reward in record.currency_rewards.items()
                }
            self._log.add(f"You've gotten better at {definition.name}!")
            logger.info(
                "Action improved",
                action_id=definition.id,
                completion_count=record.completion_count,
                base_duration=record.base_duration,
            )


__all__ = [
    "ActionEngine",
    "CompletionResult",
    "UpdateResult",
]
