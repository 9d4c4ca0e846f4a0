"""Game composition root.

``Game`` wires the definition catalog, the session state and every engine
component together with explicit dependencies: settings, random source and
clock are all injected, and nothing here is process-wide.

Each ``tick(delta_ms)`` runs, in order: passive generation, the action
engine, the resource unlock sweep, the content unlock sweep and the
upgrade unlock check.

Example:
    >>> game = create_game()
    >>> game.start_action("beg")
    True
    >>> game.tick(2000).completions[0].action_id
    'beg'
"""

from __future__ import annotations

import random
import time
from collections import Counter
from typing import TYPE_CHECKING, Any, Callable

from idle_rpg.content.defaults import default_definitions
from idle_rpg.core.config import get_settings
from idle_rpg.core.logging import get_logger
from idle_rpg.engine.actions import ActionEngine, UpdateResult
from idle_rpg.engine.events import ActionLog, EventBus
from idle_rpg.engine.homes import HomeManager
from idle_rpg.engine.ledger import ResourceLedger
from idle_rpg.engine.skills import SkillProgression
from idle_rpg.engine.unlocks import ContentUnlocker
from idle_rpg.engine.upgrades import UpgradeEvaluator
from idle_rpg.models.results import OperationResult
from idle_rpg.models.state import create_game_state
from idle_rpg.storage.snapshot import restore_state, snapshot_state


if TYPE_CHECKING:
    from collections.abc import Mapping

    from idle_rpg.core.config import EngineSettings
    from idle_rpg.models.definitions import DefinitionStore
    from idle_rpg.models.state import GameState
    from idle_rpg.storage.database import SaveRecord, SaveStore

logger = get_logger(__name__)


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000


class Game:
    """One play session: definitions, state and the engine around them.

    Attributes:
        definitions: Read-only content catalog.
        state: The session's State Store.
        settings: Engine tunables.
        events: Event bus for renderers that subscribe.
        log: Player-facing action log.
        ledger: Resource ledger.
        skills: Skill progression.
        upgrades: Upgrade evaluator.
        unlocks: Content unlock sweep.
        homes: Home and furniture manager.
        actions: Action engine.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state: GameState | None = None,
        *,
        settings: EngineSettings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
        events: EventBus | None = None,
    ) -> None:
        """Initialize the game.

        Args:
            definitions: Content catalog.
            state: Existing state; a fresh one is created when omitted.
            settings: Engine settings; the configured ones when omitted.
            rng: Random source for reward rolls.
            clock: Millisecond clock used for timestamps.
            events: Event bus; a private one is created when omitted.
        """
        self.definitions = definitions
        self.state = state if state is not None else create_game_state(definitions)
        self.settings = settings if settings is not None else get_settings().engine
        self._rng = rng if rng is not None else random.Random(self.settings.rng_seed)
        self._clock = clock if clock is not None else wall_clock_ms
        self.events = events if events is not None else EventBus()

        self.log = ActionLog(
            self.state,
            clock=self._clock,
            limit=self.settings.action_log_limit,
            events=self.events,
        )
        self.ledger = ResourceLedger(definitions, self.state, log=self.log, events=self.events)
        self.skills = SkillProgression(
            definitions,
            self.state,
            tier_base=self.settings.skill_tier_base,
            ledger=self.ledger,
            log=self.log,
            events=self.events,
        )
        self.upgrades = UpgradeEvaluator(
            definitions, self.state, self.ledger, log=self.log, events=self.events
        )
        self.unlocks = ContentUnlocker(definitions, self.state, log=self.log, events=self.events)
        self.homes = HomeManager(
            definitions, self.state, self.ledger, log=self.log, events=self.events
        )
        self.actions = ActionEngine(
            definitions,
            self.state,
            self.ledger,
            self.skills,
            log=self.log,
            rng=self._rng,
            clock=self._clock,
            improvements=self.settings.improvements,
            events=self.events,
        )

        logger.info(
            "Game initialized",
            actions=len(self.state.actions),
            current_action=self.state.current_action,
        )

    @property
    def now(self) -> float:
        return self._clock()

    # =========================================================================
    # Simulation
    # =========================================================================

    def tick(self, delta_ms: float) -> UpdateResult:
        """Advance the whole simulation by ``delta_ms`` milliseconds."""
        self.ledger.tick(delta_ms)
        result = self.actions.update(delta_ms)
        self.ledger.check_unlocks()
        self.unlocks.check_unlocks()
        self.upgrades.check_upgrade_unlocks()
        return result

    def start_action(self, action_id: str) -> bool:
        return self.actions.start_action(action_id)

    def stop_current_action(self) -> str | None:
        return self.actions.stop_current_action()

    def purchase_upgrade(self, upgrade_id: str) -> OperationResult:
        return self.upgrades.purchase_upgrade(upgrade_id)

    def catch_up(self, elapsed_ms: float) -> int:
        """Replay time spent away from the game with the normal rules.

        Elapsed time is capped at ``max_offline_seconds`` and simulated in
        ``catch_up_step_ms`` steps.

        Returns:
            Total completions during the replay.
        """
        capped = min(max(0.0, elapsed_ms), self.settings.max_offline_seconds * 1000)
        if capped <= 0:
            return 0

        counts: Counter[str] = Counter()
        remaining = capped
        while remaining > 0:
            step = min(self.settings.catch_up_step_ms, remaining)
            result = self.tick(step)
            counts.update(completion.action_id for completion in result.completions)
            remaining -= step

        for action_id, count in counts.items():
            name = self.definitions.actions[action_id].name
            self.log.add(f"While you were away, you completed {name} {count} times.")

        total = sum(counts.values())
        logger.info(
            "Offline progress applied",
            elapsed_ms=elapsed_ms,
            simulated_ms=capped,
            completions=total,
        )
        return total

    def catch_up_since_last_save(self) -> int:
        """Replay the time between the last save and now."""
        if self.state.last_saved_at is None:
            return 0
        return self.catch_up(self.now - self.state.last_saved_at)

    # =========================================================================
    # Character, Homes, Furniture & Locations
    # =========================================================================

    def set_character_name(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        self.state.character.name = name
        logger.info("Character named", name=name)
        return True

    def choose_class(self, class_id: str) -> bool:
        """Adopt an unlocked character class."""
        record = self.state.classes.get(class_id)
        if record is None or not record.unlocked:
            return False
        self.state.character.class_id = class_id
        self.log.add(f"You are now a {self.definitions.classes[class_id].name}.")
        logger.info("Class chosen", class_id=class_id)
        self.unlocks.check_unlocks()
        return True

    def discover_location(self, location_id: str) -> bool:
        """Reveal a location on the map; False if unknown or already known."""
        record = self.state.locations.get(location_id)
        if record is None or record.discovered:
            return False
        record.discovered = True
        record.unlocked = True
        self.log.add(f"You discovered {self.definitions.locations[location_id].name}!")
        logger.info("Location discovered", location_id=location_id)
        self.unlocks.check_unlocks()
        return True

    def visit_location(self, location_id: str) -> bool:
        record = self.state.locations.get(location_id)
        if record is None or not record.discovered:
            return False
        record.visited = True
        self.log.add(f"You visit {self.definitions.locations[location_id].name}.")
        return True

    def move_home(self, home_id: str) -> bool:
        """Move into an unlocked home, keeping the furniture that fits."""
        return self.homes.move_home(home_id)

    def add_furniture(self, furniture_id: str) -> OperationResult:
        return self.homes.add_furniture(furniture_id)

    def remove_furniture(self, furniture_id: str) -> OperationResult:
        return self.homes.remove_furniture(furniture_id)

    # =========================================================================
    # Persistence
    # =========================================================================

    def snapshot(self) -> dict[str, Any]:
        """Plain JSON-safe copy of the whole state."""
        return snapshot_state(self.state)

    def save(self, store: SaveStore, slot: str | None = None) -> SaveRecord:
        """Stamp the save time and write the state to ``store``."""
        self.state.last_saved_at = self.now
        return store.save(self.state, slot)

    @classmethod
    def restore(
        cls,
        definitions: DefinitionStore,
        snapshot: Mapping[str, Any],
        **kwargs: Any,
    ) -> Game:
        """Build a game from a snapshot merged into fresh defaults."""
        return cls(definitions, restore_state(definitions, snapshot), **kwargs)

    @classmethod
    def load(
        cls,
        definitions: DefinitionStore,
        store: SaveStore,
        slot: str | None = None,
        **kwargs: Any,
    ) -> Game | None:
        """Load a saved slot; None when the slot is empty."""
        record = store.load(slot)
        if record is None:
            return None
        return cls(definitions, record.restore(definitions), **kwargs)


def create_game(
    definitions: DefinitionStore | None = None,
    *,
    settings: EngineSettings | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
) -> Game:
    """Create a fresh game, using the bundled starter content by default."""
    if definitions is None:
        definitions = default_definitions()
    return Game(definitions, settings=settings, rng=rng, clock=clock)


__all__ = ["Game", "create_game", "wall_clock_ms"]
