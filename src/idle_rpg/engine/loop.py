"""Fixed-interval driver for a game session.

The ``GameLoop`` is the external "tick" caller: it measures real elapsed
time with a monotonic clock, hands it to ``Game.tick`` and autosaves on a
timer. The clock and the sleep function are injectable so that the loop
can be driven deterministically.

Example:
    >>> loop = GameLoop(game, save_store=SaveStore("saves.db"))
    >>> loop.run(max_ticks=10)
    10
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable

from idle_rpg.core.config import get_settings
from idle_rpg.core.logging import configure_logging, get_logger


if TYPE_CHECKING:
    from idle_rpg.core.config import Settings
    from idle_rpg.engine.actions import UpdateResult
    from idle_rpg.engine.game import Game
    from idle_rpg.storage.database import SaveStore

logger = get_logger(__name__)


class GameLoop:
    """Drives a Game at a steady cadence and autosaves it.

    Attributes:
        game: The session being driven.
        settings: Application settings the loop runs under.
        tick_interval_ms: Target interval between ticks.
        autosave_interval_seconds: Interval between automatic saves.
    """

    def __init__(
        self,
        game: Game,
        *,
        settings: Settings | None = None,
        save_store: SaveStore | None = None,
        slot: str | None = None,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the loop.

        Args:
            game: The session to drive.
            settings: Application settings; the configured ones when omitted.
            save_store: Store used for autosaves; autosave is off without one.
            slot: Save slot for autosaves.
            monotonic: Clock in seconds used to measure elapsed time.
            sleep: Function used to wait between ticks.
        """
        settings = settings if settings is not None else get_settings()
        self.game = game
        self.settings = settings
        self.tick_interval_ms = settings.engine.tick_interval_ms
        self.autosave_interval_seconds = settings.storage.autosave_interval_seconds
        self._save_store = save_store
        self._slot = slot
        self._monotonic = monotonic
        self._sleep = sleep
        self._running = False
        self._last_tick: float | None = None
        self._last_save: float | None = None
        self._tick_callbacks: list[Callable[[UpdateResult], None]] = []

    @property
    def is_running(self) -> bool:
        return self._running

    def add_tick_callback(self, callback: Callable[[UpdateResult], None]) -> None:
        """Add a callback to be invoked after each tick.

        Args:
            callback: Function to call with the tick's UpdateResult.
        """
        self._tick_callbacks.append(callback)

    def _invoke_callbacks(self, result: UpdateResult) -> None:
        for callback in self._tick_callbacks:
            try:
                callback(result)
            except Exception:
                logger.exception("Tick callback failed")

    def step(self) -> UpdateResult:
        """Run one tick with the time elapsed since the previous one."""
        now = self._monotonic()
        if self._last_tick is None:
            self._last_tick = now
        if self._last_save is None:
            self._last_save = now

        delta_ms = max(0.0, (now - self._last_tick) * 1000)
        self._last_tick = now
        result = self.game.tick(delta_ms)

        if now - self._last_save >= self.autosave_interval_seconds:
            self.save()
            self._last_save = now

        self._invoke_callbacks(result)
        return result

    def run(self, max_ticks: int | None = None) -> int:
        """Tick until ``stop`` is called or ``max_ticks`` ticks have run.

        The game is saved once more when the loop ends.

        Returns:
            Number of ticks run.
        """
        configure_logging(self.settings)
        self._running = True
        self._last_tick = self._monotonic()
        ticks = 0
        logger.info("Game loop started", tick_interval_ms=self.tick_interval_ms)
        try:
            while self._running and (max_ticks is None or ticks < max_ticks):
                self._sleep(self.tick_interval_ms / 1000)
                self.step()
                ticks += 1
        finally:
            self._running = False
            self.save()
            logger.info("Game loop stopped", ticks=ticks)
        return ticks

    def stop(self) -> None:
        self._running = False

    def save(self) -> bool:
        """Save through the configured store; False when none is set."""
        if self._save_store is None:
            return False
        self.game.save(self._save_store, self._slot)
        return True


__all__ = ["GameLoop"]
