"""Event bus and action log sink.

The ``ActionLog`` is the player-facing narration: a bounded list of
``{message, timestamp}`` entries kept newest first. The ``EventBus`` is an
optional push channel for renderers that would rather subscribe than poll.

Example:
    >>> bus = EventBus()
    >>> bus.on(GameEvent.ACTION_COMPLETED, lambda payload: print(payload["action_id"]))
    >>> bus.emit(GameEvent.ACTION_COMPLETED, action_id="beg")
    beg
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable

from idle_rpg.core.constants import ACTION_LOG_LIMIT
from idle_rpg.core.logging import get_logger
from idle_rpg.models.enums import GameEvent
from idle_rpg.models.state import LogEntry


if TYPE_CHECKING:
    from idle_rpg.models.state import GameState

logger = get_logger(__name__)

Listener = Callable[[dict[str, Any]], None]


# =============================================================================
# Event Bus
# =============================================================================


class EventBus:
    """Minimal publish/subscribe channel.

    Listener failures are logged and never interrupt the engine.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: GameEvent | str, listener: Listener) -> None:
        """Subscribe ``listener`` to ``event``."""
        self._listeners[str(event)].append(listener)

    def off(self, event: GameEvent | str, listener: Listener) -> bool:
        """Unsubscribe ``listener``; returns False if it was not subscribed."""
        listeners = self._listeners.get(str(event), [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def emit(self, event: GameEvent | str, **payload: Any) -> int:
        """Notify every listener of ``event``.

        Returns:
            Number of listeners notified.
        """
        listeners = list(self._listeners.get(str(event), []))
        for listener in listeners:
            try:
                listener(dict(payload))
            except Exception:
                logger.exception("Event listener failed", event_name=str(event))
        return len(listeners)

    def listener_count(self, event: GameEvent | str) -> int:
        return len(self._listeners.get(str(event), []))


# =============================================================================
# Action Log
# =============================================================================


class ActionLog:
    """Bounded narration log stored on the game state.

    New entries are inserted at the front; once ``limit`` is exceeded the
    oldest entries are dropped.

    Attributes:
        limit: Maximum number of entries kept.
    """

    def __init__(
        self,
        state: GameState,
        *,
        clock: Callable[[], float],
        limit: int = ACTION_LOG_LIMIT,
        events: EventBus | None = None,
    ) -> None:
        self._state = state
        self._clock = clock
        self._events = events
        self.limit = limit

    @property
    def entries(self) -> list[LogEntry]:
        return self._state.action_log

    def add(self, message: str) -> LogEntry:
        """Insert a narration line as the newest entry.

        Args:
            message: Player-facing text.

        Returns:
            The stored entry.
        """
        entry = LogEntry(message=message, timestamp=self._clock())
        log = self._state.action_log
        log.insert(0, entry)
        del log[self.limit:]

        logger.debug("Log entry added", message=message, size=len(log))
        if self._events is not None:
            self._events.emit(GameEvent.LOG_ADDED, message=message, timestamp=entry.timestamp)
        return entry

    def latest(self) -> LogEntry | None:
        return self._state.action_log[0] if self._state.action_log else None

    def clear(self) -> None:
        self._state.action_log.clear()


__all__ = [
    "EventBus",
    "ActionLog",
    "Listener",
]
