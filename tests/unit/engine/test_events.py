"""Unit tests for the event bus and action log."""

from __future__ import annotations

from typing import Any

from idle_rpg.engine.events import ActionLog, EventBus
from idle_rpg.models.enums import GameEvent
from idle_rpg.models.state import GameState


class TestEventBus:
    """Tests for EventBus."""

    def test_emit_to_listeners(self) -> None:
        """Test that listeners receive the payload."""
        bus = EventBus()
        received: list[dict[str, Any]] = []
        bus.on(GameEvent.ACTION_COMPLETED, received.append)

        count = bus.emit(GameEvent.ACTION_COMPLETED, action_id="work")
        assert count == 1
        assert received == [{"action_id": "work"}]

    def test_emit_without_listeners(self) -> None:
        """Test emitting an event nobody listens to."""
        assert EventBus().emit(GameEvent.LOG_ADDED, message="hi") == 0

    def test_off(self) -> None:
        """Test unsubscribing a listener."""
        bus = EventBus()

        def listener(payload: dict[str, Any]) -> None:
            pass

        bus.on("custom", listener)
        assert bus.listener_count("custom") == 1
        assert bus.off("custom", listener) is True
        assert bus.off("custom", listener) is False
        assert bus.listener_count("custom") == 0

    def test_failing_listener_isolated(self) -> None:
        """Test that one failing listener does not stop the others."""
        bus = EventBus()
        received: list[dict[str, Any]] = []

        def broken(payload: dict[str, Any]) -> None:
            raise RuntimeError("boom")

        bus.on(GameEvent.HOME_CHANGED, broken)
        bus.on(GameEvent.HOME_CHANGED, received.append)
        assert bus.emit(GameEvent.HOME_CHANGED, home_id="hut") == 2
        assert received == [{"home_id": "hut"}]


class TestActionLog:
    """Tests for ActionLog."""

    def test_newest_first(self) -> None:
        """Test that new entries go to the front."""
        state = GameState()
        log = ActionLog(state, clock=lambda: 5.0)
        log.add("first")
        log.add("second")
        assert [entry.message for entry in state.action_log] == ["second", "first"]
        assert log.latest().message == "second"
        assert log.latest().timestamp == 5.0

    def test_bounded(self) -> None:
        """Test that the log keeps only the newest entries."""
        state = GameState()
        log = ActionLog(state, clock=lambda: 0.0, limit=100)
        for index in range(150):
            log.add(f"entry {index}")
        assert len(state.action_log) == 100
        assert state.action_log[0].message == "entry 149"
        assert state.action_log[-1].message == "entry 50"

    def test_clear(self) -> None:
        """Test clearing the log."""
        state = GameState()
        log = ActionLog(state, clock=lambda: 0.0)
        log.add("entry")
        log.clear()
        assert log.entries == []
        assert log.latest() is None

    def test_publishes_entries(self) -> None:
        """Test that entries are published on the event bus."""
        bus = EventBus()
        received: list[dict[str, Any]] = []
        bus.on(GameEvent.LOG_ADDED, received.append)
        log = ActionLog(GameState(), clock=lambda: 7.0, events=bus)
        log.add("hello")
        assert received == [{"message": "hello", "timestamp": 7.0}]
