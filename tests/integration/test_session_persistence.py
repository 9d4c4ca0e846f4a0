"""Integration tests for saving, loading and resuming a session."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from idle_rpg.content.loader import load_definitions
from idle_rpg.core.config import EngineSettings
from idle_rpg.engine.game import Game
from idle_rpg.storage.database import SaveStore


if TYPE_CHECKING:
    from collections.abc import Callable

    from idle_rpg.models.definitions import DefinitionStore


@pytest.fixture
def store(tmp_path: Path) -> SaveStore:
    """Provide a save store in a temporary directory."""
    return SaveStore(tmp_path / "saves.db")


class TestSaveAndLoad:
    """Tests for persisting a session through the save store."""

    def test_resume_mid_action(
        self,
        make_game: Callable[..., Game],
        sample_definitions: DefinitionStore,
        store: SaveStore,
        fake_clock: Any,
    ) -> None:
        """Test that a loaded game continues where the saved one stopped."""
        game = make_game()
        game.start_action("work")
        game.tick(6000)
        game.save(store, "slot1")

        loaded = Game.load(
            sample_definitions,
            store,
            "slot1",
            settings=EngineSettings(),
            rng=random.Random(1),
            clock=fake_clock,
        )
        assert loaded is not None
        assert loaded.state == game.state
        assert loaded.state.current_action == "work"
        assert loaded.state.actions["work"].current_progress == pytest.approx(0.5)

        result = loaded.tick(2000)
        assert len(result.completions) == 1
        assert loaded.state.actions["work"].completion_count == 2

    def test_load_empty_slot(self, sample_definitions: DefinitionStore, store: SaveStore) -> None:
        """Test loading a slot that was never written."""
        assert Game.load(sample_definitions, store, "empty") is None

    def test_offline_progress_after_load(
        self,
        make_game: Callable[..., Game],
        sample_definitions: DefinitionStore,
        store: SaveStore,
        fake_clock: Any,
    ) -> None:
        """Test replaying the time between save and load."""
        game = make_game()
        game.start_action("chat")
        game.save(store, "slot1")

        fake_clock.advance(4000)
        loaded = Game.load(
            sample_definitions,
            store,
            "slot1",
            settings=EngineSettings(),
            rng=random.Random(1),
            clock=fake_clock,
        )
        assert loaded.catch_up_since_last_save() == 4
        assert loaded.state.resources["gold"].amount == 4


class TestContentEvolution:
    """Tests for restoring saves under changed content."""

    def test_new_content_gets_defaults(
        self,
        game: Game,
        sample_content: dict[str, Any],
        store: SaveStore,
    ) -> None:
        """Test that content added after a save starts fresh."""
        game.ledger.grant("gold", 42)
        game.save(store, "slot1")

        sample_content["resources"].append({"id": "silver", "maximum": 30, "amount": 5})
        sample_content["actions"].append(
            {"id": "polish", "base_duration": 500, "currency_rewards": {"silver": 1}}
        )
        evolved = load_definitions(sample_content)

        loaded = Game.load(evolved, store, "slot1", settings=EngineSettings(), rng=random.Random(1))
        assert loaded.state.resources["gold"].amount == 42
        assert loaded.state.resources["silver"].amount == 5
        assert loaded.start_action("polish")

    def test_removed_content_dropped(
        self,
        game: Game,
        sample_content: dict[str, Any],
        store: SaveStore,
    ) -> None:
        """Test that a save survives content being removed."""
        game.start_action("chat")
        game.tick(500)
        game.save(store, "slot1")

        sample_content["actions"] = [a for a in sample_content["actions"] if a["id"] != "chat"]
        reduced = load_definitions(sample_content)

        loaded = Game.load(reduced, store, "slot1", settings=EngineSettings(), rng=random.Random(1))
        assert "chat" not in loaded.state.actions
        assert loaded.state.current_action is None
        assert loaded.tick(1000).completions == []

    def test_snapshot_is_plain_json(self, game: Game, tmp_path: Path) -> None:
        """Test exporting a snapshot to a file and restoring it."""
        game.start_action("work")
        game.tick(4500)
        path = tmp_path / "export.json"
        path.write_text(json.dumps(game.snapshot()), encoding="utf-8")

        data = json.loads(path.read_text(encoding="utf-8"))
        restored = Game.restore(game.definitions, data, settings=EngineSettings(), rng=random.Random(1))
        assert restored.state == game.state
