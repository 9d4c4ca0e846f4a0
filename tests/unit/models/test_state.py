"""Unit tests for runtime state models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from idle_rpg.content.loader import load_definitions
from idle_rpg.models.definitions import FixedReward, RangeReward
from idle_rpg.models.enums import FailureReason, ResourceKind
from idle_rpg.models.results import OperationResult
from idle_rpg.models.state import (
    GameState,
    ResourceState,
    SkillState,
    create_game_state,
)


if TYPE_CHECKING:
    from idle_rpg.models.definitions import DefinitionStore


class TestResourceState:
    """Tests for ResourceState."""

    def test_unbounded_capacity(self) -> None:
        """Test that a missing maximum means infinite capacity."""
        resource = ResourceState(id="crystals", amount=5)
        assert resource.capacity == float("inf")
        assert resource.is_full is False

    def test_is_full(self) -> None:
        """Test the full check at capacity."""
        assert ResourceState(id="gold", amount=10, maximum=10).is_full is True
        assert ResourceState(id="gold", amount=9, maximum=10).is_full is False


class TestSkillState:
    """Tests for SkillState."""

    def test_is_maxed(self) -> None:
        """Test the level ceiling check."""
        assert SkillState(id="lore", level=3, max_level=3).is_maxed is True
        assert SkillState(id="lore", level=2, max_level=3).is_maxed is False
        assert SkillState(id="lore", level=99).is_maxed is False


class TestOperationResult:
    """Tests for OperationResult."""

    def test_truthiness(self) -> None:
        """Test that results are truthy only on success."""
        assert bool(OperationResult.success(3)) is True
        assert bool(OperationResult.failure(FailureReason.INSUFFICIENT)) is False

    def test_failure_reason(self) -> None:
        """Test the failure reason code."""
        result = OperationResult.failure(FailureReason.LOCKED, "coin_purse")
        assert result.reason == FailureReason.LOCKED
        assert result.message == "coin_purse"
        assert result.applied == 0


class TestCreateGameState:
    """Tests for create_game_state."""

    def test_records_for_every_definition(self, sample_definitions: DefinitionStore) -> None:
        """Test that each definition gets a runtime record."""
        state = create_game_state(sample_definitions)
        assert set(state.resources) == set(sample_definitions.resources)
        assert set(state.actions) == set(sample_definitions.actions)
        assert set(state.upgrades) == set(sample_definitions.upgrades)
        assert set(state.locations) == set(sample_definitions.locations)

    def test_initial_resources(self, sample_definitions: DefinitionStore) -> None:
        """Test resource records start from their definitions."""
        state = create_game_state(sample_definitions)
        assert state.resources["stamina"].kind == ResourceKind.STAT
        assert state.resources["stamina"].amount == 10
        assert state.resources["gold"].maximum == 100
        assert state.resources["mana"].regen_rate == 2
        assert state.resources["crystals"].maximum is None

    def test_unlock_flags(self, sample_definitions: DefinitionStore) -> None:
        """Test that gated content starts locked."""
        state = create_game_state(sample_definitions)
        assert state.resources["gold"].unlocked is True
        assert state.resources["gems"].unlocked is False
        assert state.actions["work"].unlocked is True
        assert state.actions["study"].unlocked is False
        assert state.upgrades["satchel"].unlocked is False
        assert state.upgrades["endurance"].unlocked is True

    def test_session_fields(self, sample_definitions: DefinitionStore) -> None:
        """Test the session pointers of a fresh state."""
        state = create_game_state(sample_definitions)
        assert state.current_action is None
        assert state.previous_action is None
        assert state.default_rest_action == "rest"
        assert state.home == "street"
        assert state.homes["street"].unlocked is True
        assert state.max_simultaneous_actions == 1
        assert state.action_log == []

    def test_locations(self, sample_definitions: DefinitionStore) -> None:
        """Test initially discovered locations."""
        state = create_game_state(sample_definitions)
        assert state.locations["town"].discovered is True
        assert state.locations["village"].discovered is False

    def test_action_runtime_copies(self, sample_definitions: DefinitionStore) -> None:
        """Test that actions copy duration and rewards from their definitions."""
        state = create_game_state(sample_definitions)
        work = state.actions["work"]
        assert work.base_duration == 4000
        assert work.current_progress == 0
        assert work.currency_rewards["gold"] == RangeReward(min=1, max=3)
        assert state.actions["chat"].currency_rewards["gold"] == FixedReward(amount=1)

    def test_records_and_stat_pools(self, sample_definitions: DefinitionStore) -> None:
        """Test the category and stat pool accessors."""
        state = create_game_state(sample_definitions)
        assert state.records("skills") is state.skills
        assert {pool.id for pool in state.stat_pools()} == {"health", "stamina"}

    def test_empty_state(self) -> None:
        """Test a bare state with no content."""
        state = GameState()
        assert state.resources == {}
        assert state.character.name == ""

    def test_starting_skill_levels_apply_effects(self) -> None:
        """Test that a skill starting above level zero has its effects applied."""
        definitions = load_definitions(
            {
                "resources": [
                    {"id": "stamina", "kind": "stat", "amount": 10, "maximum": 10},
                    {"id": "mana", "maximum": 20, "regen_rate": 1},
                ],
                "skills": [
                    {
                        "id": "survival",
                        "level": 2,
                        "level_effects": {
                            "stat_pool_maximum": {"stamina": 1},
                            "currency_generation": {"mana": 0.5},
                        },
                    }
                ],
            }
        )
        state = create_game_state(definitions)
        assert state.resources["stamina"].maximum == 12
        assert state.resources["stamina"].amount == 10
        assert state.resources["mana"].regen_rate == 2

    def test_furniture_starts_unplaced(self, sample_definitions: DefinitionStore) -> None:
        """Test furniture records of a fresh state."""
        state = create_game_state(sample_definitions)
        assert set(state.furniture) == {"cot", "desk", "shrine", "wardrobe"}
        assert not any(record.placed for record in state.furniture.values())
        assert state.furniture["cot"].unlocked is True
        assert state.furniture["wardrobe"].unlocked is False
