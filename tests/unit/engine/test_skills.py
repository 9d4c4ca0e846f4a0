"""Unit tests for skill progression."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from idle_rpg.engine.skills import SkillProgression, next_threshold
from idle_rpg.models.enums import FailureReason
from idle_rpg.models.state import create_game_state


if TYPE_CHECKING:
    from idle_rpg.engine.game import Game
    from idle_rpg.models.definitions import DefinitionStore


@pytest.fixture
def skills(sample_definitions: DefinitionStore) -> SkillProgression:
    """Provide skill progression over a fresh sample state."""
    return SkillProgression(sample_definitions, create_game_state(sample_definitions))


class TestNextThreshold:
    """Tests for next_threshold."""

    def test_tier_one(self) -> None:
        """Test growth at tier one."""
        assert next_threshold(50, tier=1) == 55

    def test_tier_two(self) -> None:
        """Test steeper growth at tier two."""
        assert next_threshold(50, tier=2) == 60

    def test_tier_zero_is_flat(self) -> None:
        """Test that tier zero keeps the threshold."""
        assert next_threshold(50, tier=0) == 50

    def test_never_shrinks(self) -> None:
        """Test that rounding never lowers the threshold."""
        assert next_threshold(1, tier=1) == 1


class TestAddXp:
    """Tests for SkillProgression.add_xp."""

    def test_accumulates_below_threshold(self, skills: SkillProgression) -> None:
        """Test experience below the threshold."""
        result = skills.add_xp("training", 4)
        assert result.ok
        assert result.applied == 0
        assert skills.get("training").experience == 4

    def test_level_up_with_rollover(self, skills: SkillProgression) -> None:
        """Test that excess experience carries into the next level."""
        result = skills.add_xp("training", 13)
        skill = skills.get("training")
        assert result.applied == 1
        assert skill.level == 1
        assert skill.experience == 3
        assert skill.next_level_experience == 11

    def test_multiple_levels_at_once(self, skills: SkillProgression) -> None:
        """Test several level-ups from one grant."""
        result = skills.add_xp("mastery", 350)
        skill = skills.get("mastery")
        # 100 then floor(100 * 1.1 ** 2) = 121
        assert result.applied == 2
        assert skill.level == 2
        assert skill.experience == 129

    def test_max_level_pins_experience(self, skills: SkillProgression) -> None:
        """Test that a huge grant stops at the ceiling."""
        result = skills.add_xp("training", 1000)
        skill = skills.get("training")
        assert result.applied == 3
        assert skill.level == 3
        assert skill.experience == skill.next_level_experience

    def test_add_xp_at_max_level(self, skills: SkillProgression) -> None:
        """Test that a maxed skill stays at its ceiling."""
        skills.add_xp("training", 1000)
        pinned = skills.get("training").experience
        result = skills.add_xp("training", 50)
        assert result.ok
        assert result.applied == 0
        assert skills.get("training").level == 3
        assert skills.get("training").experience == pinned

    def test_unknown_skill(self, skills: SkillProgression) -> None:
        """Test experience for a skill that does not exist."""
        result = skills.add_xp("juggling", 5)
        assert result.reason == FailureReason.MISSING_SKILL

    def test_negative_raises(self, skills: SkillProgression) -> None:
        """Test that negative experience is a programmer error."""
        with pytest.raises(ValueError, match="non-negative"):
            skills.add_xp("training", -1)


class TestLevelUp:
    """Tests for SkillProgression.level_up."""

    def test_not_enough_experience(self, skills: SkillProgression) -> None:
        """Test a level-up without the needed experience."""
        assert skills.level_up("training").reason == FailureReason.NOT_ENOUGH_XP

    def test_at_max_level(self, skills: SkillProgression) -> None:
        """Test a level-up at the ceiling."""
        skills.add_xp("training", 1000)
        assert skills.level_up("training").reason == FailureReason.MAX_LEVEL

    def test_unknown_skill(self, skills: SkillProgression) -> None:
        """Test a level-up of a skill that does not exist."""
        assert skills.level_up("juggling").reason == FailureReason.MISSING_SKILL

    def test_level_up_logged(self, game: Game) -> None:
        """Test the narration of a level-up."""
        game.skills.add_xp("training", 10)
        assert game.state.action_log[0].message == "Your Training skill increased to level 1!"


class TestLevelEffects:
    """Tests for skill level effects."""

    def test_applied_per_level(self, game: Game) -> None:
        """Test that every level gained applies the skill's effects."""
        game.skills.add_xp("mastery", 350)
        health = game.state.resources["health"]
        assert game.state.skills["mastery"].level == 2
        assert health.maximum == 14
        assert health.amount == 10
        assert game.state.resources["mana"].regen_rate == 3

    def test_no_effects_without_level(self, game: Game) -> None:
        """Test that experience below the threshold changes nothing."""
        game.skills.add_xp("mastery", 99)
        assert game.state.resources["health"].maximum == 10
        assert game.state.resources["mana"].regen_rate == 2

