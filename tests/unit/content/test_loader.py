"""Unit tests for content loading and validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from idle_rpg.content.defaults import default_definitions
from idle_rpg.content.loader import load_definitions, load_definitions_file
from idle_rpg.core.exceptions import ContentValidationError
from idle_rpg.models.definitions import ResourceDefinition


def _errors(raw: Any) -> list[str]:
    with pytest.raises(ContentValidationError) as exc_info:
        load_definitions(raw)
    return exc_info.value.errors


class TestLoadDefinitions:
    """Tests for load_definitions."""

    def test_loads_sample_catalog(self, sample_content: dict[str, Any]) -> None:
        """Test loading a complete catalog."""
        store = load_definitions(sample_content)
        assert len(store.resources) == 6
        assert len(store.actions) == 5
        assert store.rest_action_id == "rest"
        assert store.starting_home == "street"
        assert isinstance(store.resources["gold"], ResourceDefinition)

    def test_object_map_form(self) -> None:
        """Test categories given as id -> entry maps."""
        store = load_definitions({"resources": {"gold": {"maximum": 10}}})
        assert store.resources["gold"].id == "gold"
        assert store.resources["gold"].maximum == 10

    def test_missing_categories_are_empty(self) -> None:
        """Test that omitted categories load as empty."""
        store = load_definitions({})
        assert store.skills == {}
        assert store.rest_action_id is None

    def test_duplicate_ids_last_wins(self) -> None:
        """Test that a repeated id keeps the last entry."""
        store = load_definitions(
            {"resources": [{"id": "gold", "maximum": 10}, {"id": "gold", "maximum": 20}]}
        )
        assert store.resources["gold"].maximum == 20

    def test_non_mapping_rejected(self) -> None:
        """Test that content must be an object."""
        with pytest.raises(ContentValidationError):
            load_definitions(["resources"])  # type: ignore[arg-type]

    def test_collects_every_entry_error(self) -> None:
        """Test that all invalid entries are reported together."""
        errors = _errors(
            {
                "resources": [{"id": "hp", "kind": "stat"}],
                "actions": [{"id": "idle"}],
            }
        )
        assert any(error.startswith("resources[0]") for error in errors)
        assert any(error.startswith("actions[0]") for error in errors)

    def test_unknown_section(self) -> None:
        """Test that unknown top-level keys are rejected."""
        errors = _errors({"monsters": []})
        assert errors == ["unknown content section 'monsters'"]

    def test_malformed_category(self) -> None:
        """Test a category that is neither a list nor a map."""
        errors = _errors({"resources": 5})
        assert errors == ["resources must be an array or object-map"]

    def test_entry_must_be_object(self) -> None:
        """Test a list entry that is not an object."""
        errors = _errors({"skills": ["lore"]})
        assert errors == ["skills[0] must be an object"]


class TestReferenceChecks:
    """Tests for cross-reference validation."""

    def test_unknown_cost_resource(self) -> None:
        """Test an action cost naming a missing resource."""
        errors = _errors(
            {"actions": [{"id": "cast", "base_duration": 1000, "currency_costs": {"mana": 1}}]}
        )
        assert errors == ["actions.cast.currency_costs: unknown resource 'mana'"]

    def test_unknown_requirement_target(self) -> None:
        """Test a requirement naming a missing skill."""
        errors = _errors({"classes": [{"id": "mage", "requirements": [{"skill": "magic", "level": 1}]}]})
        assert errors == ["classes.mage.requirements: unknown skill 'magic'"]

    def test_stat_pool_cost_must_be_stat(self) -> None:
        """Test that stat pool fields only name stat pools."""
        errors = _errors(
            {
                "resources": [{"id": "gold"}],
                "actions": [{"id": "run", "base_duration": 1000, "stat_pool_costs": {"gold": 1}}],
            }
        )
        assert errors == ["actions.run.stat_pool_costs: 'gold' is not a stat pool"]

    def test_rest_action_without_costs(self) -> None:
        """Test that a rest action cannot charge anything."""
        errors = _errors(
            {
                "resources": [{"id": "gold"}],
                "actions": [
                    {"id": "nap", "base_duration": 1000, "is_rest_action": True, "currency_costs": {"gold": 1}}
                ],
            }
        )
        assert errors == ["actions.nap: a rest action cannot have costs"]

    def test_default_rest_action_must_rest(self) -> None:
        """Test that the named fallback is a rest action."""
        errors = _errors(
            {"actions": [{"id": "work", "base_duration": 1000}], "default_rest_action": "work"}
        )
        assert errors == ["default_rest_action: 'work' is not a rest action"]

    def test_unknown_starting_home(self) -> None:
        """Test the starting home must exist."""
        errors = _errors({"starting_home": "castle"})
        assert errors == ["starting_home: unknown home 'castle'"]

    def test_unknown_generation_target(self) -> None:
        """Test a generation capability naming a missing resource."""
        errors = _errors(
            {"resources": [{"id": "scrolls", "generates": {"target": "research", "rate_per_unit": 0.1}}]}
        )
        assert errors == ["resources.scrolls.generates: unknown resource 'research'"]

    def test_unknown_furniture_effect_target(self) -> None:
        """Test furniture effects naming a missing resource or action."""
        errors = _errors(
            {
                "furniture": [
                    {"id": "lamp", "effects": {"currency_generation": {"light": 1}, "unlock_actions": ["read"]}}
                ]
            }
        )
        assert errors == [
            "furniture.lamp.effects: unknown resource 'light'",
            "furniture.lamp.effects: unknown action 'read'",
        ]

    def test_skill_effect_must_be_stat(self) -> None:
        """Test that skill effects only raise the maximum of stat pools."""
        errors = _errors(
            {
                "resources": [{"id": "gold"}],
                "skills": [{"id": "haggling", "level_effects": {"stat_pool_maximum": {"gold": 1}}}],
            }
        )
        assert errors == ["skills.haggling.level_effects: 'gold' is not a stat pool"]


class TestLoadDefinitionsFile:
    """Tests for load_definitions_file."""

    def test_single_file(self, tmp_path: Path, sample_content: dict[str, Any]) -> None:
        """Test loading one JSON document."""
        path = tmp_path / "content.json"
        path.write_text(json.dumps(sample_content), encoding="utf-8")
        store = load_definitions_file(path)
        assert set(store.actions) == {"work", "rest", "study", "forge", "chat"}

    def test_directory(self, tmp_path: Path, sample_content: dict[str, Any]) -> None:
        """Test loading per-category files plus session settings."""
        for category in ("resources", "skills", "actions", "upgrades", "classes", "homes", "locations"):
            (tmp_path / f"{category}.json").write_text(
                json.dumps(sample_content[category]), encoding="utf-8"
            )
        (tmp_path / "session.json").write_text(
            json.dumps({"default_rest_action": "rest", "starting_home": "street"}),
            encoding="utf-8",
        )
        store = load_definitions_file(tmp_path)
        assert store.default_rest_action == "rest"
        assert len(store.locations) == 3

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test that an unreadable file is a content error."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ContentValidationError):
            load_definitions_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file is a content error."""
        with pytest.raises(ContentValidationError):
            load_definitions_file(tmp_path / "absent.json")


class TestDefaultDefinitions:
    """Tests for the bundled starter catalog."""

    def test_loads(self) -> None:
        """Test that the starter catalog validates."""
        store = default_definitions()
        assert "beg" in store.actions
        assert store.rest_action_id == "rest"
        assert store.starting_home == "homeless"

    def test_cached(self) -> None:
        """Test that the immutable catalog is built once."""
        assert default_definitions() is default_definitions()
