"""Content loading and validation.

Raw content (parsed JSON, or the bundled defaults) is validated entry by
entry with pydantic, indexed by id, then cross-checked so that every cost,
reward and requirement points at an id that exists. All problems are
collected and raised together as one ``ContentValidationError``.

Example:
    >>> from idle_rpg.content.loader import load_definitions
    >>> defs = load_definitions({
    ...     "resources": [{"id": "gold", "maximum": 10}],
    ...     "actions": [{"id": "rest", "base_duration": 1000, "is_rest_action": True}],
    ... })
    >>> defs.rest_action_id
    'rest'
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from idle_rpg.core.exceptions import ContentValidationError
from idle_rpg.core.logging import get_logger
from idle_rpg.models.definitions import (
    ActionDefinition,
    ClassDefinition,
    ClassEquals,
    Definition,
    DefinitionStore,
    FurnitureDefinition,
    HomeDefinition,
    LocationDefinition,
    LocationDiscovered,
    ResourceAtLeast,
    ResourceDefinition,
    SkillDefinition,
    SkillLevelAtLeast,
    UpgradeDefinition,
)
from idle_rpg.models.enums import DefinitionCategory, ResourceKind


logger = get_logger(__name__)


_MODELS: dict[DefinitionCategory, type[Definition]] = {
    DefinitionCategory.RESOURCES: ResourceDefinition,
    DefinitionCategory.SKILLS: SkillDefinition,
    DefinitionCategory.ACTIONS: ActionDefinition,
    DefinitionCategory.UPGRADES: UpgradeDefinition,
    DefinitionCategory.CLASSES: ClassDefinition,
    DefinitionCategory.HOMES: HomeDefinition,
    DefinitionCategory.LOCATIONS: LocationDefinition,
    DefinitionCategory.FURNITURE: FurnitureDefinition,
}


# =============================================================================
# Entry Validation
# =============================================================================


def _as_entries(raw: Any) -> list[Any] | None:
    """Accept a list of entries or an id -> entry mapping.

    Entries in a mapping inherit their key as id when they lack one.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        entries = []
        for key, value in raw.items():
            if isinstance(value, Mapping) and "id" not in value:
                value = {"id": key, **value}
            entries.append(value)
        return entries
    return None


def _format_pydantic_error(prefix: str, exc: PydanticValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        where = f"{prefix}.{location}" if location else prefix
        messages.append(f"{where}: {error['msg']}")
    return messages


def _validate_category(
    category: DefinitionCategory,
    raw: Any,
    errors: list[str],
) -> dict[str, Definition]:
    entries = _as_entries(raw)
    if entries is None:
        errors.append(f"{category} must be an array or object-map")
        return {}

    model = _MODELS[category]
    indexed: dict[str, Definition] = {}
    for index, entry in enumerate(entries):
        prefix = f"{category}[{index}]"
        if not isinstance(entry, Mapping):
            errors.append(f"{prefix} must be an object")
            continue
        try:
            definition = model.model_validate(dict(entry))
        except PydanticValidationError as exc:
            errors.extend(_format_pydantic_error(prefix, exc))
            continue
        if definition.id in indexed:
            logger.warning(
                "Duplicate definition id, last one wins",
                category=str(category),
                definition_id=definition.id,
            )
        indexed[definition.id] = definition
    return indexed


# =============================================================================
# Cross-reference Checks
# =============================================================================


def _check_ids(
    where: str,
    ids: Iterable[str],
    known: Mapping[str, Any],
    noun: str,
    errors: list[str],
) -> None:
    for ref in ids:
        if ref not in known:
            errors.append(f"{where}: unknown {noun} {ref!r}")


def _check_requirements(store: DefinitionStore, errors: list[str]) -> None:
    for category in DefinitionCategory:
        for definition in store.category(category).values():
            where = f"{category}.{definition.id}.requirements"
            for requirement in definition.requirements:
                if isinstance(requirement, ResourceAtLeast):
                    _check_ids(where, [requirement.resource], store.resources, "resource", errors)
                elif isinstance(requirement, SkillLevelAtLeast):
                    _check_ids(where, [requirement.skill], store.skills, "skill", errors)
                elif isinstance(requirement, LocationDiscovered):
                    _check_ids(where, [requirement.location], store.locations, "location", errors)
                elif isinstance(requirement, ClassEquals):
                    _check_ids(where, [requirement.class_id], store.classes, "class", errors)


def _check_stat_pools(where: str, ids: Iterable[str], store: DefinitionStore, errors: list[str]) -> None:
    for ref in ids:
        resource = store.resources.get(ref)
        if resource is not None and resource.kind != ResourceKind.STAT:
            errors.append(f"{where}: {ref!r} is not a stat pool")


def _check_actions(store: DefinitionStore, errors: list[str]) -> None:
    for action in store.actions.values():
        where = f"actions.{action.id}"
        for field_name in ("stat_pool_costs", "currency_costs", "currency_rewards",
                           "stat_pool_restoration", "max_changes"):
            _check_ids(f"{where}.{field_name}", getattr(action, field_name),
                       store.resources, "resource", errors)
        _check_stat_pools(f"{where}.stat_pool_costs", action.stat_pool_costs, store, errors)
        _check_stat_pools(f"{where}.stat_pool_restoration", action.stat_pool_restoration, store, errors)
        _check_ids(f"{where}.skill_experience", action.skill_experience, store.skills, "skill", errors)
        if action.is_rest_action and action.costs:
            errors.append(f"{where}: a rest action cannot have costs")


def _check_upgrades(store: DefinitionStore, errors: list[str]) -> None:
    for upgrade in store.upgrades.values():
        where = f"upgrades.{upgrade.id}"
        _check_ids(f"{where}.costs", upgrade.costs.resource_ids, store.resources, "resource", errors)
        _check_ids(f"{where}.gains", upgrade.gains.resource_ids, store.resources, "resource", errors)


def _check_effects(store: DefinitionStore, errors: list[str]) -> None:
    for skill in store.skills.values():
        where = f"skills.{skill.id}.level_effects"
        _check_ids(where, skill.level_effects.resource_ids, store.resources, "resource", errors)
        _check_stat_pools(where, skill.level_effects.stat_pool_maximum, store, errors)
    for piece in store.furniture.values():
        where = f"furniture.{piece.id}"
        _check_ids(f"{where}.costs", piece.costs, store.resources, "resource", errors)
        _check_ids(f"{where}.effects", piece.effects.resource_ids, store.resources, "resource", errors)
        _check_stat_pools(f"{where}.effects", piece.effects.stat_pool_maximum, store, errors)
        _check_ids(f"{where}.effects", piece.effects.unlock_actions, store.actions, "action", errors)


def _check_session_refs(store: DefinitionStore, errors: list[str]) -> None:
    for resource in store.resources.values():
        if resource.generates is not None:
            _check_ids(f"resources.{resource.id}.generates", [resource.generates.target],
                       store.resources, "resource", errors)
    for home in store.homes.values():
        if home.location is not None:
            _check_ids(f"homes.{home.id}.location", [home.location], store.locations, "location", errors)
    if store.starting_home is not None:
        _check_ids("starting_home", [store.starting_home], store.homes, "home", errors)

    rest_id = store.default_rest_action
    if rest_id is not None:
        rest = store.actions.get(rest_id)
        if rest is None:
            errors.append(f"default_rest_action: unknown action {rest_id!r}")
        elif not rest.is_rest_action:
            errors.append(f"default_rest_action: {rest_id!r} is not a rest action")


def validate_references(store: DefinitionStore) -> list[str]:
    """Return every dangling or ill-typed id reference in a catalog."""
    errors: list[str] = []
    _check_requirements(store, errors)
    _check_actions(store, errors)
    _check_upgrades(store, errors)
    _check_effects(store, errors)
    _check_session_refs(store, errors)
    return errors


# =============================================================================
# Public API
# =============================================================================


def load_definitions(raw: Mapping[str, Any]) -> DefinitionStore:
    """Validate raw content and build the definition catalog.

    Args:
        raw: Mapping with one key per category (each a list of entries or an
            id -> entry mapping) plus optional ``default_rest_action`` and
            ``starting_home``.

    Returns:
        The frozen DefinitionStore.

    Raises:
        ContentValidationError: Listing every problem found.
    """
    if isinstance(raw, BaseModel) or not isinstance(raw, Mapping):
        raise ContentValidationError("Content must be an object keyed by category")

    errors: list[str] = []
    categories = {
        category: _validate_category(category, raw.get(category.value), errors)
        for category in DefinitionCategory
    }

    unknown = sorted(
        set(raw) - {c.value for c in DefinitionCategory} - {"default_rest_action", "starting_home"}
    )
    for key in unknown:
        errors.append(f"unknown content section {key!r}")

    if errors:
        raise ContentValidationError("Content validation failed", errors=errors)

    store = DefinitionStore(
        **{category.value: entries for category, entries in categories.items()},
        default_rest_action=raw.get("default_rest_action"),
        starting_home=raw.get("starting_home"),
    )

    errors = validate_references(store)
    if errors:
        raise ContentValidationError("Content validation failed", errors=errors)

    logger.info(
        "Content loaded",
        **{category.value: len(entries) for category, entries in categories.items()},
    )
    return store


def load_definitions_file(path: str | Path) -> DefinitionStore:
    """Load content from a JSON file or a directory of per-category files.

    A directory is read as ``resources.json``, ``skills.json`` ... with any
    missing file treated as an empty category, plus an optional
    ``session.json`` holding ``default_rest_action``/``starting_home``.

    Raises:
        ContentValidationError: If a file is unreadable or the content invalid.
    """
    path = Path(path)
    if path.is_dir():
        raw: dict[str, Any] = {}
        for category in DefinitionCategory:
            category_file = path / f"{category.value}.json"
            if category_file.exists():
                raw[category.value] = _read_json(category_file)
        session_file = path / "session.json"
        if session_file.exists():
            session = _read_json(session_file)
            if not isinstance(session, Mapping):
                raise ContentValidationError(f"{session_file} must hold an object")
            raw.update(session)
    else:
        raw = _read_json(path)

    logger.debug("Loading content", path=str(path))
    return load_definitions(raw)


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ContentValidationError(
            f"Cannot read content file {path}: {exc}",
            details={"path": str(path)},
        ) from exc


__all__ = [
    "load_definitions",
    "load_definitions_file",
    "validate_references",
]
