"""Serialize, merge and restore the session state.

A snapshot is plain JSON-safe data (no cycles, no callables). Restoring
never trusts a snapshot blindly: a fresh state is built from the current
definitions and the snapshot is merged into it field by field, so fields
introduced after the save keep their fresh defaults and records whose ids
no longer exist are dropped.

Example:
    >>> data = snapshot_state(game.state)
    >>> restored = restore_state(game.definitions, data)
    >>> restored == game.state
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from idle_rpg.core.exceptions import SaveDataError
from idle_rpg.core.logging import get_logger
from idle_rpg.models.enums import DefinitionCategory
from idle_rpg.models.state import GameState, create_game_state


if TYPE_CHECKING:
    from idle_rpg.models.definitions import DefinitionStore

logger = get_logger(__name__)

# Session fields that name a record and must still resolve after a restore.
_RECORD_POINTERS: dict[str, DefinitionCategory] = {
    "current_action": DefinitionCategory.ACTIONS,
    "previous_action": DefinitionCategory.ACTIONS,
    "home": DefinitionCategory.HOMES,
}


def snapshot_state(state: GameState) -> dict[str, Any]:
    """Dump the state to JSON-safe data."""
    return state.model_dump(mode="json")


def merge_snapshot(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``source`` into ``target`` in place.

    Nested mappings merge key by key; any other value in ``source``
    replaces the one in ``target``. Tagged values (mappings with a ``kind``)
    whose tags differ are replaced whole.

    Returns:
        ``target``, for chaining.
    """
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            if "kind" in current and "kind" in value and current["kind"] != value["kind"]:
                target[key] = dict(value)
            else:
                merge_snapshot(current, value)
        else:
            target[key] = value
    return target


def restore_state(
    definitions: DefinitionStore,
    snapshot: Mapping[str, Any],
    *,
    slot: str | None = None,
) -> GameState:
    """Rebuild a GameState from a snapshot under the current definitions.

    Args:
        definitions: The current definition catalog.
        snapshot: Data produced by ``snapshot_state`` (possibly by an older
            version of the content).
        slot: Save slot name, used for error context only.

    Returns:
        A validated GameState.

    Raises:
        SaveDataError: If the snapshot is not a mapping or does not validate.
    """
    if not isinstance(snapshot, Mapping):
        raise SaveDataError("Save data must be an object", slot=slot)

    fresh = snapshot_state(create_game_state(definitions))
    source = dict(snapshot)
    # The rest action always comes from the current content.
    source.pop("default_rest_action", None)

    for category in DefinitionCategory:
        saved = source.get(category.value)
        if saved is None:
            continue
        if not isinstance(saved, Mapping):
            raise SaveDataError(f"Save data section {category.value!r} is malformed", slot=slot)
        known = {record_id: record for record_id, record in saved.items() if record_id in fresh[category.value]}
        dropped = sorted(set(saved) - set(known))
        if dropped:
            logger.warning("Dropping saved records with no definition", category=category.value, ids=dropped)
        source[category.value] = known

    for pointer, category in _RECORD_POINTERS.items():
        value = source.get(pointer)
        if value is not None and value not in fresh[category.value]:
            logger.warning("Dropping saved reference with no definition", field=pointer, value=value)
            source[pointer] = fresh[pointer]

    merged = merge_snapshot(fresh, source)
    try:
        state = GameState.model_validate(merged)
    except PydanticValidationError as exc:
        raise SaveDataError(
            "Save data failed validation",
            slot=slot,
            details={"error_count": exc.error_count()},
        ) from exc

    logger.debug("State restored", slot=slot, current_action=state.current_action)
    return state


__all__ = [
    "snapshot_state",
    "merge_snapshot",
    "restore_state",
]
