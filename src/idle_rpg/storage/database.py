"""SQLite persistence layer for idle RPG saves.

One row per save slot holds the JSON snapshot of a GameState. Saving a
slot overwrites it; there are no durability guarantees beyond that.

Storage location: ``settings.storage.database_path`` (data/idle_rpg.db).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generator

from idle_rpg.core.config import get_settings
from idle_rpg.core.constants import DEFAULT_SAVE_SLOT, SAVE_FORMAT_VERSION
from idle_rpg.core.exceptions import SaveDataError
from idle_rpg.core.logging import get_logger
from idle_rpg.storage.snapshot import restore_state, snapshot_state


if TYPE_CHECKING:
    from idle_rpg.models.definitions import DefinitionStore
    from idle_rpg.models.state import GameState

logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SaveRecord:
    """Record of one save slot.

    Attributes:
        slot: Save slot name.
        version: Snapshot format version.
        state_json: Serialized GameState snapshot.
        saved_at: When the slot was last written.
    """

    slot: str
    version: int
    state_json: str
    saved_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SaveRecord:
        """Create from database row."""
        return cls(
            slot=row[0],
            version=row[1],
            state_json=row[2],
            saved_at=datetime.fromisoformat(row[3]),
        )

    def get_state_dict(self) -> dict[str, Any]:
        """Parse the snapshot JSON.

        Raises:
            SaveDataError: If the stored JSON is corrupt or of a newer format.
        """
        if self.version > SAVE_FORMAT_VERSION:
            raise SaveDataError(
                f"Save format {self.version} is newer than supported {SAVE_FORMAT_VERSION}",
                slot=self.slot,
            )
        try:
            data = json.loads(self.state_json)
        except json.JSONDecodeError as exc:
            raise SaveDataError("Save data is not valid JSON", slot=self.slot) from exc
        if not isinstance(data, dict):
            raise SaveDataError("Save data must be an object", slot=self.slot)
        return data

    def restore(self, definitions: DefinitionStore) -> GameState:
        """Merge this snapshot into a fresh state built from ``definitions``."""
        return restore_state(definitions, self.get_state_dict(), slot=self.slot)


# =============================================================================
# Save Store
# =============================================================================


class SaveStore:
    """SQLite store of game snapshots keyed by save slot."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        if db_path is None:
            self.db_path = self._get_default_path()
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Save store initialized", path=str(self.db_path))

    @staticmethod
    def _get_default_path() -> Path:
        """Get the configured database path."""
        return get_settings().storage.database_path

    @staticmethod
    def _default_slot() -> str:
        return get_settings().storage.save_slot or DEFAULT_SAVE_SLOT

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saves (
                    slot TEXT PRIMARY KEY,
                    version INTEGER NOT NULL,
                    state_json TEXT NOT NULL,
                    saved_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_saves_saved_at
                ON saves(saved_at DESC)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Save Operations
    # =========================================================================

    def save(self, state: GameState, slot: str | None = None) -> SaveRecord:
        """Write a snapshot of ``state``, overwriting the slot.

        Args:
            state: The session state to store.
            slot: Slot name; defaults to the configured slot.

        Returns:
            The stored record.
        """
        slot = slot or self._default_slot()
        saved_at = datetime.now()
        state_json = json.dumps(snapshot_state(state))

        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO saves (slot, version, state_json, saved_at)
                VALUES (?, ?, ?, ?)
            """, (slot, SAVE_FORMAT_VERSION, state_json, saved_at.isoformat()))

        logger.info("Game saved", slot=slot, size=len(state_json))
        return SaveRecord(
            slot=slot,
            version=SAVE_FORMAT_VERSION,
            state_json=state_json,
            saved_at=saved_at,
        )

    def load(self, slot: str | None = None) -> SaveRecord | None:
        """Get the record of a slot.

        Returns:
            The record if the slot exists, None otherwise.
        """
        slot = slot or self._default_slot()
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT slot, version, state_json, saved_at
                FROM saves WHERE slot = ?
            """, (slot,))
            row = cursor.fetchone()
            if row:
                return SaveRecord.from_row(tuple(row))
            return None

    def has_save(self, slot: str | None = None) -> bool:
        slot = slot or self._default_slot()
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM saves WHERE slot = ?", (slot,))
            return cursor.fetchone() is not None

    def delete(self, slot: str | None = None) -> bool:
        """Delete a slot.

        Returns:
            True if deleted, False if not found.
        """
        slot = slot or self._default_slot()
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM saves WHERE slot = ?", (slot,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Save deleted", slot=slot)
        return deleted

    def list_slots(self) -> list[str]:
        """Get every slot name, most recently saved first."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT slot FROM saves ORDER BY saved_at DESC")
            return [row[0] for row in cursor.fetchall()]


# =============================================================================
# Singleton Instance
# =============================================================================


_save_store_instance: SaveStore | None = None


def get_save_store() -> SaveStore:
    """Get the process-wide save store.

    Returns:
        SaveStore singleton instance.
    """
    global _save_store_instance

    if _save_store_instance is None:
        _save_store_instance = SaveStore()

    return _save_store_instance


__all__ = [
    "SaveRecord",
    "SaveStore",
    "get_save_store",
]
