"""Storage module for idle RPG persistence.

Provides:
- Snapshot, structural merge and restore of the session state
- SQLite-based save slots
"""

from idle_rpg.storage.database import (
    SaveRecord,
    SaveStore,
    get_save_store,
)
from idle_rpg.storage.snapshot import (
    merge_snapshot,
    restore_state,
    snapshot_state,
)

__all__ = [
    "SaveRecord",
    "SaveStore",
    "get_save_store",
    "merge_snapshot",
    "restore_state",
    "snapshot_state",
]
