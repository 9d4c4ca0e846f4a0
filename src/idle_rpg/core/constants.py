"""Engine-wide constants for the idle RPG.

Defaults here seed the pydantic settings in ``idle_rpg.core.config``;
code that needs a tunable value should read it from settings instead.
"""

from __future__ import annotations

# =============================================================================
# Action Log
# =============================================================================

ACTION_LOG_LIMIT = 100
"""Maximum number of entries kept in the action log (newest first)."""

PAUSE_MESSAGE = "You paused your current action. Progress is saved."
"""Narration written when the current action is stopped."""

# =============================================================================
# Timing
# =============================================================================

DEFAULT_TICK_INTERVAL_MS = 100
"""Nominal interval between driver ticks."""

MAX_OFFLINE_SECONDS = 8 * 60 * 60
"""Cap on simulated offline progress (8 hours)."""

CATCH_UP_STEP_MS = 1000
"""Simulation step used when replaying offline time."""

# =============================================================================
# Progression
# =============================================================================

SKILL_TIER_BASE = 1.1
"""Per-tier growth of the experience curve: next *= SKILL_TIER_BASE ** tier."""

DEFAULT_SKILL_TIER = 1
"""Tier assigned to skills whose definition does not name one."""

# =============================================================================
# Improvements
# =============================================================================

DEFAULT_IMPROVEMENTS: list[dict[str, float | int]] = [
    {"at_completions": 10, "duration_multiplier": 0.95},
    {"at_completions": 50, "reward_multiplier": 1.1},
]
"""Escalation table applied when an action reaches a completion count."""

# =============================================================================
# Persistence
# =============================================================================

SAVE_FORMAT_VERSION = 1
"""Version stamped on every stored snapshot."""

DEFAULT_SAVE_SLOT = "default"
"""Slot used when the caller does not name one."""


__all__ = [
    "ACTION_LOG_LIMIT",
    "PAUSE_MESSAGE",
    "DEFAULT_TICK_INTERVAL_MS",
    "MAX_OFFLINE_SECONDS",
    "CATCH_UP_STEP_MS",
    "SKILL_TIER_BASE",
    "DEFAULT_SKILL_TIER",
    "DEFAULT_IMPROVEMENTS",
    "SAVE_FORMAT_VERSION",
    "DEFAULT_SAVE_SLOT",
]
