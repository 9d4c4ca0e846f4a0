"""Starter content bundled with the engine.

The catalog below is written in the raw content format accepted by
``load_definitions`` (including the shorthand requirement and reward
shapes), so it doubles as a reference for content authors.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from idle_rpg.content.loader import load_definitions
from idle_rpg.models.definitions import DefinitionStore


DEFAULT_CONTENT: dict[str, Any] = {
    "resources": [
        {
            "id": "health",
            "name": "Health",
            "kind": "stat",
            "amount": 10,
            "maximum": 10,
        },
        {
            "id": "stamina",
            "name": "Stamina",
            "kind": "stat",
            "amount": 10,
            "maximum": 10,
        },
        {
            "id": "gold",
            "name": "Gold",
            "description": "Coins of the realm.",
            "maximum": 10,
        },
        {
            "id": "scrolls",
            "name": "Scrolls",
            "description": "Ancient texts that generate research over time.",
            "maximum": 10,
            "requirement": {"resource": "gold", "amt": 10},
            "generates": {"target": "research", "rate_per_unit": 0.1},
        },
        {
            "id": "research",
            "name": "Research",
            "maximum": 25,
            "requirement": {"resource": "scrolls", "amt": 1},
        },
    ],
    "skills": [
        {
            "id": "survival",
            "name": "Survival",
            "description": "Knowing how to get by on the streets.",
            "next_level_experience": 50,
            "max_level": 20,
            "tier": 1,
            "level_effects": {"stat_pool_maximum": {"stamina": 1}},
        },
    ],
    "actions": [
        {
            "id": "beg",
            "name": "Beg for Coins",
            "description": "Hold out your hand and hope for the best.",
            "base_duration": 2000,
            "stat_pool_costs": {"stamina": 2},
            "currency_rewards": {"gold": {"min": 0, "max": 2}},
            "skill_experience": {"survival": 1},
        },
        {
            "id": "rest",
            "name": "Rest",
            "description": "Catch your breath.",
            "is_rest_action": True,
            "base_duration": 1000,
            "stat_pool_restoration": {"health": 1, "stamina": 1},
        },
        {
            "id": "scavenge",
            "name": "Scavenge for Supplies",
            "description": "Pick through the refuse of the city.",
            "base_duration": 3000,
            "stat_pool_costs": {"stamina": 3},
            "currency_rewards": {"gold": {"min": 1, "max": 3}},
            "skill_experience": {"survival": 2},
            "requirements": [{"skill": "survival", "level": 1}],
        },
        {
            "id": "buy_scroll",
            "name": "Buy a Scroll",
            "description": "Reading this makes your head hurt. In a good way?",
            "base_duration": 1000,
            "currency_costs": {"gold": 10},
            "currency_rewards": {"scrolls": 1},
            "requirements": [{"resource": "gold", "amt": 10}],
        },
        {
            "id": "map_the_slums",
            "name": "Map the Slums",
            "description": "Learn the alleys well enough to find your way back.",
            "base_duration": 5000,
            "stat_pool_costs": {"stamina": 5},
            "skill_experience": {"survival": 5},
            "max_purchases": 1,
            "requirements": [{"location": "slums"}],
        },
    ],
    "upgrades": [
        {
            "id": "coin_purse",
            "name": "Coin Purse",
            "description": "A simple leather pouch to store more gold.",
            "costs": {"currencies": {"gold": 10}},
            "gains": {"currency_maximum": {"gold": 15}},
            "requirements": [{"resource": "gold", "amt": 10}],
        },
        {
            "id": "helping_hand",
            "name": "Helping Hand",
            "description": "Another pair of hands lets you work on two things at once.",
            "costs": {"currencies": {"gold": 25}, "stat_pools": {"stamina": 5}},
            "gains": {"special_effects": ["double_actions"]},
            "requirements": [{"skill": "survival", "level": 5}],
        },
    ],
    "classes": [
        {
            "id": "waif",
            "name": "Waif",
            "description": "A humble beginning with balanced stats.",
        },
    ],
    "homes": [
        {"id": "homeless", "name": "Homeless", "floor_space": 0},
        {
            "id": "abandoned_shack",
            "name": "Abandoned Shack",
            "floor_space": 5,
            "location": "slums",
            "requirements": [{"skill": "survival", "level": 3}],
        },
    ],
    "locations": [
        {"id": "city_square", "name": "City Square", "discovered": True},
        {
            "id": "slums",
            "name": "Slums",
            "requirements": [{"skill": "survival", "level": 2}],
        },
    ],
    "furniture": [
        {
            "id": "bedroll",
            "name": "Bedroll",
            "description": "Better than sleeping on the bare floor.",
            "floor_space": 2,
            "costs": {"gold": 5},
            "effects": {"stat_pool_maximum": {"stamina": 2}},
            "requirements": [{"skill": "survival", "level": 3}],
        },
        {
            "id": "reading_nook",
            "name": "Reading Nook",
            "description": "A quiet corner to pore over your scrolls.",
            "floor_space": 3,
            "costs": {"gold": 10},
            "effects": {"currency_generation": {"research": 0.05}},
            "requirements": [{"resource": "scrolls", "amt": 1}],
        },
    ],
    "default_rest_action": "rest",
    "starting_home": "homeless",
}
"""Raw starter catalog."""


@lru_cache(maxsize=1)
def default_definitions() -> DefinitionStore:
    """Return the validated starter catalog (cached; the store is immutable)."""
    return load_definitions(DEFAULT_CONTENT)


__all__ = ["DEFAULT_CONTENT", "default_definitions"]
