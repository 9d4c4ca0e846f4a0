"""Static content: loading, validation and the bundled starter catalog."""

from __future__ import annotations

from idle_rpg.content.defaults import DEFAULT_CONTENT, default_definitions
from idle_rpg.content.loader import (
    load_definitions,
    load_definitions_file,
    validate_references,
)


__all__ = [
    "DEFAULT_CONTENT",
    "default_definitions",
    "load_definitions",
    "load_definitions_file",
    "validate_references",
]
