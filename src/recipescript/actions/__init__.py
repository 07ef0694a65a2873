"""Action registry: the cooking verbs a recipe script can call."""

from .builtin_actions import (
    DEFAULT_GLYPH,
    GENERIC_ACTION,
    INGREDIENT_GLYPHS,
    ActionHandler,
    ActionSpec,
    get_builtin_actions,
    glyph_for,
    resource_type,
    round_amount,
    slugify,
    to_seconds,
)

__all__ = [
    "DEFAULT_GLYPH",
    "GENERIC_ACTION",
    "INGREDIENT_GLYPHS",
    "ActionHandler",
    "ActionSpec",
    "get_builtin_actions",
    "glyph_for",
    "resource_type",
    "round_amount",
    "slugify",
    "to_seconds",
]
