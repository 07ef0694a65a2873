"""
Recipe Script
A small cooking DSL: variables, ingredients, timed steps and media,
re-derived in full whenever the source or a variable changes
"""

__version__ = '1.0.0'

from .engine import parse_source, run_recipe
from .errors import ConfigError, LexError, ParseError, RecipeError, RecipeRuntimeError, RecipeSyntaxError
from .interpreter import Interpreter
from .reactive import RecipeSession, apply_variable_change, rerun_with_change
from .recipe import (
    ConsoleMessage,
    Diagnostic,
    Ingredient,
    MessageType,
    RecipeResult,
    Resource,
    ResourceType,
    Severity,
    Step,
    StepType,
    Variable,
)

__all__ = [
    "__version__",
    "parse_source",
    "run_recipe",
    "Interpreter",
    "RecipeSession",
    "apply_variable_change",
    "rerun_with_change",
    "RecipeResult",
    "Variable",
    "Ingredient",
    "Step",
    "StepType",
    "Resource",
    "ResourceType",
    "ConsoleMessage",
    "MessageType",
    "Diagnostic",
    "Severity",
    "RecipeError",
    "RecipeSyntaxError",
    "LexError",
    "ParseError",
    "RecipeRuntimeError",
    "ConfigError",
]
