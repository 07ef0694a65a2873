"""
Recipe Script Reactive Updates
Rewrites a variable's declaration in place and re-derives the whole recipe

A host that lets the user tweak a variable (servings, spice level, ...)
calls ``RecipeSession.update_variable``. The declaration line in the source
is patched so the text stays in sync, then the recipe is re-run with every
current variable injected, so the new value wins even where the text could
not be patched.
"""

import logging
import math
import re
from decimal import Decimal
from typing import Dict, Mapping, Optional, Tuple

from .engine import run_recipe
from .interpreter import InitialVariables, Interpreter, is_number
from .recipe import Number, RecipeResult, Variable

logger = logging.getLogger(__name__)

def declaration_pattern(name: str) -> 're.Pattern[str]':
    return re.compile(
        r'^(\s*(?:let|const)\s+' + re.escape(name) + r'\s*=\s*)\d+(\.\d+)?(\s*;?\s*(?://.*)?\s*)$'
    )

def number_literal(value: Number) -> Optional[str]:
    """Source text for ``value``, or None when the grammar cannot express it"""
    if not is_number(value) or not math.isfinite(value) or value < 0:
        return None
    if isinstance(value, float) and not value.is_integer():
        text = repr(value)
        if 'e' in text or 'E' in text:
            text = format(Decimal(text), 'f')
        return text
    return str(int(value))

def apply_variable_change(source: str, name: str, new_value: Number, declared_at_line: int) -> str:
    """Replace the numeric literal of ``name``'s declaration on its line.

    Only a line shaped like ``let name = 12;`` (optionally followed by a
    ``//`` comment) is rewritten; anything else returns ``source`` unchanged.
    """
    literal = number_literal(new_value)
    lines = source.split('\n')
    index = declared_at_line - 1

    if literal is None:
        logger.info("Not rewriting %s: no literal for %r", name, new_value)
        return source
    if not 0 <= index < len(lines):
        logger.info("Not rewriting %s: line %d is outside the source", name, declared_at_line)
        return source

    match = declaration_pattern(name).match(lines[index])
    if not match:
        logger.info("Not rewriting %s: line %d is not a plain declaration", name, declared_at_line)
        return source

    lines[index] = match.group(1) + literal + match.group(3)
    return '\n'.join(lines)

def rerun_with_change(source: str, variables: Mapping[str, Variable], name: str, value: Number,
                      interpreter: Optional[Interpreter] = None) -> Tuple[str, Dict[str, Variable], RecipeResult]:
    """Apply one variable change and re-run with all variables injected"""
    if name not in variables:
        raise KeyError(name)
    if not is_number(value):
        raise TypeError(f"Variable '{name}' must be set to a number, got {type(value).__name__}")

    variable = variables[name]
    updated = dict(variables)
    updated[name] = Variable(name, value, variable.line)

    new_source = apply_variable_change(source, name, value, variable.line)
    result = run_recipe(new_source, updated, interpreter)
    return new_source, result.variables or updated, result

class RecipeSession:
    """Current source, variables and output of one recipe being edited"""

    def __init__(self, source: str = '', interpreter: Optional[Interpreter] = None):
        self.interpreter = interpreter or Interpreter()
        self.source = source
        self.variables: Dict[str, Variable] = {}
        self.result = RecipeResult()
        if source:
            self.update_code(source)

    def update_code(self, source: str, initial_variables: Optional[InitialVariables] = None) -> RecipeResult:
        """Replace the whole source; ``initial_variables`` seed the fresh run"""
        self.source = source
        self.result = run_recipe(source, initial_variables, self.interpreter)
        self.variables = dict(self.result.variables)
        return self.result

    def update_variable(self, name: str, value: Number) -> RecipeResult:
        self.source, self.variables, self.result = rerun_with_change(
            self.source, self.variables, name, value, self.interpreter
        )
        return self.result
