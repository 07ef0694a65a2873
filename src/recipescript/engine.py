"""
Recipe Script Engine
Runs the full pipeline: frontmatter -> lexer -> parser -> interpreter
"""

import logging
import time
from typing import Callable, Optional

from .ast_nodes import Program
from .errors import RecipeSyntaxError
from .frontmatter import extract_frontmatter
from .interpreter import InitialVariables, Interpreter
from .lexer import Lexer
from .parser import Parser
from .recipe import ConsoleMessage, Diagnostic, MessageType, RecipeResult, Severity

logger = logging.getLogger(__name__)

def parse_source(source: str) -> Program:
    """Parse recipe source into a Program; raises RecipeSyntaxError"""
    frontmatter = extract_frontmatter(source)

    tokens = Lexer(frontmatter.remainder, line=frontmatter.line_offset + 1).tokenize()
    logger.debug("Tokenized %d tokens (frontmatter lines: %d)", len(tokens), frontmatter.line_offset)

    program = Parser(tokens).parse(metadata=frontmatter.metadata)
    logger.debug("Parsed %d statements", len(program.body))
    return program

def syntax_error_result(error: RecipeSyntaxError, clock: Callable[[], float] = time.time,
                        metadata=None) -> RecipeResult:
    """Result of a run aborted by a syntax error: no outputs, one diagnostic"""
    return RecipeResult(
        metadata=metadata,
        errors=[Diagnostic(error.message, error.line, Severity.ERROR, error.column)],
        console_messages=[ConsoleMessage(
            id='msg-0',
            type=MessageType.ERROR,
            message=f"Parse error: {error}",
            timestamp=clock(),
            line=error.line,
        )],
    )

def run_recipe(source: str, initial_variables: Optional[InitialVariables] = None,
               interpreter: Optional[Interpreter] = None) -> RecipeResult:
    """Tokenize, parse and execute ``source``.

    Syntax errors never propagate: they produce a result with empty output
    collections and a single diagnostic at the offending line.
    """
    interpreter = interpreter or Interpreter()
    try:
        program = parse_source(source)
    except RecipeSyntaxError as error:
        logger.warning("Recipe aborted: %s", error)
        return syntax_error_result(error, interpreter.clock, extract_frontmatter(source).metadata)

    if initial_variables:
        logger.debug("Injecting variables: %s", ', '.join(sorted(initial_variables)))
    return interpreter.execute(program, initial_variables)
