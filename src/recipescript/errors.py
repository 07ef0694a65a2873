"""
Recipe Script Errors
Exception hierarchy shared by the lexer, parser, interpreter and host layers
"""

from typing import Optional

class RecipeError(Exception):
    """Base class for every error raised by recipescript"""

    def __init__(self, message: str, line: int = 0, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(message)

class RecipeSyntaxError(RecipeError):
    """A lexical or syntactic problem that aborts the whole run"""

    def __str__(self) -> str:
        if self.column is not None:
            return f"{self.message} at line {self.line}, column {self.column}"
        return f"{self.message} at line {self.line}"

class LexError(RecipeSyntaxError):
    pass

class ParseError(RecipeSyntaxError):
    pass

class RecipeRuntimeError(RecipeError):
    """Raised while evaluating a statement; reported as a diagnostic, never fatal"""
    pass

class ConfigError(RecipeError):
    pass
