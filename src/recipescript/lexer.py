"""
Recipe Script Lexer
Tokenizes recipe source code into a stream of tokens
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import LexError

class TokenType(Enum):
    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Keywords
    LET = auto()
    CONST = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    ASSIGN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    SEMICOLON = auto()

    # Special
    COMMENT = auto()
    NEWLINE = auto()
    EOF = auto()

@dataclass
class Token:
    type: TokenType
    value: Union[str, int, float]
    line: int
    column: int

KEYWORDS = {
    'let': TokenType.LET,
    'const': TokenType.CONST,
}

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '/': TokenType.DIVIDE,
    '=': TokenType.ASSIGN,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
}

QUOTES = '"\''
WHITESPACE = ' \t\r'

def _is_digit(ch: Optional[str]) -> bool:
    return ch is not None and '0' <= ch <= '9'

def _is_ident_start(ch: Optional[str]) -> bool:
    return ch is not None and (ch == '_' or 'A' <= ch <= 'Z' or 'a' <= ch <= 'z')

def _is_ident_char(ch: Optional[str]) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)

class Lexer:
    """Single pass scanner with one character of lookahead.

    ``line`` is the physical line of the first character, so a script that
    follows a stripped frontmatter block keeps its real line numbers.
    """

    def __init__(self, source: str, line: int = 1):
        self.source = source
        self.position = 0
        self.line = line
        self.column = 1
        self.start_line = line
        self.start_column = 1
        self.tokens: List[Token] = []

    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def peek_char(self, offset: int = 0) -> Optional[str]:
        index = self.position + offset
        return self.source[index] if index < len(self.source) else None

    def current_char(self) -> Optional[str]:
        return self.peek_char()

    def advance(self) -> str:
        char = self.source[self.position]
        self.position += 1
        if char == '\n':
            self.line, self.column = self.line + 1, 1
        else:
            self.column += 1
        return char

    def add_token(self, token_type: TokenType, value: Union[str, int, float]):
        self.tokens.append(Token(token_type, value, self.start_line, self.start_column))

    def read_while(self, predicate) -> str:
        start = self.position
        while not self.at_end() and predicate(self.current_char()):
            self.advance()
        return self.source[start:self.position]

    def read_string(self) -> str:
        quote = self.advance()
        parts = []

        while True:
            if self.at_end():
                raise LexError('Unterminated string', self.start_line, self.start_column)
            char = self.advance()
            if char == quote:
                return ''.join(parts)
            if char == '\\' and self.current_char() == quote:
                char = self.advance()
            parts.append(char)

    def read_number(self) -> Union[int, float]:
        text = self.read_while(_is_digit)
        if self.current_char() == '.':
            self.advance()
            text = f"{text}.{self.read_while(_is_digit)}"
        try:
            value = float(text) if '.' in text else int(text)
        except ValueError:
            raise LexError('Number literal too long', self.start_line, self.start_column)
        if value == float('inf'):
            raise LexError('Number literal too long', self.start_line, self.start_column)
        return value

    def read_comment(self) -> str:
        self.position += 2
        self.column += 2
        return self.read_while(lambda ch: ch != '\n').strip()

    def scan_token(self):
        char = self.current_char()

        if char in WHITESPACE:
            self.advance()
        elif char == '\n':
            self.add_token(TokenType.NEWLINE, self.advance())
        elif char == '/' and self.peek_char(1) == '/':
            self.add_token(TokenType.COMMENT, self.read_comment())
        elif _is_digit(char):
            self.add_token(TokenType.NUMBER, self.read_number())
        elif char in QUOTES:
            self.add_token(TokenType.STRING, self.read_string())
        elif _is_ident_start(char):
            word = self.read_while(_is_ident_char)
            self.add_token(KEYWORDS.get(word, TokenType.IDENTIFIER), word)
        elif char in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[char], self.advance())
        else:
            # Unknown character, skipped
            self.advance()

    def tokenize(self) -> List[Token]:
        while not self.at_end():
            self.start_line, self.start_column = self.line, self.column
            self.scan_token()

        self.start_line, self.start_column = self.line, self.column
        self.add_token(TokenType.EOF, '')
        return self.tokens
