"""
Recipe Script Parser
Recursive descent parser that builds an Abstract Syntax Tree (AST)

    program      := statement*
    statement    := COMMENT | declaration | call ';'?
    declaration  := ('let' | 'const') IDENTIFIER '=' additive ';'?
    call         := IDENTIFIER '(' (additive (',' additive)*)? ')'
    additive     := multiplicative (('+' | '-') multiplicative)*
    multiplicative := primary (('*' | '/') primary)*
    primary      := NUMBER | STRING | call | IDENTIFIER | '(' additive ')'
"""

from typing import Any, Dict, List, Optional
from .lexer import Token, TokenType
from .errors import ParseError
from .ast_nodes import (
    BinaryExpression,
    Comment,
    Expression,
    FunctionCall,
    Identifier,
    Literal,
    Program,
    Statement,
    VariableDeclaration,
)

class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = [token for token in tokens if token.type != TokenType.NEWLINE]
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenType.EOF, '', line, 1))
        self.current = 0

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self, offset: int = 0) -> Token:
        index = min(self.current + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type == token_type

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(f"{message}, got {self.describe(self.peek())}")

    def error(self, message: str) -> ParseError:
        token = self.peek()
        if token.type == TokenType.EOF and self.current > 0:
            # Report running off the end against the last real token
            last = self.previous()
            return ParseError(message, last.line, last.column)
        return ParseError(message, token.line, token.column)

    @staticmethod
    def describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return 'end of input'
        return f"{token.type.name} '{token.value}'"

    def parse(self, metadata: Optional[Dict[str, Any]] = None) -> Program:
        body: List[Statement] = []

        while not self.is_at_end():
            stmt = self.statement()
            if stmt:
                body.append(stmt)

        return Program(body=body, metadata=metadata, line=1)

    def statement(self) -> Optional[Statement]:
        token = self.peek()

        if token.type == TokenType.COMMENT:
            self.advance()
            return Comment(str(token.value), line=token.line)

        if token.type in (TokenType.LET, TokenType.CONST):
            return self.variable_declaration()

        if token.type == TokenType.IDENTIFIER and self.peek(1).type == TokenType.LPAREN:
            call = self.function_call()
            self.match(TokenType.SEMICOLON)
            return call

        # Stray token, no statement
        self.advance()
        return None

    def variable_declaration(self) -> VariableDeclaration:
        keyword = self.advance()
        kind = 'let' if keyword.type == TokenType.LET else 'const'

        name = self.consume(TokenType.IDENTIFIER, "Expected variable name").value
        self.consume(TokenType.ASSIGN, f"Expected '=' after '{name}'")
        value = self.expression()
        self.match(TokenType.SEMICOLON)

        return VariableDeclaration(str(name), value, kind=kind, line=keyword.line)

    def function_call(self) -> FunctionCall:
        name_token = self.consume(TokenType.IDENTIFIER, "Expected function name")
        self.consume(TokenType.LPAREN, f"Expected '(' after '{name_token.value}'")

        arguments: List[Expression] = []
        if not self.check(TokenType.RPAREN):
            arguments.append(self.expression())
            while self.match(TokenType.COMMA):
                arguments.append(self.expression())

        self.consume(TokenType.RPAREN, "Expected ')' after arguments")
        return FunctionCall(str(name_token.value), arguments, line=name_token.line)

    def expression(self) -> Expression:
        return self.additive()

    def additive(self) -> Expression:
        expr = self.multiplicative()

        while self.match(TokenType.PLUS, TokenType.MINUS):
            operator = self.previous()
            right = self.multiplicative()
            expr = BinaryExpression(expr, str(operator.value), right, line=operator.line)

        return expr

    def multiplicative(self) -> Expression:
        expr = self.primary()

        while self.match(TokenType.MULTIPLY, TokenType.DIVIDE):
            operator = self.previous()
            right = self.primary()
            expr = BinaryExpression(expr, str(operator.value), right, line=operator.line)

        return expr

    def primary(self) -> Expression:
        token = self.peek()

        if self.match(TokenType.NUMBER):
            return Literal(token.value, 'number', line=token.line)

        if self.match(TokenType.STRING):
            return Literal(token.value, 'string', line=token.line)

        if token.type == TokenType.IDENTIFIER:
            if self.peek(1).type == TokenType.LPAREN:
                return self.function_call()
            self.advance()
            return Identifier(str(token.value), line=token.line)

        if self.match(TokenType.LPAREN):
            expr = self.expression()
            self.consume(TokenType.RPAREN, "Expected ')' after expression")
            return expr

        raise self.error(f"Unexpected {self.describe(token)}")
