"""
Recipe Script AST Nodes
Node types produced by the parser, one dataclass per construct
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

class ASTNode(ABC):
    """Base class for all AST nodes"""
    line: int

class Expression(ASTNode):
    """Base class for expressions"""
    pass

class Statement(ASTNode):
    """Base class for statements"""
    pass

# Expressions
@dataclass
class Literal(Expression):
    value: Union[int, float, str]
    value_type: str  # 'number' or 'string'
    line: int = 0

@dataclass
class Identifier(Expression):
    name: str
    line: int = 0

@dataclass
class BinaryExpression(Expression):
    left: Expression
    operator: str
    right: Expression
    line: int = 0

# A call is a statement, and may also appear where a value is expected
@dataclass
class FunctionCall(Statement, Expression):
    name: str
    arguments: List[Expression] = field(default_factory=list)
    line: int = 0

# Statements
@dataclass
class VariableDeclaration(Statement):
    name: str
    value: Expression
    kind: str = 'let'  # 'let' or 'const'
    line: int = 0

@dataclass
class Comment(Statement):
    text: str
    line: int = 0

# Program root
@dataclass
class Program(ASTNode):
    body: List[Statement] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    line: int = 1

# Debug views, used by the ``ast`` command and the REPL
def ast_to_dict(node: Any) -> Any:
    """Plain dict/list form of a tree, tagged with each node's class name"""
    if isinstance(node, list):
        return [ast_to_dict(item) for item in node]
    if isinstance(node, dict):
        return {key: ast_to_dict(value) for key, value in node.items()}
    if not isinstance(node, ASTNode):
        return node

    data = {'type': type(node).__name__}
    data.update((f.name, ast_to_dict(getattr(node, f.name))) for f in fields(node))
    return data

def pretty_print_ast(node: Any, indent: int = 0) -> str:
    """Indented one-node-per-line rendering; leaf values use repr()"""
    pad = '  ' * indent

    if isinstance(node, list):
        if not node:
            return '[]'
        items = ''.join(f"{pad}  {pretty_print_ast(item, indent + 1)},\n" for item in node)
        return f"[\n{items}{pad}]"

    if not isinstance(node, ASTNode):
        return repr(node)

    values = [(f.name, getattr(node, f.name)) for f in fields(node)]
    if not any(isinstance(value, (ASTNode, list)) for _, value in values):
        inline = ', '.join(f"{name}={value!r}" for name, value in values)
        return f"{type(node).__name__}({inline})"

    lines = ''.join(f"{pad}  {name}={pretty_print_ast(value, indent + 1)},\n" for name, value in values)
    return f"{type(node).__name__}(\n{lines}{pad})"
