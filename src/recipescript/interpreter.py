"""
Recipe Script Interpreter
Evaluates the Abstract Syntax Tree (AST) and produces the recipe model
"""

import logging
import time
from typing import Callable, Dict, Mapping, Optional, Union

from .ast_nodes import (
    ASTNode,
    BinaryExpression,
    Comment,
    Expression,
    FunctionCall,
    Identifier,
    Literal,
    Program,
    VariableDeclaration,
)
from .actions import DEFAULT_GLYPH, GENERIC_ACTION, INGREDIENT_GLYPHS, ActionSpec, get_builtin_actions, glyph_for
from .errors import RecipeRuntimeError
from .recipe import (
    ConsoleMessage,
    Diagnostic,
    MessageType,
    Number,
    RecipeResult,
    Severity,
    Step,
    StepType,
    Variable,
    format_number,
)

logger = logging.getLogger(__name__)

Value = Union[int, float, str]
InitialVariables = Mapping[str, Union[Number, Variable]]

def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def _normalize(value: Number) -> Number:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value

class Environment:
    """Variables visible to one run, keyed by name"""

    def __init__(self, initial: Optional[InitialVariables] = None):
        self.values: Dict[str, Variable] = {}
        for name, value in (initial or {}).items():
            if isinstance(value, Variable):
                self.values[name] = Variable(name, value.value, value.line)
            elif is_number(value):
                self.values[name] = Variable(name, value, 0)
            else:
                raise TypeError(f"Injected variable '{name}' must be a number, got {type(value).__name__}")

    def has(self, name: str) -> bool:
        return name in self.values

    def define(self, name: str, value: Number, line: int):
        self.values[name] = Variable(name, value, line)

    def get(self, name: str) -> Number:
        if name in self.values:
            return self.values[name].value
        raise RecipeRuntimeError(f"Undefined variable: {name}")

class ExecutionContext:
    """Mutable state of a single execute() call"""

    def __init__(self, environment: Environment, glyphs: Dict[str, str], default_glyph: str,
                 clock: Callable[[], float]):
        self.environment = environment
        self.result = RecipeResult()
        self.glyphs = glyphs
        self.default_glyph = default_glyph
        self.clock = clock
        self.message_id = 0

    def glyph_for(self, name: str) -> str:
        return glyph_for(name, self.glyphs, self.default_glyph)

    def add_step(self, step_type: StepType, description: str, line: int,
                 duration: Optional[Number] = None, duration_unit: Optional[str] = None):
        self.result.steps.append(Step(
            type=step_type,
            description=description,
            line=line,
            is_timer_step=duration is not None,
            duration=duration,
            duration_unit=duration_unit,
        ))

    def add_console_message(self, message_type: MessageType, message: str, line: Optional[int] = None):
        self.result.console_messages.append(ConsoleMessage(
            id=f"msg-{self.message_id}",
            type=message_type,
            message=message,
            timestamp=self.clock(),
            line=line,
        ))
        self.message_id += 1

    def add_error(self, message: str, line: int, column: Optional[int] = None):
        self.result.errors.append(Diagnostic(message, line, Severity.ERROR, column))
        self.add_console_message(MessageType.ERROR, f"Error: {message}", line)

    def add_warning(self, message: str, line: int):
        self.result.errors.append(Diagnostic(message, line, Severity.WARNING))
        self.add_console_message(MessageType.WARNING, f"Warning: {message}", line)

class Interpreter:
    def __init__(self, actions: Optional[Dict[str, ActionSpec]] = None,
                 glyphs: Optional[Dict[str, str]] = None,
                 default_glyph: str = DEFAULT_GLYPH,
                 clock: Optional[Callable[[], float]] = None):
        self.actions = get_builtin_actions() if actions is None else actions
        self.glyphs = dict(INGREDIENT_GLYPHS)
        if glyphs:
            self.glyphs.update({name.lower(): glyph for name, glyph in glyphs.items()})
        self.default_glyph = default_glyph
        self.clock = clock or time.time

    def execute(self, program: Program, initial_variables: Optional[InitialVariables] = None) -> RecipeResult:
        """Run every statement of ``program`` and collect the outputs.

        Variables in ``initial_variables`` are defined before the first
        statement runs; a declaration of the same name keeps the injected
        value instead of its own literal.
        """
        ctx = ExecutionContext(Environment(initial_variables), self.glyphs, self.default_glyph, self.clock)
        ctx.result.metadata = program.metadata

        logger.debug("Executing %d statements with %d injected variables",
                     len(program.body), len(ctx.environment.values))
        try:
            for statement in program.body:
                self.visit(statement, ctx)
        except Exception as error:
            logger.exception("Execution aborted")
            ctx.add_error(str(error), 0)

        ctx.result.variables = dict(ctx.environment.values)
        return ctx.result

    def visit(self, node: ASTNode, ctx: ExecutionContext):
        method_name = f'visit_{node.__class__.__name__}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node, ctx)

    def generic_visit(self, node: ASTNode, ctx: ExecutionContext):
        raise RecipeRuntimeError(f"No visit method for {node.__class__.__name__}")

    # Statement visitors
    def visit_Comment(self, node: Comment, ctx: ExecutionContext):
        pass

    def visit_VariableDeclaration(self, node: VariableDeclaration, ctx: ExecutionContext):
        environment = ctx.environment
        try:
            value = self.evaluate(node.value, environment)

            if not is_number(value):
                ctx.add_error(f"Variable {node.name} must be a number, got {type(value).__name__}", node.line)
                return

            if environment.has(node.name):
                injected = environment.values[node.name]
                if not injected.line:
                    injected.line = node.line
            else:
                environment.define(node.name, value, node.line)

            ctx.add_console_message(
                MessageType.VARIABLE,
                f"Variable {node.name} = {format_number(environment.get(node.name))}",
                node.line,
            )
        except Exception as error:
            ctx.add_error(f"Error evaluating variable {node.name}: {error}", node.line)

    def visit_FunctionCall(self, node: FunctionCall, ctx: ExecutionContext):
        try:
            args = [self.evaluate(arg, ctx.environment) for arg in node.arguments]

            name = node.name.lower()
            action = self.actions.get(name)
            if action is None:
                GENERIC_ACTION.handler(ctx, node.name, args, node.line)
                return

            if len(args) < action.min_args:
                ctx.add_error(f"{name}() requires {action.requires or f'at least {action.min_args} arguments'}", node.line)
                return
            if action.max_args is not None and len(args) > action.max_args:
                ctx.add_warning(f"{name}() takes at most {action.max_args} arguments, "
                                f"ignoring {len(args) - action.max_args} extra", node.line)

            action.handler(ctx, name, args, node.line)
        except Exception as error:
            ctx.add_error(f"Error executing {node.name}(): {error}", node.line)

    # Expression evaluation
    def evaluate(self, expression: Expression, environment: Environment) -> Value:
        if isinstance(expression, Literal):
            return expression.value

        if isinstance(expression, Identifier):
            return environment.get(expression.name)

        if isinstance(expression, BinaryExpression):
            return self.evaluate_binary(expression, environment)

        if isinstance(expression, FunctionCall):
            # Calls have no return channel
            return 0

        raise RecipeRuntimeError(f"Cannot evaluate expression type: {expression.__class__.__name__}")

    def evaluate_binary(self, node: BinaryExpression, environment: Environment) -> Number:
        left = self.evaluate(node.left, environment)
        right = self.evaluate(node.right, environment)

        if not is_number(left) or not is_number(right):
            raise RecipeRuntimeError('Binary operations require numeric operands')

        operator = node.operator
        if operator == '+':
            return _normalize(left + right)
        elif operator == '-':
            return _normalize(left - right)
        elif operator == '*':
            return _normalize(left * right)
        elif operator == '/':
            if right == 0:
                return 0
            return _normalize(left / right)

        raise RecipeRuntimeError(f"Unknown operator: {operator}")
