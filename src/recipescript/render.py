"""
Recipe Script Rendering
Terminal views of tokens, results and sources, drawn with rich
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .actions import ActionSpec
from .lexer import Token, TokenType
from .recipe import MessageType, RecipeResult, Step, format_number

MESSAGE_STYLES = {
    MessageType.INFO: 'dim',
    MessageType.SUCCESS: 'green',
    MessageType.WARNING: 'yellow',
    MessageType.ERROR: 'bold red',
    MessageType.VARIABLE: 'cyan',
}

def format_timer(step: Step) -> str:
    if not step.is_timer_step:
        return ''
    return f"{format_number(step.duration)} s"

def _line(line: Optional[int]) -> str:
    return str(line) if line else ''

def render_metadata(console: Console, result: RecipeResult, title: str = 'Recipe'):
    metadata = result.metadata or {}
    heading = str(metadata.get('title') or title)

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style='bold')
    grid.add_column()
    for key, value in metadata.items():
        if key == 'title':
            continue
        if isinstance(value, list):
            value = ', '.join(str(item) for item in value)
        grid.add_row(escape(key), escape(str(value)))

    if metadata.get('title') or grid.row_count:
        console.print(Panel(grid, title=escape(heading), border_style='gold1'))
    else:
        console.print(f"[bold gold1]{escape(heading)}[/bold gold1]")

def render_variables(console: Console, result: RecipeResult):
    if not result.variables:
        return
    table = Table(title='Variables', box=None, header_style='bold dim')
    table.add_column('Name', style='cyan')
    table.add_column('Value', justify='right')
    table.add_column('Line', justify='right', style='dim')
    for variable in result.variables.values():
        table.add_row(variable.name, format_number(variable.value), _line(variable.line))
    console.print(table)

def render_result(console: Console, result: RecipeResult, title: str = 'Recipe'):
    """Print every output collection of ``result`` as a table"""
    render_metadata(console, result, title)
    render_variables(console, result)

    if result.ingredients:
        table = Table(title=f"Ingredients ({len(result.ingredients)})", box=None, header_style='bold dim')
        table.add_column('', width=2)
        table.add_column('Ingredient', style='cyan')
        table.add_column('Amount', justify='right', style='yellow')
        table.add_column('Unit')
        table.add_column('Line', justify='right', style='dim')
        for ingredient in result.ingredients:
            table.add_row(ingredient.glyph, escape(ingredient.name), format_number(ingredient.amount),
                          escape(ingredient.unit), _line(ingredient.line))
        console.print(table)

    if result.steps:
        table = Table(title=f"Steps ({len(result.steps)})", box=None, header_style='bold dim')
        table.add_column('No.', justify='right', style='dim', width=4)
        table.add_column('Type', style='magenta')
        table.add_column('Description')
        table.add_column('Timer', justify='right', style='yellow')
        table.add_column('Line', justify='right', style='dim')
        for number, step in enumerate(result.steps, 1):
            table.add_row(str(number), step.type.value, escape(step.description), format_timer(step),
                          _line(step.line))
        console.print(table)

    if result.resources:
        table = Table(title='Resources', box=None, header_style='bold dim')
        table.add_column('Type', style='magenta')
        table.add_column('Name', style='cyan')
        table.add_column('URL')
        table.add_column('Line', justify='right', style='dim')
        for resource in result.resources:
            table.add_row(resource.type.value, escape(resource.name), escape(resource.url), _line(resource.line))
        console.print(table)

    render_console(console, result)

    for error in result.errors:
        where = f"line {error.line}" if error.line else 'recipe'
        console.print(f"[red]{error.severity.value} ({where}): {escape(error.message)}[/red]")

def render_console(console: Console, result: RecipeResult):
    if not result.console_messages:
        return
    table = Table(title='Console', box=None, show_header=False)
    table.add_column('Line', justify='right', style='dim')
    table.add_column('Message')
    for message in result.console_messages:
        style = MESSAGE_STYLES.get(message.type, '')
        table.add_row(_line(message.line), f"[{style}]{escape(message.message)}[/{style}]" if style
                      else escape(message.message))
    console.print(table)

def render_tokens(console: Console, tokens: List[Token]):
    table = Table(title=f"Tokens ({len(tokens)})", box=None, header_style='bold dim')
    table.add_column('Type', style='magenta')
    table.add_column('Value', style='cyan')
    table.add_column('Line', justify='right', style='dim')
    table.add_column('Column', justify='right', style='dim')
    for token in tokens:
        if token.type == TokenType.NEWLINE:
            continue
        table.add_row(token.type.name, escape(repr(token.value)), str(token.line), str(token.column))
    console.print(table)

def render_source(console: Console, source: str):
    """Source listing with physical line numbers"""
    width = len(str(source.count('\n') + 1))
    for number, text in enumerate(source.split('\n'), 1):
        console.print(f"[dim]{number:>{width}}[/dim] {escape(text)}", highlight=False)

def format_arity(action: ActionSpec) -> str:
    if action.max_args is None:
        return f"{action.min_args}+"
    if action.max_args == action.min_args:
        return str(action.min_args)
    return f"{action.min_args}-{action.max_args}"

def render_actions(console: Console, actions: Dict[str, ActionSpec]):
    table = Table(title='Actions', box=None, header_style='bold dim')
    table.add_column('Name', style='cyan')
    table.add_column('Args', justify='right')
    table.add_column('Category', style='magenta')
    table.add_column('Description')
    for action in sorted(actions.values(), key=lambda action: (action.category, action.name)):
        table.add_row(action.name, format_arity(action), action.category, escape(action.description))
    console.print(table)
