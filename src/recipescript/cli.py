"""
Recipe Script
Command-line entry point: run, inspect and edit recipe scripts
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .ast_nodes import ast_to_dict, pretty_print_ast
from .config import RecipeConfig, configure_logging, load_config
from .engine import parse_source
from .errors import ConfigError, RecipeError
from .frontmatter import extract_frontmatter
from .interpreter import Interpreter
from .lexer import Lexer
from .reactive import RecipeSession
from .recipe import Number
from .recipes import list_demo_recipes, load_demo_recipe
from .render import render_actions, render_result, render_tokens
from .repl import REPL

logger = logging.getLogger(__name__)

console = Console()

DEMO_PREFIX = 'demo:'

def read_source(target: str) -> Tuple[str, str]:
    """Return ``(label, source)`` for a file path or ``demo:<name>``"""
    if target.startswith(DEMO_PREFIX):
        name = target[len(DEMO_PREFIX):]
        return name, load_demo_recipe(name)
    path = Path(target)
    return path.stem, path.read_text(encoding='utf-8')

def parse_number(text: str) -> Number:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not a number")
    return int(value) if value.is_integer() else value

def parse_assignment(text: str) -> Tuple[str, Number]:
    name, sep, value = text.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{text}'")
    return name.strip(), parse_number(value.strip())

def make_interpreter(config: RecipeConfig) -> Interpreter:
    return Interpreter(glyphs=config.glyphs, default_glyph=config.default_glyph)

def dump_json(data, config: RecipeConfig):
    print(json.dumps(data, indent=config.json_indent or None, ensure_ascii=False))

# Commands
def cmd_run(args, config: RecipeConfig) -> int:
    label, source = read_source(args.file)
    session = RecipeSession(interpreter=make_interpreter(config))
    session.update_code(source, config.variables)

    for name, value in args.set or []:
        if name not in session.variables:
            console.print(f"[red]Error: Unknown variable '{escape(name)}'[/red]")
            return 1
        session.update_variable(name, value)

    result = session.result
    if args.json:
        dump_json(result.to_dict(), config)
    else:
        render_result(console, result, title=label)
    return 0 if result.ok else 1

def cmd_tokens(args, config: RecipeConfig) -> int:
    _, source = read_source(args.file)
    frontmatter = extract_frontmatter(source)
    tokens = Lexer(frontmatter.remainder, line=frontmatter.line_offset + 1).tokenize()
    if args.json:
        dump_json([{'type': t.type.name, 'value': t.value, 'line': t.line, 'column': t.column}
                   for t in tokens], config)
    else:
        render_tokens(console, tokens)
    return 0

def cmd_ast(args, config: RecipeConfig) -> int:
    _, source = read_source(args.file)
    program = parse_source(source)
    if args.json:
        dump_json(ast_to_dict(program), config)
    else:
        console.print(escape(pretty_print_ast(program)), highlight=False)
    return 0

def cmd_set(args, config: RecipeConfig) -> int:
    _, source = read_source(args.file)
    session = RecipeSession(source, interpreter=make_interpreter(config))
    if args.name not in session.variables:
        console.print(f"[red]Error: Unknown variable '{escape(args.name)}'[/red]")
        return 1

    session.update_variable(args.name, args.value)
    if session.source == source:
        console.print(f"[yellow]Declaration of {escape(args.name)} was not rewritten[/yellow]")

    if not args.write:
        sys.stdout.write(session.source)
        return 0
    if args.file.startswith(DEMO_PREFIX):
        console.print('[red]Error: Bundled demos are read-only[/red]')
        return 1
    Path(args.file).write_text(session.source, encoding='utf-8')
    console.print(f"[green]Updated {escape(args.file)}[/green]")
    return 0

def cmd_demos(args, config: RecipeConfig) -> int:
    if args.name:
        sys.stdout.write(load_demo_recipe(args.name))
        return 0

    table = Table(title='Demo recipes', box=None, header_style='bold dim')
    table.add_column('Name', style='cyan')
    table.add_column('Title')
    for name in list_demo_recipes():
        metadata = extract_frontmatter(load_demo_recipe(name)).metadata or {}
        table.add_row(name, escape(str(metadata.get('title', ''))))
    console.print(table)
    return 0

def cmd_actions(args, config: RecipeConfig) -> int:
    actions = make_interpreter(config).actions
    if args.json:
        dump_json([{'name': a.name, 'min_args': a.min_args, 'max_args': a.max_args,
                    'category': a.category, 'description': a.description}
                   for a in actions.values()], config)
    else:
        render_actions(console, actions)
    return 0

def cmd_repl(args, config: RecipeConfig) -> int:
    REPL(console, make_interpreter(config)).run()
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='recipescript', description='Recipe Script interpreter')
    parser.add_argument('--version', action='version', version=f'recipescript {__version__}')
    parser.add_argument('--config', help='Path to a JSON, TOML or YAML config file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.set_defaults(func=cmd_repl)

    commands = parser.add_subparsers(dest='command')

    run = commands.add_parser('run', help='Run a recipe and show its outputs')
    run.add_argument('file', help='Recipe file, or demo:<name>')
    run.add_argument('--set', action='append', type=parse_assignment, metavar='NAME=VALUE',
                     help='Change a variable before showing the result (repeatable)')
    run.add_argument('--json', action='store_true', help='Print the result as JSON')
    run.set_defaults(func=cmd_run)

    tokens = commands.add_parser('tokens', help='Show the token stream')
    tokens.add_argument('file')
    tokens.add_argument('--json', action='store_true')
    tokens.set_defaults(func=cmd_tokens)

    ast = commands.add_parser('ast', help='Show the syntax tree')
    ast.add_argument('file')
    ast.add_argument('--json', action='store_true')
    ast.set_defaults(func=cmd_ast)

    set_cmd = commands.add_parser('set', help='Rewrite one variable declaration')
    set_cmd.add_argument('file')
    set_cmd.add_argument('name')
    set_cmd.add_argument('value', type=parse_number)
    set_cmd.add_argument('--write', action='store_true', help='Write the change back to FILE')
    set_cmd.set_defaults(func=cmd_set)

    demos = commands.add_parser('demos', help='List or print bundled demo recipes')
    demos.add_argument('name', nargs='?')
    demos.set_defaults(func=cmd_demos)

    actions = commands.add_parser('actions', help='List the built-in actions')
    actions.add_argument('--json', action='store_true')
    actions.set_defaults(func=cmd_actions)

    repl = commands.add_parser('repl', help='Start the interactive editor')
    repl.set_defaults(func=cmd_repl)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging('DEBUG' if args.debug else 'WARNING')

    try:
        config = load_config(args.config)
    except ConfigError as error:
        console.print(f"[red]Config error: {escape(str(error))}[/red]")
        return 1
    if not args.debug:
        configure_logging(config.log_level)
    logger.debug("Using config %s", config.path or "defaults")

    try:
        return args.func(args, config)
    except FileNotFoundError as error:
        console.print(f"[red]Error: File '{escape(str(error.filename))}' not found[/red]")
    except KeyError as error:
        console.print(f"[red]Error: {escape(str(error.args[0]))}[/red]")
    except RecipeError as error:
        console.print(f"[red]Error: {escape(str(error))}[/red]")
    return 1

if __name__ == '__main__':
    sys.exit(main())
