"""
Recipe Script REPL
Interactive editor: every entered line re-runs the whole recipe
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from .ast_nodes import pretty_print_ast
from .engine import parse_source
from .errors import RecipeSyntaxError
from .interpreter import Interpreter
from .reactive import RecipeSession
from .recipes import list_demo_recipes, load_demo_recipe
from .render import MESSAGE_STYLES, render_actions, render_result, render_source, render_variables

HELP_TEXT = """
Recipe Script REPL Help

Type recipe lines; each one is appended to the script and the whole
recipe runs again. Only the output of the new line is shown.

Commands:
  :help               - Show this help
  :show               - Show the full recipe output
  :source             - List the script with line numbers
  :vars               - Show the current variables
  :actions            - List the built-in actions
  :set NAME VALUE     - Change a variable and rewrite its declaration
  :undo               - Remove the last line
  :load NAME          - Replace the script with a bundled demo
  :demos              - List bundled demos
  :reset              - Start an empty script
  :debug on/off       - Show the syntax tree after each line
  exit, quit          - Exit the REPL

help() inside a script prints the recipe syntax guide.
"""

class REPL:
    def __init__(self, console: Optional[Console] = None, interpreter: Optional[Interpreter] = None,
                 debug: bool = False):
        self.console = console or Console()
        self.session = RecipeSession(interpreter=interpreter)
        self.lines = []
        self.debug = debug
        self.prompt = "recipe> "

    def run(self):
        """Start the REPL"""
        self.console.print("[bold]Recipe Script[/bold] interactive editor")
        self.console.print("Type ':help' for help, 'exit' to quit.")
        self.console.print()

        while True:
            try:
                line = input(self.prompt)
            except KeyboardInterrupt:
                self.console.print("\nKeyboardInterrupt")
                continue
            except EOFError:
                self.console.print("\nGoodbye!")
                break

            if not self.handle_line(line):
                self.console.print("Goodbye!")
                break

    def handle_line(self, line: str) -> bool:
        """Process one line of input; returns False when the user asked to exit"""
        stripped = line.strip()
        if stripped in ('exit', 'quit'):
            return False
        if stripped.startswith(':'):
            self.run_command(stripped[1:].split())
        elif stripped:
            self.append_line(line)
        return True

    @property
    def source(self) -> str:
        return '\n'.join(self.lines)

    def append_line(self, line: str):
        candidate = self.lines + [line]
        try:
            program = parse_source('\n'.join(candidate))
        except RecipeSyntaxError as error:
            self.console.print(f"[red]Parse error: {escape(str(error))}[/red]")
            return

        seen = len(self.session.result.console_messages)
        self.lines = candidate
        result = self.refresh()
        for message in result.console_messages[seen:]:
            style = MESSAGE_STYLES.get(message.type, '')
            self.console.print(escape(message.message), style=style, highlight=False)

        if self.debug:
            self.console.print(escape(pretty_print_ast(program.body[-1:])), highlight=False)

    def refresh(self):
        return self.session.update_code(self.source)

    def run_command(self, parts):
        if not parts:
            return
        command, args = parts[0].lower(), parts[1:]

        if command == 'help':
            self.console.print(HELP_TEXT)
        elif command == 'show':
            render_result(self.console, self.session.result)
        elif command == 'source':
            render_source(self.console, self.source)
        elif command == 'vars':
            render_variables(self.console, self.session.result)
        elif command == 'actions':
            render_actions(self.console, self.session.interpreter.actions)
        elif command == 'set':
            self.set_variable(args)
        elif command == 'undo':
            if self.lines:
                self.lines.pop()
                self.refresh()
        elif command == 'load':
            self.load(args)
        elif command == 'demos':
            self.console.print(', '.join(list_demo_recipes()))
        elif command == 'reset':
            self.lines = []
            self.refresh()
            self.console.print("Script cleared")
        elif command == 'debug':
            if args and args[0] in ('on', 'off'):
                self.debug = args[0] == 'on'
            self.console.print(f"Debug mode {'enabled' if self.debug else 'disabled'}")
        else:
            self.console.print(f"[red]Unknown command ':{escape(command)}'. Type ':help' for help.[/red]")

    def set_variable(self, args):
        if len(args) != 2:
            self.console.print("[red]Usage: :set NAME VALUE[/red]")
            return
        name, text = args
        try:
            value = float(text)
        except ValueError:
            self.console.print(f"[red]'{escape(text)}' is not a number[/red]")
            return
        if name not in self.session.variables:
            self.console.print(f"[red]Unknown variable '{escape(name)}'[/red]")
            return

        result = self.session.update_variable(name, int(value) if value.is_integer() else value)
        self.lines = self.session.source.split('\n')
        render_result(self.console, result)

    def load(self, args):
        if len(args) != 1:
            self.console.print("[red]Usage: :load NAME[/red]")
            return
        try:
            source = load_demo_recipe(args[0])
        except KeyError as error:
            self.console.print(f"[red]{escape(str(error.args[0]))}[/red]")
            return
        self.lines = source.split('\n')
        render_result(self.console, self.refresh(), title=args[0])
