#!/usr/bin/env python3
"""
Recipe Script Tests
Test suite for frontmatter, lexer, parser, interpreter and reactive updates
"""

import unittest
import sys
from pathlib import Path

# Add src directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from recipescript.lexer import Lexer, TokenType
from recipescript.parser import Parser
from recipescript.interpreter import Environment, Interpreter
from recipescript.engine import parse_source, run_recipe
from recipescript.errors import LexError, ParseError, RecipeRuntimeError
from recipescript.frontmatter import extract_frontmatter, sanitize
from recipescript.reactive import RecipeSession, apply_variable_change, rerun_with_change
from recipescript.recipe import MessageType, ResourceType, Severity, StepType, Variable
from recipescript.recipes import list_demo_recipes, load_demo_recipe
from recipescript.actions import round_amount, to_seconds
from recipescript.ast_nodes import *

def parse(source):
    return Parser(Lexer(source).tokenize()).parse()

class TestLexer(unittest.TestCase):

    def test_numbers(self):
        tokens = Lexer("42 3.14 0").tokenize()

        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].value, 42)
        self.assertIsInstance(tokens[0].value, int)
        self.assertEqual(tokens[1].value, 3.14)
        self.assertEqual(tokens[2].value, 0)

    def test_strings(self):
        tokens = Lexer('"flour" \'milk\' "say \\"cheese\\""').tokenize()

        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual(tokens[0].value, "flour")
        self.assertEqual(tokens[1].value, "milk")
        self.assertEqual(tokens[2].value, 'say "cheese"')

    def test_keywords_and_identifiers(self):
        tokens = Lexer("let const servings _tmp2").tokenize()

        expected_types = [TokenType.LET, TokenType.CONST, TokenType.IDENTIFIER, TokenType.IDENTIFIER]
        for i, expected_type in enumerate(expected_types):
            self.assertEqual(tokens[i].type, expected_type)
        self.assertEqual(tokens[3].value, "_tmp2")

    def test_operators_and_punctuation(self):
        tokens = Lexer("+ - * / = ( ) , ;").tokenize()

        expected_types = [
            TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
            TokenType.ASSIGN, TokenType.LPAREN, TokenType.RPAREN, TokenType.COMMA,
            TokenType.SEMICOLON, TokenType.EOF,
        ]
        self.assertEqual([token.type for token in tokens], expected_types)

    def test_comments(self):
        tokens = Lexer('// Dry ingredients\nlet x = 42 // grams').tokenize()

        self.assertEqual(tokens[0].type, TokenType.COMMENT)
        self.assertEqual(tokens[0].value, "Dry ingredients")
        self.assertEqual(tokens[1].type, TokenType.NEWLINE)
        self.assertEqual(tokens[2].type, TokenType.LET)
        self.assertEqual(tokens[-2].type, TokenType.COMMENT)
        self.assertEqual(tokens[-2].value, "grams")

    def test_line_and_column(self):
        tokens = Lexer('let a = 1;\n  add("x", 2);').tokenize()
        add = [token for token in tokens if token.value == "add"][0]

        self.assertEqual(add.line, 2)
        self.assertEqual(add.column, 3)

    def test_starting_line(self):
        tokens = Lexer("mix()", line=7).tokenize()
        self.assertEqual(tokens[0].line, 7)

    def test_unknown_characters_skipped(self):
        tokens = Lexer("let x = 5 @ # $").tokenize()

        self.assertEqual(
            [token.type for token in tokens],
            [TokenType.LET, TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.NUMBER, TokenType.EOF],
        )

    def test_unterminated_string(self):
        with self.assertRaises(LexError) as caught:
            Lexer('mix();\nadd("flour, 2);').tokenize()

        self.assertEqual(caught.exception.line, 2)
        self.assertEqual(caught.exception.column, 5)

class TestParser(unittest.TestCase):

    def test_variable_declaration(self):
        program = parse("let servings = 4;")
        decl = program.body[0]

        self.assertIsInstance(decl, VariableDeclaration)
        self.assertEqual(decl.name, "servings")
        self.assertEqual(decl.kind, "let")
        self.assertEqual(decl.value, Literal(4, 'number', line=1))
        self.assertEqual(decl.line, 1)

    def test_const_declaration(self):
        decl = parse("const temp = 180").body[0]
        self.assertEqual(decl.kind, "const")

    def test_precedence(self):
        expr = parse("let x = 1 + 2 * 3;").body[0].value

        self.assertIsInstance(expr, BinaryExpression)
        self.assertEqual(expr.operator, "+")
        self.assertIsInstance(expr.right, BinaryExpression)
        self.assertEqual(expr.right.operator, "*")

    def test_grouping(self):
        expr = parse("let x = (1 + 2) * 3;").body[0].value

        self.assertEqual(expr.operator, "*")
        self.assertEqual(expr.left.operator, "+")

    def test_left_associative(self):
        expr = parse("let x = 8 - 2 - 1;").body[0].value

        self.assertEqual(expr.operator, "-")
        self.assertIsInstance(expr.left, BinaryExpression)
        self.assertEqual(expr.right, Literal(1, 'number', line=1))

    def test_function_call(self):
        call = parse('add("flour", 200 * servings, "grams")').body[0]

        self.assertIsInstance(call, FunctionCall)
        self.assertEqual(call.name, "add")
        self.assertEqual(len(call.arguments), 3)
        self.assertIsInstance(call.arguments[1], BinaryExpression)
        self.assertIsInstance(call.arguments[1].right, Identifier)

    def test_call_without_arguments(self):
        call = parse("flip();").body[0]
        self.assertEqual(call.arguments, [])

    def test_comments_and_lines(self):
        program = parse("// Prep\n\nmix();\nserve();")

        self.assertIsInstance(program.body[0], Comment)
        self.assertEqual(program.body[0].text, "Prep")
        self.assertEqual([stmt.line for stmt in program.body], [1, 3, 4])

    def test_stray_tokens_skipped(self):
        program = parse('5; servings\nadd("egg", 1);')

        self.assertEqual(len(program.body), 1)
        self.assertEqual(program.body[0].name, "add")

    def test_missing_closing_paren_at_end(self):
        with self.assertRaises(ParseError) as caught:
            parse('let a = 1;\nadd("flour", 200')

        self.assertEqual(caught.exception.line, 2)
        self.assertIn("Expected ')'", caught.exception.message)

    def test_missing_variable_name(self):
        with self.assertRaises(ParseError) as caught:
            parse("let = 5;")

        self.assertIn("Expected variable name", str(caught.exception))

    def test_ast_to_dict(self):
        data = ast_to_dict(parse("let x = 2;"))

        self.assertEqual(data['type'], 'Program')
        self.assertEqual(data['body'][0]['type'], 'VariableDeclaration')
        self.assertEqual(data['body'][0]['value']['value'], 2)

class TestFrontmatter(unittest.TestCase):

    SOURCE = (
        "---\n"
        "title: \"Pancakes\"\n"
        "servings: 4\n"
        "tags: [breakfast, 'quick', ]\n"
        "---\n"
        "let servings = 4;\n"
    )

    def test_extract(self):
        frontmatter = extract_frontmatter(self.SOURCE)

        self.assertEqual(frontmatter.metadata, {
            'title': 'Pancakes',
            'servings': 4,
            'tags': ['breakfast', 'quick'],
        })
        self.assertEqual(frontmatter.remainder, "let servings = 4;\n")
        self.assertEqual(frontmatter.line_offset, 5)

    def test_no_frontmatter(self):
        frontmatter = extract_frontmatter("let x = 1;")

        self.assertIsNone(frontmatter.metadata)
        self.assertEqual(frontmatter.remainder, "let x = 1;")
        self.assertEqual(frontmatter.line_offset, 0)

    def test_sanitized_values(self):
        frontmatter = extract_frontmatter("---\ntitle: <b>Hi</b>\n---\n")
        self.assertEqual(frontmatter.metadata['title'], '&lt;b&gt;Hi&lt;&#x2F;b&gt;')
        self.assertEqual(sanitize("it's"), "it&#x27;s")

    def test_non_numeric_servings(self):
        frontmatter = extract_frontmatter("---\nservings: a few\n---\n")
        self.assertEqual(frontmatter.metadata['servings'], 'a few')

    def test_lines_stay_physical(self):
        program = parse_source(self.SOURCE)
        self.assertEqual(program.body[0].line, 6)
        self.assertEqual(program.metadata['title'], 'Pancakes')

class TestInterpreter(unittest.TestCase):

    def run_source(self, source, variables=None, **kwargs):
        return run_recipe(source, variables, Interpreter(**kwargs))

    def test_add_ingredient(self):
        result = self.run_source('add("flour", 200, "grams");')
        ingredient = result.ingredients[0]

        self.assertEqual(ingredient.name, "flour")
        self.assertEqual(ingredient.amount, 200)
        self.assertEqual(ingredient.unit, "grams")
        self.assertEqual(ingredient.line, 1)
        self.assertEqual(ingredient.glyph, '🌾')
        self.assertEqual(result.steps[0].type, StepType.ADD)
        self.assertEqual(result.steps[0].description, "Add 200 grams flour")
        self.assertEqual(result.console_messages[0].message, "Added 200 grams flour")
        self.assertEqual(result.errors, [])

    def test_variable_scaling(self):
        result = self.run_source('let servings = 4;\nadd("flour", 200 * servings, "grams");')

        self.assertEqual(result.ingredients[0].amount, 800)
        self.assertEqual(result.variables['servings'], Variable('servings', 4, 1))
        self.assertEqual(result.console_messages[0].type, MessageType.VARIABLE)
        self.assertEqual(result.console_messages[0].message, "Variable servings = 4")

    def test_injected_variable_wins(self):
        result = self.run_source('let servings = 4;\nadd("flour", 200 * servings, "grams");', {'servings': 6})

        self.assertEqual(result.ingredients[0].amount, 1200)
        self.assertEqual(result.console_messages[0].message, "Variable servings = 6")
        self.assertEqual(result.variables['servings'].line, 1)

    def test_timer_step(self):
        step = self.run_source('cook(1, "minutes");').steps[0]

        self.assertEqual(step.type, StepType.COOK)
        self.assertTrue(step.is_timer_step)
        self.assertEqual(step.duration, 60)
        self.assertEqual(step.duration_unit, "minutes")

    def test_timer_defaults_and_units(self):
        result = self.run_source('bake(1, "hour");\nrest(10);\nsimmer(30, "seconds", "gently");')

        self.assertEqual([step.duration for step in result.steps], [3600, 600, 30])
        self.assertEqual(result.steps[1].duration_unit, "minutes")
        self.assertEqual(result.steps[2].description, "Simmer for 30 seconds - gently")
        self.assertEqual(len(result.timer_steps), 3)

    def test_missing_argument(self):
        result = self.run_source('mix();\nadd("flour");\nserve("warm");')

        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].line, 2)
        self.assertEqual(result.errors[0].message, "add() requires at least 2 arguments: name and amount")
        self.assertEqual(result.ingredients, [])
        self.assertEqual([step.type for step in result.steps], [StepType.MIX, StepType.SERVE])
        self.assertFalse(result.ok)

    def test_error_paired_with_console_message(self):
        result = self.run_source('cook();')
        errors = [m for m in result.console_messages if m.type == MessageType.ERROR]

        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].message, "Error: cook() requires duration argument")
        self.assertEqual(errors[0].line, 1)

    def test_division_by_zero(self):
        result = self.run_source('let x = 5 / 0;')
        self.assertEqual(result.variables['x'].value, 0)
        self.assertEqual(result.errors, [])

    def test_integral_results_normalized(self):
        result = self.run_source('let x = 6 / 2;\nlet y = 1 / 4;')

        self.assertIsInstance(result.variables['x'].value, int)
        self.assertEqual(result.variables['y'].value, 0.25)

    def test_undefined_variable(self):
        result = self.run_source('add("flour", grams);\nflip();')

        self.assertEqual(result.errors[0].message, "Error executing add(): Undefined variable: grams")
        self.assertEqual(len(result.steps), 1)

    def test_string_variable_rejected(self):
        result = self.run_source('let name = "pancakes";')

        self.assertEqual(result.errors[0].message, "Variable name must be a number, got str")
        self.assertNotIn('name', result.variables)

    def test_numeric_string_arguments(self):
        result = self.run_source('add("milk", "250", "ml");\nadd("salt", "lots");')

        self.assertEqual(result.ingredients[0].amount, 250)
        self.assertEqual(result.errors[0].message, "Error executing add(): amount must be a number, got 'lots'")
        self.assertEqual(result.errors[0].line, 2)

    def test_amount_rounding(self):
        result = self.run_source('add("salt", 1 / 3);\nadd("pepper", 0.125);')

        self.assertEqual(result.ingredients[0].amount, 0.33)
        self.assertEqual(result.ingredients[1].amount, 0.13)
        self.assertEqual(round_amount(2.0), 2)

    def test_unknown_action_is_generic_step(self):
        result = self.run_source('whisk("eggs", 2);')

        self.assertEqual(result.steps[0].type, StepType.OTHER)
        self.assertEqual(result.steps[0].description, "whisk(eggs, 2)")
        self.assertEqual(result.errors, [])

    def test_extra_arguments_warn(self):
        result = self.run_source('flip("twice");\nserve("warm", "now");')

        self.assertTrue(result.ok)
        self.assertEqual(len(result.steps), 2)
        self.assertEqual([e.severity for e in result.errors], [Severity.WARNING, Severity.WARNING])
        self.assertEqual([e.line for e in result.errors], [1, 2])
        self.assertIn("flip() takes at most 0 arguments", result.errors[0].message)
        warnings = [m for m in result.console_messages if m.type == MessageType.WARNING]
        self.assertEqual(len(warnings), 2)

    def test_action_names_case_insensitive(self):
        result = self.run_source('ADD("flour", 1);\nIngredient("egg", 2);')
        self.assertEqual([i.name for i in result.ingredients], ["flour", "egg"])

    def test_preparation_defaults(self):
        result = self.run_source('mix();\nstir();\npour();\nseason();\nserve();')

        self.assertEqual(
            [step.description for step in result.steps],
            ["Mix ingredients", "Stir continuously", "Pour mixture", "Season to taste", "Serve the dish"],
        )
        self.assertEqual(result.console_messages[-1].type, MessageType.SUCCESS)
        self.assertEqual(result.console_messages[-1].message, "Serving the dish!")

    def test_resources(self):
        result = self.run_source(
            'image("Finished Pancakes", "https://example.com/stack", "Golden");\n'
            'resource("Knife skills", "https://youtu.be/abc");\n'
            'resource("Batter", "https://example.com/batter.PNG?w=800");\n'
            'resource("Blog", "https://example.com/post");'
        )

        self.assertEqual(
            [r.type for r in result.resources],
            [ResourceType.IMAGE, ResourceType.VIDEO, ResourceType.IMAGE, ResourceType.LINK],
        )
        self.assertEqual(result.resources[0].id, "resource-1-finished-pancakes")
        self.assertEqual(result.resources[0].description, "Golden")
        self.assertIsNone(result.resources[1].description)

    def test_help(self):
        result = self.run_source('\nhelp();')

        self.assertEqual(result.console_messages[0].type, MessageType.INFO)
        self.assertIn("Recipe Script Syntax Guide", result.console_messages[0].message)
        self.assertEqual(result.console_messages[0].line, 2)

    def test_call_as_value(self):
        result = self.run_source('let x = flip();')
        self.assertEqual(result.variables['x'].value, 0)

    def test_message_ids_sequential(self):
        result = self.run_source('let a = 1;\nmix();\nadd("x");')
        self.assertEqual([m.id for m in result.console_messages], ["msg-0", "msg-1", "msg-2"])

    def test_custom_glyphs_and_clock(self):
        result = self.run_source('add("Tofu", 1);\nadd("okra", 2);', glyphs={'tofu': '🧊'},
                                 default_glyph='*', clock=lambda: 42.0)

        self.assertEqual([i.glyph for i in result.ingredients], ['🧊', '*'])
        self.assertTrue(all(m.timestamp == 42.0 for m in result.console_messages))

    def test_deterministic(self):
        source = load_demo_recipe('pancakes')
        self.assertEqual(run_recipe(source), run_recipe(source))

    def test_environment_rejects_non_numbers(self):
        with self.assertRaises(TypeError):
            Environment({'servings': 'four'})
        with self.assertRaises(RecipeRuntimeError):
            Environment().get('missing')

    def test_to_seconds(self):
        self.assertEqual(to_seconds(2, "Minutes"), 120)
        self.assertEqual(to_seconds(45, "sec"), 45)

    def test_to_dict(self):
        data = self.run_source('let servings = 2;\ncook(1);').to_dict()

        self.assertEqual(data['variables'], [{'name': 'servings', 'value': 2, 'line': 1}])
        self.assertEqual(data['steps'][0]['type'], 'cook')
        self.assertEqual(data['console_messages'][0]['type'], 'variable')

class TestSyntaxErrors(unittest.TestCase):

    def assert_aborted(self, result, line):
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].line, line)
        self.assertEqual(result.ingredients, [])
        self.assertEqual(result.steps, [])
        self.assertEqual(result.resources, [])
        self.assertEqual(result.variables, {})
        self.assertEqual(len(result.console_messages), 1)
        self.assertEqual(result.console_messages[0].type, MessageType.ERROR)
        self.assertTrue(result.console_messages[0].message.startswith("Parse error: "))

    def test_unterminated_string(self):
        result = run_recipe('let servings = 4;\nadd("flour, 200, "grams");\nmix();')
        self.assert_aborted(result, 2)

    def test_unmatched_parenthesis(self):
        result = run_recipe('add("flour", 200, "grams");\nmix("until smooth"')
        self.assert_aborted(result, 2)

    def test_metadata_survives_syntax_error(self):
        result = run_recipe('---\ntitle: Broken\n---\nadd("flour", 200')

        self.assert_aborted(result, 4)
        self.assertEqual(result.metadata, {'title': 'Broken'})

    def test_overlong_number_literal(self):
        result = run_recipe('add("flour", ' + '9' * 5000 + ', "g");')

        self.assert_aborted(result, 1)
        self.assertIn("Number literal too long", result.errors[0].message)

class TestReactive(unittest.TestCase):

    SOURCE = 'let servings = 4; // people\nadd("flour", 200 * servings, "grams");'

    def test_apply_variable_change(self):
        updated = apply_variable_change(self.SOURCE, 'servings', 6, 1)
        self.assertEqual(updated.split('\n')[0], 'let servings = 6; // people')

    def test_decimal_value(self):
        updated = apply_variable_change('const ratio = 1.5', 'ratio', 2.25, 1)
        self.assertEqual(updated, 'const ratio = 2.25')

    def test_float_value_keeps_precision(self):
        self.assertEqual(apply_variable_change('let x = 1;', 'x', 0.1 + 0.2, 1), 'let x = 0.30000000000000004;')
        self.assertEqual(apply_variable_change('let x = 1;', 'x', 1e-07, 1), 'let x = 0.0000001;')

    def test_skipped_rewrite_is_logged(self):
        with self.assertLogs('recipescript.reactive', 'INFO') as logs:
            apply_variable_change(self.SOURCE, 'servings', 6, 9)
            apply_variable_change(self.SOURCE, 'servings', float('nan'), 1)
        self.assertIn("line 9 is outside the source", logs.output[0])
        self.assertIn("no literal for nan", logs.output[1])

    def test_non_matching_line_unchanged(self):
        source = 'let servings = 2 * 2;\nadd("flour", 200 * servings, "grams");'

        self.assertEqual(apply_variable_change(source, 'servings', 6, 1), source)
        self.assertEqual(apply_variable_change(source, 'servings', 6, 9), source)
        self.assertEqual(apply_variable_change(source, 'servings', -1, 1), source)

        new_source, variables, result = rerun_with_change(
            source, {'servings': Variable('servings', 4, 1)}, 'servings', 6)
        self.assertEqual(new_source, source)
        self.assertEqual(result.ingredients[0].amount, 1200)
        self.assertEqual(variables['servings'].value, 6)

    def test_rerun_with_change(self):
        result = run_recipe(self.SOURCE)
        new_source, variables, new_result = rerun_with_change(self.SOURCE, result.variables, 'servings', 6)

        self.assertIn('let servings = 6;', new_source)
        self.assertEqual(new_result.ingredients[0].amount, 1200)
        self.assertEqual(variables['servings'], Variable('servings', 6, 1))

    def test_rerun_errors(self):
        variables = {'servings': Variable('servings', 4, 1)}
        with self.assertRaises(KeyError):
            rerun_with_change(self.SOURCE, variables, 'spice', 2)
        with self.assertRaises(TypeError):
            rerun_with_change(self.SOURCE, variables, 'servings', '6')

    def test_session(self):
        session = RecipeSession(self.SOURCE)
        self.assertEqual(session.result.ingredients[0].amount, 800)

        session.update_variable('servings', 2)
        self.assertTrue(session.source.startswith('let servings = 2;'))
        self.assertEqual(session.result.ingredients[0].amount, 400)

        session.update_code('let servings = 1;\nadd("egg", servings);')
        self.assertEqual(session.variables['servings'].value, 1)
        self.assertEqual(session.result.ingredients[0].name, "egg")

    def test_session_after_syntax_error(self):
        session = RecipeSession(self.SOURCE)
        session.update_code('add("flour"')

        self.assertEqual(session.variables, {})
        self.assertEqual(len(session.result.errors), 1)

class TestIntegration(unittest.TestCase):

    def test_demos_run_clean(self):
        self.assertEqual(list_demo_recipes(), ['broccoli-fusilli', 'cookies', 'pancakes', 'spaghetti'])
        for name in list_demo_recipes():
            with self.subTest(recipe=name):
                result = run_recipe(load_demo_recipe(name))
                self.assertEqual(result.errors, [])
                self.assertTrue(result.ingredients)
                self.assertEqual(len(result.timer_steps), 3)
                self.assertEqual(result.steps[-1].type, StepType.SERVE)

    def test_pancakes(self):
        result = run_recipe(load_demo_recipe('pancakes'))
        flour = result.ingredients[0]

        self.assertEqual(result.metadata['title'], 'Classic Pancakes')
        self.assertEqual(result.metadata['servings'], 4)
        self.assertEqual(flour.amount, 800)
        self.assertEqual(flour.line, 19)
        self.assertEqual(len(result.resources), 2)
        self.assertEqual(result.resources[0].type, ResourceType.IMAGE)

    def test_pancakes_rescaled(self):
        session = RecipeSession(load_demo_recipe('pancakes'))
        session.update_variable('servings', 2)

        self.assertIn('\nlet servings = 2;\n', session.source)
        self.assertEqual(session.result.ingredients[0].amount, 400)
        self.assertEqual(session.result.ingredients[0].line, 19)

    def test_cookies_batch(self):
        session = RecipeSession(load_demo_recipe('cookies'))
        self.assertEqual(session.result.ingredients[0].amount, 280)

        session.update_variable('servings', 48)
        amounts = {i.name: i.amount for i in session.result.ingredients}
        self.assertEqual(amounts['flour'], 560)
        self.assertEqual(amounts['egg'], 4)

    def test_broccoli_without_frontmatter(self):
        result = run_recipe(load_demo_recipe('broccoli-fusilli'))

        self.assertIsNone(result.metadata)
        self.assertEqual(result.ingredients[0].line, 8)
        self.assertEqual(result.ingredients[0].amount, 500)
        self.assertEqual(result.resources[0].type, ResourceType.VIDEO)

    def test_unknown_demo(self):
        with self.assertRaises(KeyError):
            load_demo_recipe('lasagne')

if __name__ == '__main__':
    unittest.main()
