"""
Recipe Script Standard Actions
Built-in cooking verbs callable from recipe scripts
"""

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Union

from ..errors import RecipeRuntimeError
from ..recipe import (
    Ingredient,
    MessageType,
    Number,
    Resource,
    ResourceType,
    Step,
    StepType,
    format_number,
)

if TYPE_CHECKING:
    from ..interpreter import ExecutionContext

Value = Union[int, float, str]
ActionHandler = Callable[['ExecutionContext', str, List[Value], int], None]

@dataclass
class ActionSpec:
    name: str
    handler: ActionHandler
    min_args: int = 0
    max_args: Optional[int] = None
    category: str = 'action'  # ingredient, action, timer, media, output
    description: str = ''
    requires: str = ''

DEFAULT_GLYPH = '🍽️'

INGREDIENT_GLYPHS: Dict[str, str] = {
    'flour': '🌾',
    'egg': '🥚',
    'eggs': '🥚',
    'milk': '🥛',
    'sugar': '🍚',
    'salt': '🧂',
    'butter': '🧈',
    'water': '💧',
    'oil': '🫒',
    'cheese': '🧀',
    'tomato': '🍅',
    'onion': '🧅',
    'garlic': '🧄',
    'pasta': '🍝',
    'spaghetti': '🍝',
    'chicken': '🍗',
    'beef': '🥩',
    'fish': '🐟',
    'shrimp': '🦐',
    'rice': '🍚',
    'bread': '🍞',
    'chocolate': '🍫',
    'vanilla': '🌼',
    'cinnamon': '🥢',
    'pepper': '🌶️',
    'lemon': '🍋',
    'apple': '🍎',
    'banana': '🍌',
    'strawberry': '🍓',
    'carrot': '🥕',
    'potato': '🥔',
    'spinach': '🥬',
    'broccoli': '🥦',
    'mushroom': '🍄',
    'honey': '🍯',
    'yeast': '🧪',
}

VIDEO_HOSTS = ('youtube.com', 'youtu.be', 'vimeo.com')
IMAGE_URL_RE = re.compile(r'\.(jpg|jpeg|png|gif|webp|svg)(\?|$)', re.IGNORECASE)

HELP_TEXT = """
Recipe Script Syntax Guide

VARIABLES
  let servings = 4;
  const temp = 180;

INGREDIENTS
  add("flour", 200, "grams");
  add("milk", 300 * servings, "ml");
  ingredient("egg", 2);  // alias for add()

STEPS
  step("Any custom instruction");
  mix("until smooth");
  pour("wet into dry mixture");
  stir("for 30 seconds");
  season("with salt and pepper");
  flip();

TIMING
  cook(3, "minutes");
  bake(25, "minutes");
  simmer(5, "minutes", "until thick");
  rest(10, "minutes");

MEDIA
  image("Name", "url", "description");
  video("Tutorial", "youtube.com/...", "optional");
  resource("Reference", "url");

SERVING
  serve("warm with maple syrup");

Timed actions (cook, bake, simmer, rest, wait) become timer steps.
"""

# Helpers
def to_text(value: Value) -> str:
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)

def to_number(value: Value, what: str) -> Number:
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        raise RecipeRuntimeError(f"{what} must be a number, got '{value}'")
    if not math.isfinite(number):
        raise RecipeRuntimeError(f"{what} must be a finite number, got '{value}'")
    return int(number) if number.is_integer() else number

def round_amount(amount: Number) -> Number:
    """Round half-up to two decimals"""
    rounded = math.floor(amount * 100 + 0.5) / 100
    return int(rounded) if float(rounded).is_integer() else rounded

def to_seconds(duration: Number, unit: str) -> Number:
    unit = unit.lower()
    if 'min' in unit:
        return duration * 60
    if 'hour' in unit:
        return duration * 3600
    return duration

def slugify(name: str) -> str:
    return re.sub(r'\s+', '-', name.lower())

def glyph_for(name: str, glyphs: Optional[Dict[str, str]] = None, default: str = DEFAULT_GLYPH) -> str:
    table = INGREDIENT_GLYPHS if glyphs is None else glyphs
    return table.get(name.lower(), default)

def _with_unit(amount: Number, unit: str) -> str:
    return f"{format_number(amount)} {unit}" if unit else format_number(amount)

# Ingredient actions
def action_add(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    ingredient_name = to_text(args[0])
    amount = round_amount(to_number(args[1], 'amount'))
    unit = to_text(args[2]) if len(args) > 2 else ''

    ctx.result.ingredients.append(Ingredient(
        name=ingredient_name,
        amount=amount,
        unit=unit,
        line=line,
        glyph=ctx.glyph_for(ingredient_name),
    ))
    ctx.add_step(StepType.ADD, f"Add {_with_unit(amount, unit)} {ingredient_name}", line)
    ctx.add_console_message(MessageType.INFO, f"Added {_with_unit(amount, unit)} {ingredient_name}", line)

# Preparation actions: (step type, verb, progressive, default description)
PREPARATIONS = {
    'mix': (StepType.MIX, 'Mix', 'Mixing', 'ingredients'),
    'stir': (StepType.OTHER, 'Stir', 'Stirring', 'continuously'),
    'pour': (StepType.OTHER, 'Pour', 'Pouring', 'mixture'),
    'season': (StepType.OTHER, 'Season', 'Seasoning', 'to taste'),
}

def action_prepare(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    step_type, verb, progressive, default = PREPARATIONS[name]
    description = to_text(args[0]) if args else default

    ctx.add_step(step_type, f"{verb} {description}", line)
    ctx.add_console_message(MessageType.INFO, f"{progressive} {description}...", line)

# Timer actions: (step type, verb, progressive)
COOKING = {
    'cook': (StepType.COOK, 'Cook', 'Cooking'),
    'bake': (StepType.BAKE, 'Bake', 'Baking'),
    'simmer': (StepType.SIMMER, 'Simmer', 'Simmering'),
}

def action_cook(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    step_type, verb, progressive = COOKING[name]
    duration = to_number(args[0], 'duration')
    unit = to_text(args[1]) if len(args) > 1 else 'minutes'
    note = to_text(args[2]) if len(args) > 2 else ''
    suffix = f" - {note}" if note else ''

    ctx.add_step(
        step_type,
        f"{verb} for {format_number(duration)} {unit}{suffix}",
        line,
        duration=to_seconds(duration, unit),
        duration_unit=unit,
    )
    ctx.add_console_message(MessageType.INFO, f"{progressive} for {format_number(duration)} {unit}{suffix}...", line)

def action_rest(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    duration = to_number(args[0], 'duration')
    unit = to_text(args[1]) if len(args) > 1 else 'minutes'

    ctx.add_step(
        StepType.REST,
        f"Let rest for {format_number(duration)} {unit}",
        line,
        duration=to_seconds(duration, unit),
        duration_unit=unit,
    )
    ctx.add_console_message(MessageType.INFO, f"Resting for {format_number(duration)} {unit}...", line)

# Finishing actions
def action_serve(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    description = to_text(args[0]) if args else 'the dish'
    ctx.add_step(StepType.SERVE, f"Serve {description}", line)
    ctx.add_console_message(MessageType.SUCCESS, f"Serving {description}!", line)

def action_flip(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    ctx.add_step(StepType.FLIP, 'Flip', line)
    ctx.add_console_message(MessageType.INFO, 'Flipping...', line)

def action_step(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    description = to_text(args[0])
    ctx.add_step(StepType.OTHER, description, line)
    ctx.add_console_message(MessageType.INFO, f"Step: {description}", line)

# Media
def resource_type(name: str, url: str) -> ResourceType:
    if name == 'video':
        return ResourceType.VIDEO
    if name == 'image':
        return ResourceType.IMAGE
    if any(host in url for host in VIDEO_HOSTS):
        return ResourceType.VIDEO
    if IMAGE_URL_RE.search(url):
        return ResourceType.IMAGE
    return ResourceType.LINK

def action_resource(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    title = to_text(args[0])
    url = to_text(args[1])
    description = to_text(args[2]) if len(args) > 2 else None
    kind = resource_type(name, url)

    ctx.result.resources.append(Resource(
        id=f"resource-{line}-{slugify(title)}",
        type=kind,
        name=title,
        url=url,
        line=line,
        description=description,
    ))
    ctx.add_console_message(MessageType.INFO, f"Added {kind.value}: {title}", line)

# Output
def action_help(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    ctx.add_console_message(MessageType.INFO, HELP_TEXT, line)

def action_generic(ctx: 'ExecutionContext', name: str, args: List[Value], line: int) -> None:
    """Fallback for names outside the registry; the call still becomes a step"""
    description = f"{name}({', '.join(to_text(arg) for arg in args)})"
    ctx.add_step(StepType.OTHER, description, line)
    ctx.add_console_message(MessageType.INFO, description, line)

def get_builtin_actions() -> Dict[str, ActionSpec]:
    """Get dictionary of all built-in actions, keyed by lower-case name"""
    actions = [
        ActionSpec('add', action_add, 2, 3, 'ingredient', 'Add an ingredient: name, amount[, unit]',
                   'at least 2 arguments: name and amount'),
        ActionSpec('ingredient', action_add, 2, 3, 'ingredient', 'Alias for add()',
                   'at least 2 arguments: name and amount'),
        ActionSpec('mix', action_prepare, 0, 1, 'action', 'Mix ingredients[, description]'),
        ActionSpec('stir', action_prepare, 0, 1, 'action', 'Stir[, description]'),
        ActionSpec('pour', action_prepare, 0, 1, 'action', 'Pour[, description]'),
        ActionSpec('season', action_prepare, 0, 1, 'action', 'Season[, description]'),
        ActionSpec('cook', action_cook, 1, 3, 'timer', 'Cook: duration[, unit][, description]',
                   'duration argument'),
        ActionSpec('bake', action_cook, 1, 3, 'timer', 'Bake: duration[, unit][, description]',
                   'duration argument'),
        ActionSpec('simmer', action_cook, 1, 3, 'timer', 'Simmer: duration[, unit][, description]',
                   'duration argument'),
        ActionSpec('rest', action_rest, 1, 2, 'timer', 'Rest: duration[, unit]', 'duration argument'),
        ActionSpec('wait', action_rest, 1, 2, 'timer', 'Alias for rest()', 'duration argument'),
        ActionSpec('serve', action_serve, 0, 1, 'action', 'Serve[, description]'),
        ActionSpec('flip', action_flip, 0, 0, 'action', 'Flip'),
        ActionSpec('resource', action_resource, 2, 3, 'media', 'Attach a link: name, url[, description]',
                   'at least 2 arguments: name and URL'),
        ActionSpec('image', action_resource, 2, 3, 'media', 'Attach an image: name, url[, description]',
                   'at least 2 arguments: name and URL'),
        ActionSpec('video', action_resource, 2, 3, 'media', 'Attach a video: name, url[, description]',
                   'at least 2 arguments: name and URL'),
        ActionSpec('step', action_step, 1, 1, 'action', 'Narrative step: description',
                   'at least 1 argument: description'),
        ActionSpec('help', action_help, 0, 0, 'output', 'Print the syntax guide'),
    ]
    return {action.name: action for action in actions}

GENERIC_ACTION = ActionSpec('*', action_generic, 0, None, 'action', 'Any other call becomes a step')
