"""
Recipe Script Output Model
Plain records produced by one interpreter run
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

class StepType(Enum):
    ADD = 'add'
    MIX = 'mix'
    COOK = 'cook'
    BAKE = 'bake'
    REST = 'rest'
    SERVE = 'serve'
    FLIP = 'flip'
    SIMMER = 'simmer'
    OTHER = 'other'

class ResourceType(Enum):
    IMAGE = 'image'
    VIDEO = 'video'
    LINK = 'link'

class MessageType(Enum):
    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'
    VARIABLE = 'variable'

class Severity(Enum):
    ERROR = 'error'
    WARNING = 'warning'

def format_number(value: Number) -> str:
    """Render a number the way recipe authors write it: 2 not 2.0"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if hasattr(value, '__dataclass_fields__'):
        return {name: _plain(getattr(value, name)) for name in value.__dataclass_fields__}
    return value

@dataclass
class Variable:
    name: str
    value: Number
    line: int = 0

@dataclass
class Ingredient:
    name: str
    amount: Number
    unit: str
    line: int
    glyph: str

@dataclass
class Step:
    type: StepType
    description: str
    line: int
    is_timer_step: bool = False
    duration: Optional[Number] = None  # seconds
    duration_unit: Optional[str] = None

@dataclass
class Resource:
    id: str
    type: ResourceType
    name: str
    url: str
    line: int
    description: Optional[str] = None

@dataclass
class ConsoleMessage:
    id: str
    type: MessageType
    message: str
    timestamp: float = field(default=0.0, compare=False)
    line: Optional[int] = None

@dataclass
class Diagnostic:
    message: str
    line: int
    severity: Severity = Severity.ERROR
    column: Optional[int] = None

@dataclass
class RecipeResult:
    metadata: Optional[Dict[str, Any]] = None
    variables: Dict[str, Variable] = field(default_factory=dict)
    ingredients: List[Ingredient] = field(default_factory=list)
    steps: List[Step] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    console_messages: List[ConsoleMessage] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(error.severity == Severity.ERROR for error in self.errors)

    @property
    def timer_steps(self) -> List[Step]:
        return [step for step in self.steps if step.is_timer_step]

    def to_dict(self) -> Dict[str, Any]:
        result = _plain(self)
        result['variables'] = list(result['variables'].values())
        return result
