"""
Recipe Script Configuration
Loads CLI/host settings from recipescript.json, .toml or .yaml
"""

import json
import logging
import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from rich.console import Console
from rich.logging import RichHandler

from .actions import DEFAULT_GLYPH
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ('recipescript.json', 'recipescript.toml', 'recipescript.yaml', 'recipescript.yml')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

@dataclass
class RecipeConfig:
    log_level: str = 'WARNING'
    variables: Dict[str, Union[int, float]] = field(default_factory=dict)  # injected on every run
    glyphs: Dict[str, str] = field(default_factory=dict)
    default_glyph: str = DEFAULT_GLYPH
    json_indent: int = 2
    path: Optional[Path] = None

def _expand_env(value: Any) -> Any:
    """Replaces ${ENV_VAR} with the environment variable's value."""
    if isinstance(value, str) and value.startswith('${') and value.endswith('}'):
        return os.environ.get(value[2:-1], '')
    return value

def _read_file(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as error:
        raise ConfigError(f"Cannot read config file {path}: {error}")

    try:
        if path.suffix == '.json':
            raw = json.loads(text)
        elif path.suffix == '.toml':
            raw = tomllib.loads(text)
        elif path.suffix in ('.yaml', '.yml'):
            raw = yaml.safe_load(text)
        else:
            raise ConfigError(f"Unsupported config format: {path}")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as error:
        raise ConfigError(f"Invalid config file {path}: {error}")

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return raw

def _check_variables(raw: Any) -> Dict[str, Union[int, float]]:
    if not isinstance(raw, dict):
        raise ConfigError("'variables' must be a mapping of name to number")
    variables = {}
    for name, value in raw.items():
        value = _expand_env(value)
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                raise ConfigError(f"Variable '{name}' must be a number, got '{value}'")
            value = int(value) if value.is_integer() else value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Variable '{name}' must be a number")
        variables[str(name)] = value
    return variables

def load_config(config_path: Optional[Union[str, Path]] = None) -> RecipeConfig:
    """Load configuration from ``config_path`` or the first default file found."""
    if config_path is None:
        for candidate in DEFAULT_CONFIG_FILES:
            if Path(candidate).is_file():
                config_path = candidate
                break
    if config_path is None:
        return RecipeConfig()

    path = Path(config_path)
    raw = _read_file(path)
    logger.debug("Loaded config %s", path)

    known = {f.name for f in fields(RecipeConfig)} - {'path'}
    for key in sorted(set(raw) - known):
        logger.warning("Ignoring unknown config key '%s' in %s", key, path)

    config = RecipeConfig(path=path)

    log_level = str(_expand_env(raw.get('log_level', config.log_level))).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log_level '{log_level}', expected one of {', '.join(LOG_LEVELS)}")
    config.log_level = log_level

    if 'variables' in raw:
        config.variables = _check_variables(raw['variables'] or {})

    glyphs = raw.get('glyphs') or {}
    if not isinstance(glyphs, dict):
        raise ConfigError("'glyphs' must be a mapping of ingredient name to glyph")
    config.glyphs = {str(name).lower(): str(glyph) for name, glyph in glyphs.items()}

    config.default_glyph = str(raw.get('default_glyph', config.default_glyph))

    indent = raw.get('json_indent', config.json_indent)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        raise ConfigError("'json_indent' must be a non-negative integer")
    config.json_indent = indent

    return config

def configure_logging(level: str = 'WARNING'):
    """Route library logging through rich; used by the command line only."""
    logging.basicConfig(
        level=level,
        format='%(name)s: %(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
