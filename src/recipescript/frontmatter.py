"""
Recipe Script Frontmatter
Extracts the optional leading metadata block from recipe source

    ---
    title: Classic Pancakes
    servings: 4
    tags: [breakfast, quick]
    ---
"""

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

MetadataValue = Union[str, int, float, List[str]]

FRONTMATTER_RE = re.compile(r'^---\s*\n([\s\S]*?)\n---\s*\n')

# Keys whose values are stored as numbers when they parse as one
NUMERIC_KEYS = ('servings',)

_SANITIZE_TABLE = str.maketrans({
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
})

@dataclass
class Frontmatter:
    metadata: Optional[Dict[str, MetadataValue]]
    remainder: str
    line_offset: int = 0

def sanitize(value: str) -> str:
    """HTML-escape markup characters so metadata renders as text"""
    return value.translate(_SANITIZE_TABLE)

def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        return value[1:-1]
    return value

def _parse_number(value: str) -> Optional[Union[int, float]]:
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number

def parse_value(key: str, raw: str) -> MetadataValue:
    value = _strip_quotes(raw.strip())

    if value.startswith('[') and value.endswith(']'):
        items = [item.strip().replace('"', '').replace("'", '') for item in value[1:-1].split(',')]
        return [sanitize(item) for item in items if item]

    if key in NUMERIC_KEYS:
        number = _parse_number(value)
        if number is not None:
            return number

    return sanitize(value)

def parse_metadata(block: str) -> Dict[str, MetadataValue]:
    metadata: Dict[str, MetadataValue] = {}
    for line in block.split('\n'):
        key, sep, raw = line.partition(':')
        if not sep:
            continue
        key = key.strip()
        if not key:
            continue
        metadata[key] = parse_value(key, raw)
    return metadata

def extract_frontmatter(source: str) -> Frontmatter:
    """Split source into its metadata block and the script that follows.

    ``line_offset`` is the number of physical lines the block occupied, so the
    remainder can be tokenized starting at line ``line_offset + 1``.
    """
    match = FRONTMATTER_RE.match(source)
    if not match:
        return Frontmatter(metadata=None, remainder=source, line_offset=0)

    return Frontmatter(
        metadata=parse_metadata(match.group(1)),
        remainder=source[match.end():],
        line_offset=match.group(0).count('\n'),
    )
