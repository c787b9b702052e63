"""Value normalization and rendering into the settings file grammar.

Stored scalars are kept in their serialized (string) form; ``unserialize``
turns them back into Python values on read. ``format_assignment`` renders
a value as one or more statements of the form::

    Configuration['Database']['Host'] = 'localhost';
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List

from .errors import SerializationError

_INT_RE = re.compile(r"-?(?:0|[1-9]\d*)\Z")
_FLOAT_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][-+]?\d+)?\Z")

BOOLEAN_WORDS = ("TRUE", "FALSE")
NULL_TOKEN = "null"


def serialize(value: Any) -> Any:
    """Convert ``value`` to the form kept in the tree.

    Numbers become strings; booleans and ``None`` are kept; mappings and
    lists are converted element by element.

    Raises:
        SerializationError: For values with no representation in the tree.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return repr(value) if isinstance(value, float) else str(value)
    if isinstance(value, dict):
        return {str(k): serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    raise SerializationError(f"Cannot store value of type {type(value).__name__}")


def unserialize(text: str) -> Any:
    """Normalize a stored string: canonical numbers become int/float."""
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return text


def escape(text: str, quote: str = "'") -> str:
    """Escape backslashes and ``quote`` for use inside a quoted literal."""
    return text.replace("\\", "\\\\").replace(quote, "\\" + quote)


def quote_key(key: Any) -> str:
    return "['" + escape(str(key)) + "']"


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    raise SerializationError(f"Cannot render value of type {type(value).__name__}")


def is_associative(value: Any) -> bool:
    """Whether a mapping/list must be written key by key.

    A container is written as an inline array only when it has an entry at
    index ``0`` and that entry is a scalar.
    """
    if isinstance(value, list):
        return not value or isinstance(value[0], (dict, list))
    if 0 in value:
        first = value[0]
    elif "0" in value:
        first = value["0"]
    else:
        return True
    return isinstance(first, (dict, list))


def _items(value: Any) -> Iterator:
    if isinstance(value, list):
        return iter(enumerate(value))
    return iter(value.items())


def format_literal(value: Any) -> str:
    """Render a scalar or flat list as a single literal."""
    if isinstance(value, (dict, list)):
        elements = value.values() if isinstance(value, dict) else value
        return "[" + ", ".join("'" + escape(_scalar_text(v)) + "'" for v in elements) + "]"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if value is None:
        return NULL_TOKEN
    if isinstance(value, str) and value in BOOLEAN_WORDS:
        return value
    text = _scalar_text(value)
    if "'" in text:
        return '"' + escape(text, '"') + '"'
    return "'" + escape(text) + "'"


def format_assignment(lines: List[str], prefix: str, value: Any) -> None:
    """Append the statements assigning ``value`` to ``prefix``."""
    if isinstance(value, (dict, list)) and is_associative(value):
        for key, item in _items(value):
            format_assignment(lines, prefix + quote_key(key), item)
        return
    lines.append(f"{prefix} = {format_literal(value)};")


def render_assignments(group: str, data: Dict[str, Any]) -> List[str]:
    """Render a whole mapping as statements rooted at ``group``.

    Each top-level mapping or list starts a new section introduced by a blank line
    and a comment naming it.
    """
    lines: List[str] = []
    for name, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append("")
            lines.append(f"// {name}")
        format_assignment(lines, group + quote_key(name), value)
    return lines
