"""Coercion of context values to display strings, and HTML highlighting."""

import html
import numbers
import re
from datetime import date, datetime
from typing import Any

_NUMERIC = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Builtin containers render as their bare type name, e.g. "[list]"
_CONTAINER_TYPES = (list, tuple, dict, set, frozenset, bytes, bytearray)


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as RFC3339 with a numeric UTC offset.

    Naive datetimes are interpreted as local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec="seconds")


def _has_own_str(value: object) -> bool:
    return type(value).__str__ is not object.__str__


def resolve_value(value: Any) -> str:
    """Convert a context value to its display string.

    Rules, first match wins:
        - bool becomes "true" or "false"
        - None becomes "null", strings are returned as-is
        - numbers use their string form
        - date and datetime become RFC3339
        - builtin containers become "[<type>]", e.g. "[dict]"
        - objects with their own __str__ use it
        - any other object becomes "[object <TypeName>]"

    Args:
        value: Any context value.

    Returns:
        The display string. Never raises for a well-behaved __str__.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, numbers.Number):
        return str(value)
    if isinstance(value, datetime):
        return format_rfc3339(value)
    if isinstance(value, date):
        return format_rfc3339(datetime(value.year, value.month, value.day))
    if isinstance(value, _CONTAINER_TYPES):
        return f"[{type(value).__name__}]"
    if _has_own_str(value):
        return str(value)
    return f"[object {type(value).__qualname__}]"


def is_numeric(text: str) -> bool:
    """Return True if text reads as a decimal or scientific number."""
    return _NUMERIC.match(text) is not None


def highlight(text: str) -> str:
    """Wrap a resolved value in a semantic HTML highlight marker.

    The value is HTML-escaped first. Any "::" separator is wrapped in its
    own span before the overall marker is applied.
    """
    marked = html.escape(text)
    if "::" in marked:
        marked = marked.replace("::", '<span class="highlight-separator">::</span>')

    match = text.lower()
    if match == "true":
        return f'<b class="highlight-success">{marked}</b>'
    if match == "false":
        return f'<b class="highlight-danger">{marked}</b>'
    if match == "null":
        return f'<b class="highlight-warning">{marked}</b>'

    if len(text) < 12 or is_numeric(text):
        return f'<b class="highlight">{marked}</b>'

    return f'<span class="highlight">{marked}</span>'
