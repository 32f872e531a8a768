"""Message template resolution.

Placeholders are written as ``{key}`` and resolved against an entry's
context at read time. Unresolvable placeholders are left as literal text.
"""

import html
import re
from collections.abc import Mapping
from typing import Any

from diaglog.core.values import highlight as highlight_value
from diaglog.core.values import resolve_value

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")

_MISSING = object()


def has_placeholders(message: str) -> bool:
    """Return True if the message contains both an opening and closing brace."""
    return "{" in message and "}" in message


def _lookup_path(path: str, context: Mapping[str, Any]) -> Any:
    """Resolve a dotted path through nested mappings and attributes."""
    head, *rest = path.split(".")
    current = context.get(head, _MISSING)
    for part in rest:
        if current is _MISSING:
            break
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        else:
            current = getattr(current, part, _MISSING)
    return current


def _promote(tag: str, context: Mapping[str, Any]) -> Any:
    inner = tag.strip()
    if not inner:
        return _MISSING
    if inner in context:
        return context[inner]
    if "." in inner:
        return _lookup_path(inner, context)
    return _MISSING


def resolve_template(
    message: str,
    context: Mapping[Any, Any],
    highlight: bool = False,
    promote_brackets: bool = False,
) -> str:
    """Substitute ``{key}`` placeholders in a message with context values.

    Args:
        message: The raw message template.
        context: Mapping of placeholder names to values.
        highlight: Wrap substituted values in HTML highlight markers and
            HTML-escape the literal template text.
        promote_brackets: Resolve tags that are not exact context keys by
            stripping their inner text and looking it up as a key, then as a
            dotted path (``{user.name}``).

    Returns:
        The resolved message. Substituted values are never re-scanned for
        placeholders.
    """
    escape = html.escape if highlight else str

    if not has_placeholders(message):
        return escape(message)

    lookup = {str(key): value for key, value in context.items()}

    parts: list[str] = []
    position = 0
    for match in _PLACEHOLDER.finditer(message):
        parts.append(escape(message[position : match.start()]))
        position = match.end()

        key = match.group(1)
        value = lookup.get(key, _MISSING)
        if value is _MISSING and promote_brackets:
            value = _promote(key, lookup)

        if value is _MISSING:
            parts.append(escape(match.group(0)))
            continue

        resolved = resolve_value(value)
        parts.append(highlight_value(resolved) if highlight else resolved)

    parts.append(escape(message[position:]))
    return "".join(parts)
