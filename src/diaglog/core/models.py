"""Core domain model for buffered diagnostic entries."""

import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, NoReturn

from diaglog.core.errors import NotSupportedError
from diaglog.core.levels import Level
from diaglog.core.templates import resolve_template
from diaglog.core.values import format_rfc3339

EXCEPTION_KEY = "exception"


@dataclass(frozen=True)
class LogEntry:
    """A buffered log entry.

    The message is a template resolved against the context at read time,
    see :meth:`resolve`. Entries cannot be copied or pickled.

    Attributes:
        level: Severity of the entry. Names and weights are accepted and
            resolved to a Level.
        message: Message template. Empty or None is replaced with a
            generated "Unknown log event at <time>" message.
        context: Values available to the message template. Copied on
            construction.
        timestamp: Unix timestamp in seconds. Defaults to now.
    """

    level: Level
    message: str = ""
    context: Mapping[str, Any] | None = None
    timestamp: float | None = None

    def __post_init__(self) -> None:
        timestamp = time.time() if self.timestamp is None else float(self.timestamp)
        message = "" if self.message is None else str(self.message)
        if not message.strip():
            moment = format_rfc3339(datetime.fromtimestamp(timestamp).astimezone())
            message = f"Unknown log event at {moment}"

        object.__setattr__(self, "level", Level.resolve(self.level))
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "context", dict(self.context or {}))
        object.__setattr__(self, "timestamp", timestamp)

    def resolve(self, highlight: bool = False, promote_brackets: bool = False) -> str:
        """Resolve the message template against the context.

        Args:
            highlight: Wrap values in HTML highlight markers.
            promote_brackets: Also resolve tags that are not exact context
                keys, see :func:`resolve_template`.
        """
        return resolve_template(
            self.message,
            self.context,
            highlight=highlight,
            promote_brackets=promote_brackets,
        )

    def __str__(self) -> str:
        return self.resolve()

    def _not_supported(self, *args: Any) -> NoReturn:
        raise NotSupportedError(f"{type(self).__name__} cannot be copied or serialized")

    __copy__ = _not_supported
    __deepcopy__ = _not_supported
    __reduce__ = _not_supported
    __reduce_ex__ = _not_supported
    __getstate__ = _not_supported


def attach_exception(
    context: Mapping[str, Any] | None, exception: BaseException
) -> dict[str, Any]:
    """Return a copy of context with exception stored under "exception".

    If the key already holds the same exception the context is unchanged.
    A different value already stored there is kept, and the new exception
    goes to the first free "exception_<n>" key.
    """
    merged = dict(context or {})
    existing = merged.get(EXCEPTION_KEY)

    if existing is exception:
        return merged
    if EXCEPTION_KEY not in merged:
        merged[EXCEPTION_KEY] = exception
        return merged

    index = 1
    while f"{EXCEPTION_KEY}_{index}" in merged:
        if merged[f"{EXCEPTION_KEY}_{index}"] is exception:
            return merged
        index += 1
    merged[f"{EXCEPTION_KEY}_{index}"] = exception
    return merged
