"""Plain-text encoder for log entries."""

from collections.abc import Iterable
from datetime import datetime, tzinfo
from enum import Enum

from diaglog.core.models import LogEntry
from diaglog.core.values import format_rfc3339


class TimestampFormat(str, Enum):
    """Named timestamp formats accepted wherever timestamps are rendered."""

    HUMAN = "%d-%m-%Y %H:%M:%S %Z"
    RFC3339 = "%Y-%m-%dT%H:%M:%S%z"


def format_timestamp(
    timestamp: float,
    fmt: TimestampFormat | str | bool = TimestampFormat.HUMAN,
    tz: tzinfo | None = None,
) -> str:
    """Format a Unix timestamp.

    Args:
        timestamp: Unix timestamp in seconds.
        fmt: A TimestampFormat, a strftime pattern, or True for RFC3339.
        tz: Timezone to render in. Defaults to local time.

    Returns:
        The formatted timestamp. RFC3339 output always carries a
        "+HH:MM" offset.
    """
    moment = datetime.fromtimestamp(timestamp, tz=tz).astimezone(tz)
    if fmt is True or fmt == TimestampFormat.RFC3339:
        return format_rfc3339(moment)
    if isinstance(fmt, TimestampFormat):
        fmt = fmt.value
    return moment.strftime(str(fmt)).strip()


def format_line(
    entry: LogEntry,
    timestamp_format: TimestampFormat | str | bool | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Render one entry as "[<timestamp>] Level: message".

    The timestamp prefix is omitted when timestamp_format is None or False.
    """
    line = f"{entry.level.display_name.capitalize()}: {entry.resolve()}"
    if timestamp_format is None or timestamp_format is False:
        return line
    return f"[{format_timestamp(entry.timestamp, timestamp_format, tz)}] {line}"


def encode_text(
    entries: Iterable[LogEntry],
    timestamp_format: TimestampFormat | str | bool | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Encode log entries to newline-delimited plain text.

    Args:
        entries: An iterable of LogEntry objects.
        timestamp_format: Optional timestamp prefix format.
        tz: Timezone for timestamps. Defaults to local time.

    Returns:
        One line per entry, with a trailing newline.
        Empty string if no entries.
    """
    lines = [format_line(entry, timestamp_format, tz) for entry in entries]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
