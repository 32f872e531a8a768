"""Logger: the level-named call surface over a LogBuffer."""

import traceback
from collections.abc import Iterator, Mapping
from typing import Any

from diaglog.core.buffer import LogBuffer
from diaglog.core.encoding.text import TimestampFormat, format_line
from diaglog.core.errors import InvalidLevelError
from diaglog.core.levels import Level
from diaglog.core.models import LogEntry, attach_exception
from diaglog.core.ports import DrainCompatible
from diaglog.core.precision import PrecisionTracker

Context = Mapping[str, Any]


def _merge_context(
    context: Context | None, attributes: dict[str, Any]
) -> dict[str, Any]:
    merged = dict(context or {})
    merged.update(attributes)
    return merged


def _describe_exception(exception: BaseException) -> str:
    """Fallback message for an exception that carries no message."""
    tb = exception.__traceback__
    frames = traceback.extract_tb(tb) if tb is not None else []
    if frames:
        line, file = frames[-1].lineno, frames[-1].filename
    else:
        line, file = "?", "<unknown>"
    trace = "".join(traceback.format_tb(tb)).strip() if tb is not None else ""
    return (
        f"{type(exception).__qualname__} thrown at line {line} in {file}. "
        f"Trace: {trace or '(none)'}"
    )


def split_exception_message(exception: BaseException) -> tuple[Level, str]:
    """Derive a level and message from an exception's own message.

    A message of the form "Warning: disk almost full" yields
    (Level.WARNING, "disk almost full"). Without a recognised level prefix
    the level is ERROR and the message is kept whole.
    """
    text = str(exception)
    prefix, separator, rest = text.partition(":")
    if separator and prefix.strip():
        try:
            return Level.from_name(prefix), rest.strip()
        except InvalidLevelError:
            pass
    return Level.ERROR, text.strip()


class Logger:
    """Buffers structured log entries for later inspection.

    Example:
        ```python
        logger = Logger(precision_enabled=True)
        logger.info("User {user} logged in", user="alice")
        for line in logger.drain(resolve=True):
            print(line)
        ```

    Args:
        buffer: Buffer to append to. A new LogBuffer is created by default.
        precision: Tracker used for precision context. A new
            PrecisionTracker is created by default.
        precision_enabled: Attach precision context to every entry unless a
            call overrides it.
    """

    def __init__(
        self,
        buffer: LogBuffer | None = None,
        precision: PrecisionTracker | None = None,
        precision_enabled: bool = False,
    ) -> None:
        self._buffer = buffer if buffer is not None else LogBuffer()
        self._precision = precision if precision is not None else PrecisionTracker()
        self.precision_enabled = precision_enabled
        if precision_enabled:
            self._precision.enable()

    @property
    def buffer(self) -> LogBuffer:
        return self._buffer

    @property
    def precision(self) -> PrecisionTracker:
        return self._precision

    def entry(
        self,
        level: Level | str | int,
        message: Any = None,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        timestamp: float | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Log with an arbitrary level.

        Level, message and context are positional-only, so any name except
        precision and timestamp can be used as a keyword context value.

        Args:
            level: A Level, level name or level weight.
            message: Message template; placeholders are ``{key}``.
            context: Values for the template.
            precision: Attach precision context. Defaults to the logger
                setting.
            timestamp: Unix timestamp of the event. Defaults to now.
            **attributes: Additional context values.

        Returns:
            The buffered LogEntry.

        Raises:
            InvalidLevelError: If level is not a known level.
        """
        resolved = Level.resolve(level)
        values = _merge_context(context, attributes)

        if self.precision_enabled if precision is None else precision:
            for key, value in self._precision.delta().as_context().items():
                values.setdefault(key, value)

        text = None if message is None else str(message).strip()
        entry = LogEntry(
            level=resolved, message=text, context=values, timestamp=timestamp
        )
        self._buffer.append(entry)
        return entry

    def exception(
        self,
        exception: BaseException,
        level: Level | str | int | None = None,
        message: str | None = None,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Log an exception.

        The level and message default to what the exception's own message
        declares ("Level: message"), falling back to ERROR. The exception is
        stored in the context under "exception".
        """
        parsed_level, parsed_message = split_exception_message(exception)
        if level is None:
            level = parsed_level
        if message is None:
            message = parsed_message
        if not message:
            message = _describe_exception(exception)

        values = attach_exception(_merge_context(context, attributes), exception)
        return self.entry(level, message, values, precision=precision)

    def _log(
        self,
        level: Level,
        message: Any,
        context: Context | None,
        precision: bool | None,
        attributes: dict[str, Any],
    ) -> LogEntry:
        return self.entry(
            level, message, _merge_context(context, attributes), precision=precision
        )

    def emergency(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """System is unusable."""
        return self._log(Level.EMERGENCY, message, context, precision, attributes)

    def alert(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Action must be taken immediately.

        Example: entire website down, database unavailable.
        """
        return self._log(Level.ALERT, message, context, precision, attributes)

    def critical(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Critical conditions, e.g. application component unavailable."""
        return self._log(Level.CRITICAL, message, context, precision, attributes)

    def error(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Runtime errors that do not require immediate action."""
        return self._log(Level.ERROR, message, context, precision, attributes)

    def warning(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Exceptional occurrences that are not errors.

        Example: use of deprecated APIs.
        """
        return self._log(Level.WARNING, message, context, precision, attributes)

    def notice(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Normal but significant events."""
        return self._log(Level.NOTICE, message, context, precision, attributes)

    def info(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Interesting events, e.g. user logs in."""
        return self._log(Level.INFO, message, context, precision, attributes)

    def debug(
        self,
        message: Any,
        context: Context | None = None,
        /,
        *,
        precision: bool | None = None,
        **attributes: Any,
    ) -> LogEntry:
        """Detailed debug information."""
        return self._log(Level.DEBUG, message, context, precision, attributes)

    # Consumption surface

    def has_entries(self) -> bool:
        return not self._buffer.is_empty()

    def get_entries(
        self,
        resolve: bool = False,
        highlight: bool = False,
        promote_brackets: bool = False,
    ) -> list[LogEntry] | list[str]:
        """Return buffered entries without removing them."""
        return self._buffer.entries(resolve, highlight, promote_brackets)

    def drain(
        self,
        resolve: bool = False,
        highlight: bool = False,
        promote_brackets: bool = False,
    ) -> list[LogEntry] | list[str]:
        """Return buffered entries and empty the buffer."""
        return self._buffer.drain(resolve, highlight, promote_brackets)

    def print_entries(
        self,
        clear: bool = True,
        timestamp_format: TimestampFormat | str | bool | None = None,
    ) -> list[str]:
        """Render entries as "Level: message" lines.

        Args:
            clear: Drain the buffer. Defaults to True.
            timestamp_format: Optional timestamp prefix format.
        """
        entries = self._buffer.drain() if clear else self._buffer.entries()
        return [format_line(entry, timestamp_format) for entry in entries]

    def clear(self) -> None:
        self._buffer.clear()

    def count(self) -> int:
        return self._buffer.count()

    def import_from(self, source: DrainCompatible) -> int:
        """Import every entry from another drain-compatible source."""
        if source is self:
            return 0
        return self._buffer.import_from(source)

    def __len__(self) -> int:
        return self._buffer.count()

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._buffer)
