"""Diagnostics context: one owned set of buffer, tracker, logger and timer.

Instead of process-wide globals, each Diagnostics instance owns its state.
Hosts with several threads or requests create one instance per scope.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

from diaglog.core.buffer import LogBuffer
from diaglog.core.config import DiagnosticsConfig
from diaglog.core.encoding.html import encode_html
from diaglog.core.encoding.text import encode_text, format_line
from diaglog.core.levels import Level
from diaglog.core.logger import Logger
from diaglog.core.models import LogEntry
from diaglog.core.ports import FallbackSink
from diaglog.core.precision import PrecisionTracker
from diaglog.core.timer import Timer

# Stdlib logging level used when flushing each Level to the fallback logger
_STDLIB_LEVELS = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.NOTICE: logging.INFO,
    Level.WARNING: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.CRITICAL: logging.CRITICAL,
    Level.ALERT: logging.CRITICAL,
    Level.EMERGENCY: logging.CRITICAL,
}

# Marks records written by diaglog itself so DiagLogHandler does not re-buffer them
FALLBACK_RECORD_ATTR = "_diaglog_fallback"

_log = logging.getLogger(__name__)


def to_stdlib_level(level: Level) -> int:
    """Map a Level to the closest stdlib logging level."""
    return _STDLIB_LEVELS[level]


class LoggingFallbackSink:
    """Fallback sink that writes unconsumed entries to a stdlib logger.

    Records bypass the logger's own level, so DEBUG and INFO leftovers are
    not dropped by an unconfigured WARNING default. When no handler would
    receive them, a stderr handler is attached to the fallback logger.
    """

    def __init__(self, logger_name: str = "diaglog.fallback") -> None:
        self._logger = logging.getLogger(logger_name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _ensure_handler(self) -> None:
        if not self._logger.hasHandlers():
            self._logger.addHandler(logging.StreamHandler(sys.stderr))

    def __call__(self, entry: LogEntry, line: str) -> None:
        self._ensure_handler()
        record = self._logger.makeRecord(
            self._logger.name,
            to_stdlib_level(entry.level),
            __file__,
            0,
            line,
            (),
            None,
            extra={FALLBACK_RECORD_ATTR: True},
        )
        self._logger.handle(record)


class Diagnostics:
    """Owns the diagnostic state for one scope (process, request, test).

    Example:
        ```python
        diagnostics = Diagnostics(DiagnosticsConfig(precision=True))
        with diagnostics.session() as diag:
            diag.logger.info("Started")
            with diag.timer.measure("query"):
                run_query()
            html = diag.dump_html()
        ```

    Args:
        config: Options; defaults to DiagnosticsConfig().
        fallback: Sink for entries left unconsumed when a session ends.
            Defaults to a LoggingFallbackSink on config.fallback_logger.
    """

    def __init__(
        self,
        config: DiagnosticsConfig | None = None,
        fallback: FallbackSink | None = None,
    ) -> None:
        self.config = config or DiagnosticsConfig()
        self.fallback = fallback or LoggingFallbackSink(self.config.fallback_logger)
        self.buffer = LogBuffer()
        self.precision = PrecisionTracker()
        self.logger = Logger(
            buffer=self.buffer,
            precision=self.precision,
            precision_enabled=self.config.precision,
        )
        self.timer = Timer(self.logger)

    def flush(self) -> int:
        """Send every buffered entry to the fallback sink and empty the buffer.

        An entry the sink fails to deliver is reported through this module's
        logger; the remaining entries are still delivered.

        Returns:
            Number of entries the sink accepted.
        """
        delivered = 0
        for entry in self.buffer.drain():
            line = format_line(entry)
            try:
                self.fallback(entry, line)
            except Exception:
                _log.exception(
                    "Fallback sink failed to deliver: %s",
                    line,
                    extra={FALLBACK_RECORD_ATTR: True},
                )
            else:
                delivered += 1
        return delivered

    @contextmanager
    def session(self) -> Iterator["Diagnostics"]:
        """Scope in which entries must be consumed.

        Entries still buffered when the scope exits, normally or through an
        exception, are flushed to the fallback sink.
        """
        try:
            yield self
        finally:
            if self.config.flush_on_exit:
                self.flush()

    def dump_text(self) -> str:
        """Drain the buffer and render it as plain text."""
        return encode_text(self.buffer.drain(), self.config.timestamp_format)

    def dump_html(self, include_stylesheet: bool = True) -> str:
        """Drain the buffer and render it as an HTML fragment."""
        return encode_html(self.buffer.drain(), include_stylesheet=include_stylesheet)

    def __enter__(self) -> "Diagnostics":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.config.flush_on_exit:
            self.flush()
