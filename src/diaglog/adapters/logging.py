"""Python logging handler adapter for diaglog.

This adapter bridges Python's standard library logging module to a diaglog
Logger, so records from third-party code land in the same buffer as
entries logged directly.
"""

import logging
from collections.abc import Callable
from typing import Any

from diaglog.core.diagnostics import FALLBACK_RECORD_ATTR
from diaglog.core.levels import Level
from diaglog.core.logger import Logger
from diaglog.core.models import attach_exception

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno"]

# Callable returning context merged into every entry, e.g. request-scoped ids
ContextProvider = Callable[[], dict[str, Any]]


def _not_from_fallback(record: logging.LogRecord) -> bool:
    """Reject records diaglog wrote itself when flushing leftover entries."""
    return not getattr(record, FALLBACK_RECORD_ATTR, False)


def from_stdlib_level(levelno: int) -> Level:
    """Map a stdlib logging level number to the closest Level."""
    if levelno >= logging.CRITICAL:
        return Level.CRITICAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARNING
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class DiagLogHandler(logging.Handler):
    """Logging handler that buffers log records in a diaglog Logger.

    The record message is formatted with its args before buffering, so the
    stored message contains no stdlib %-placeholders. Records written by a
    Diagnostics fallback flush are skipped, so leftovers flushed to a logger
    this handler listens on are not buffered again.

    Example:
        ```python
        from diaglog import Diagnostics, DiagLogHandler

        diagnostics = Diagnostics()
        logging.getLogger().addHandler(DiagLogHandler(diagnostics.logger))
        ```
    """

    def __init__(
        self,
        logger: Logger,
        include_attrs: list[str] | None = None,
        context_provider: ContextProvider | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a diaglog logger.

        Args:
            logger: Logger that receives the entries.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno"].
            context_provider: Optional callable whose result is merged into
                each entry. Extra attributes on the record take precedence.
            level: Minimum stdlib level handled.
        """
        super().__init__(level)
        self._logger = logger
        self._include_attrs = (
            _DEFAULT_INCLUDE_ATTRS if include_attrs is None else include_attrs
        )
        self._context_provider = context_provider
        self.addFilter(_not_from_fallback)

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the diaglog logger.

        Args:
            record: The log record to emit.
        """
        try:
            # Map of attribute names to their values from LogRecord
            attr_mapping: dict[str, Any] = {
                "module": record.module,
                "funcName": record.funcName or "",
                "lineno": record.lineno,
                "pathname": record.pathname,
            }

            context: dict[str, Any] = {
                key: attr_mapping[key]
                for key in self._include_attrs
                if key in attr_mapping
            }

            if self._context_provider is not None:
                context.update(self._context_provider())

            # Add any extra attributes passed via logging call
            for key, value in record.__dict__.items():
                if key not in _STANDARD_LOGRECORD_ATTRS and not key.startswith("_"):
                    context[key] = value

            if record.exc_info and record.exc_info[1] is not None:
                context = attach_exception(context, record.exc_info[1])

            self._logger.entry(
                from_stdlib_level(record.levelno),
                record.getMessage(),
                context,
                timestamp=record.created,
            )
        except Exception:
            self.handleError(record)
