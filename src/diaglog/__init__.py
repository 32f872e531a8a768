"""diaglog - buffered structured diagnostics with precision timing."""

from diaglog.adapters.logging import ContextProvider, DiagLogHandler
from diaglog.core.buffer import LogBuffer
from diaglog.core.config import DiagnosticsConfig
from diaglog.core.diagnostics import Diagnostics, LoggingFallbackSink
from diaglog.core.encoding.html import encode_html
from diaglog.core.encoding.text import TimestampFormat, encode_text
from diaglog.core.errors import (
    DiagLogError,
    InvalidLevelError,
    NotSupportedError,
    TimerMisuseWarning,
)
from diaglog.core.levels import Level
from diaglog.core.logger import Logger
from diaglog.core.models import LogEntry
from diaglog.core.ports import DrainCompatible, FallbackSink
from diaglog.core.precision import PrecisionDelta, PrecisionTracker, format_ms
from diaglog.core.templates import resolve_template
from diaglog.core.timer import TimeUnit, Timer
from diaglog.core.values import resolve_value

__all__ = [
    # Models
    "Level",
    "LogEntry",
    # Errors
    "DiagLogError",
    "InvalidLevelError",
    "NotSupportedError",
    "TimerMisuseWarning",
    # Ports
    "DrainCompatible",
    "FallbackSink",
    # Buffering and dispatch
    "LogBuffer",
    "Logger",
    # Timing
    "PrecisionDelta",
    "PrecisionTracker",
    "TimeUnit",
    "Timer",
    "format_ms",
    # Resolution
    "resolve_template",
    "resolve_value",
    # Context
    "Diagnostics",
    "DiagnosticsConfig",
    "LoggingFallbackSink",
    # Encoding
    "TimestampFormat",
    "encode_html",
    "encode_text",
    # Adapters
    "ContextProvider",
    "DiagLogHandler",
]
