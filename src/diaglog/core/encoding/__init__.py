"""Renderers for buffered log entries."""

from diaglog.core.encoding.html import encode_entry, encode_html
from diaglog.core.encoding.text import (
    TimestampFormat,
    encode_text,
    format_line,
    format_timestamp,
)

__all__ = [
    "TimestampFormat",
    "encode_entry",
    "encode_html",
    "encode_text",
    "format_line",
    "format_timestamp",
]
