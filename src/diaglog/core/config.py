"""Configuration for a Diagnostics context."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from diaglog.core.encoding.text import TimestampFormat


@dataclass(frozen=True)
class DiagnosticsConfig:
    """Options for a Diagnostics context.

    Attributes:
        precision: Attach precision timing context to every entry.
        timestamp_format: Timestamp prefix for plain-text output; None
            renders no timestamp.
        fallback_logger: Name of the stdlib logger that receives entries
            left unconsumed when a session ends.
        flush_on_exit: Flush unconsumed entries to the fallback sink when
            a session ends.
    """

    precision: bool = False
    timestamp_format: TimestampFormat | str | None = None
    fallback_logger: str = "diaglog.fallback"
    flush_on_exit: bool = True

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "DiagnosticsConfig":
        """Build a config from a plain mapping, e.g. parsed settings.

        Timestamp formats may be given by name ("human", "rfc3339") or as a
        strftime pattern.

        Raises:
            ValueError: If options contains unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown diagnostics options: {', '.join(unknown)}")

        values = dict(options)
        fmt = values.get("timestamp_format")
        if isinstance(fmt, str) and fmt.upper() in TimestampFormat.__members__:
            values["timestamp_format"] = TimestampFormat[fmt.upper()]
        return cls(**values)
