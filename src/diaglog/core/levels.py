"""Ordered severity levels for log entries."""

from enum import IntEnum

from diaglog.core.errors import InvalidLevelError


class Level(IntEnum):
    """Log severity, ordered by integer weight.

    Attributes:
        DEBUG: Detailed debug information.
        INFO: Interesting events, e.g. user logs in, SQL logs.
        NOTICE: Normal but significant events.
        WARNING: Exceptional occurrences that are not errors.
        ERROR: Runtime errors that should be logged and monitored.
        CRITICAL: Critical conditions, e.g. component unavailable.
        ALERT: Action must be taken immediately.
        EMERGENCY: System is unusable.
    """

    DEBUG = 100
    INFO = 200
    NOTICE = 250
    WARNING = 300
    ERROR = 400
    CRITICAL = 500
    ALERT = 550
    EMERGENCY = 600

    @classmethod
    def from_name(cls, name: str) -> "Level":
        """Look up a level by name, ignoring case.

        The name must match a canonical name exactly apart from case;
        surrounding whitespace is not accepted.

        Raises:
            InvalidLevelError: If the name is not one of the canonical names.
        """
        if isinstance(name, str):
            member = cls.__members__.get(name.upper())
            if member is not None:
                return member
        raise InvalidLevelError(f"{name!r} is not a valid log level name")

    @classmethod
    def from_value(cls, value: int) -> "Level":
        """Look up a level by its integer weight."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidLevelError(
                f"{value!r} is not a valid log level value"
            ) from None

    @classmethod
    def resolve(cls, level: "Level | str | int") -> "Level":
        """Resolve a Level, level name or level weight to a Level."""
        if isinstance(level, cls):
            return level
        if isinstance(level, str):
            return cls.from_name(level)
        if isinstance(level, int) and not isinstance(level, bool):
            return cls.from_value(level)
        raise InvalidLevelError(f"Cannot resolve {level!r} to a log level")

    @property
    def display_name(self) -> str:
        """Lower-case display name, e.g. ``"warning"``."""
        return self.name.lower()

    @property
    def is_error(self) -> bool:
        """True for ERROR and anything more severe."""
        return self >= Level.ERROR
