"""Error taxonomy for diaglog."""


class DiagLogError(Exception):
    """Base class for all diaglog errors."""


class InvalidLevelError(DiagLogError, ValueError):
    """Raised when a level name or weight does not match a known Level."""


class NotSupportedError(DiagLogError, TypeError):
    """Raised when an operation is not allowed on a diagnostic object.

    Log entries cannot be copied, pickled or otherwise serialized.
    """


class TimerMisuseWarning(UserWarning):
    """Non-fatal timer misuse.

    Logged at WARNING level through the owning logger, never raised.
    """
