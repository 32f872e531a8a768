"""Port interfaces for buffers and sinks.

These protocols define the contracts collaborators must implement. A
logger that wants its entries merged into another logger implements
DrainCompatible explicitly; there is no structural guessing.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from diaglog.core.models import LogEntry


@runtime_checkable
class DrainCompatible(Protocol):
    """Port for sources whose entries can be imported into a buffer.

    Examples: LogBuffer, Logger.
    """

    def drain(self) -> Iterable[LogEntry]:
        """Return all held entries, in order, and forget them."""
        ...


@runtime_checkable
class FallbackSink(Protocol):
    """Port for the last-resort destination of unconsumed entries.

    Called once per entry left in a buffer when a diagnostics session ends.
    """

    def __call__(self, entry: LogEntry, line: str) -> None:
        """Deliver a single entry and its plain rendered line."""
        ...
