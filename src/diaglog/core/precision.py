"""Sub-millisecond timing context for log entries.

A PrecisionTracker holds a monotonic baseline and the instant of the
previous precision-enabled entry. Each call to :meth:`PrecisionTracker.delta`
reports the time since the baseline and since the previous entry.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

NS_PER_MS = 1_000_000

# Context keys attached to precision-enabled entries
HR_TIME_KEY = "precision.hrTime"
HR_DELTA_KEY = "precision.hrDelta"
DELTA_MS_KEY = "precision.deltaMs"
OFFSET_MS_KEY = "precision.offsetMs"


def format_ms(duration_ns: int | None) -> str | None:
    """Format a nanosecond duration as a millisecond string.

    Durations of 1ms or more get 2 decimals. Shorter durations get one
    extra decimal per leading fractional zero, up to 4, so that very fast
    operations do not collapse to "0.00ms".

    Args:
        duration_ns: Duration in nanoseconds.

    Returns:
        A string such as "12.34ms" or "0.0042ms", or None for a missing or
        zero duration.
    """
    if not duration_ns:
        return None

    ms = duration_ns / NS_PER_MS
    decimals = 2
    if 0 < abs(ms) < 1:
        leading_zeros = math.ceil(-math.log10(abs(ms))) - 1
        decimals = min(2 + leading_zeros, 4)

    return f"{ms:.{decimals}f}".zfill(4) + "ms"


@dataclass(frozen=True)
class PrecisionDelta:
    """Timing snapshot for a single entry.

    Attributes:
        hr_time: Monotonic clock reading in nanoseconds.
        hr_delta: Nanoseconds since the tracker baseline.
        delta_ms: Formatted time since the baseline.
        offset_ms: Formatted time since the previous entry, None for the
            first entry.
    """

    hr_time: int
    hr_delta: int
    delta_ms: str | None
    offset_ms: str | None

    def as_context(self) -> dict[str, Any]:
        """Return the snapshot as entry context, omitting None values."""
        context: dict[str, Any] = {
            HR_TIME_KEY: self.hr_time,
            HR_DELTA_KEY: self.hr_delta,
            DELTA_MS_KEY: self.delta_ms,
            OFFSET_MS_KEY: self.offset_ms,
        }
        return {key: value for key, value in context.items() if value is not None}


class PrecisionTracker:
    """Tracks monotonic timing between precision-enabled entries.

    Args:
        clock: Nanosecond monotonic clock. Defaults to time.perf_counter_ns.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or time.perf_counter_ns
        self._baseline: int | None = None
        self._previous: int | None = None

    @property
    def enabled(self) -> bool:
        """True once a baseline has been set."""
        return self._baseline is not None

    @property
    def baseline(self) -> int | None:
        return self._baseline

    @property
    def previous(self) -> int | None:
        return self._previous

    def enable(self, baseline: int | None = None) -> int:
        """Set the baseline instant if it is not set yet.

        Repeated calls keep the original baseline.

        Returns:
            The active baseline.
        """
        if self._baseline is None:
            self._baseline = self._clock() if baseline is None else baseline
        return self._baseline

    def reset(self) -> None:
        """Forget the baseline and previous entry; the next use re-enables."""
        self._baseline = None
        self._previous = None

    def delta(self) -> PrecisionDelta:
        """Take a timing snapshot and record it as the previous entry."""
        baseline = self.enable()
        now = self._clock()
        offset = now - self._previous if self._previous is not None else None
        self._previous = now

        hr_delta = now - baseline
        return PrecisionDelta(
            hr_time=now,
            hr_delta=hr_delta,
            delta_ms=format_ms(hr_delta),
            offset_ms=format_ms(offset),
        )
