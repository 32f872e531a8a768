"""Named stopwatch timers.

Each name is either running (holding its start instant) or stopped
(holding its elapsed duration in nanoseconds), never both. Misuse is
reported as a WARNING entry through the owning logger and never raised.
"""

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from diaglog.core.errors import TimerMisuseWarning
from diaglog.core.levels import Level
from diaglog.core.logger import Logger


class TimeUnit(IntEnum):
    """Divisors converting nanoseconds to a display unit."""

    S = 1_000_000_000
    MS = 1_000_000
    US = 1_000
    NS = 1

    @property
    def suffix(self) -> str:
        return self.name.lower()


def _unit_suffix(unit: int) -> str | None:
    try:
        return TimeUnit(unit).suffix
    except ValueError:
        return None


@dataclass(frozen=True)
class _Running:
    started: int


def format_duration(duration_ns: int, unit: TimeUnit | int) -> str:
    """Format a duration to 3 decimals with the leading zero stripped.

    Example: 123_456 ns in MS gives ".123".
    """
    text = f"{duration_ns / int(unit):.3f}"
    return text[1:] if text.startswith("0.") else text


class Timer:
    """Registry of named stopwatches.

    Args:
        logger: Logger that receives misuse warnings.
        clock: Nanosecond monotonic clock. Defaults to time.perf_counter_ns.
    """

    def __init__(
        self,
        logger: Logger | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._logger = logger if logger is not None else Logger()
        self._clock = clock or time.perf_counter_ns
        self._events: dict[str, _Running | int] = {}

    def _warn(self, message: str, **context: Any) -> None:
        warning = TimerMisuseWarning(message.format(**context))
        self._logger.exception(warning, Level.WARNING, message, context)

    def start(self, name: str, override: bool = False) -> None:
        """Start the timer called name.

        A name that is already running or stopped is left untouched unless
        override is True, in which case the previous result is discarded.
        """
        if name in self._events and not override:
            self._warn("Timer already started {name}.", name=name)
            return

        self._events[name] = _Running(self._clock())

    def stop(self, name: str) -> int | None:
        """Stop a running timer.

        Returns:
            The elapsed nanoseconds, the stored duration if the timer was
            already stopped, or None if it was never started.
        """
        event = self._events.get(name)

        if event is None:
            self._warn("Timer not started {name}.", name=name)
            return None

        if isinstance(event, _Running):
            duration = self._clock() - event.started
            self._events[name] = duration
            return duration

        self._warn("No timer running for {name}.", name=name)
        return event

    def get(
        self,
        name: str,
        unit: TimeUnit | int | None | bool = TimeUnit.MS,
        stop: bool = True,
    ) -> str | int | None:
        """Return the duration of a timer.

        Args:
            name: Timer name.
            unit: Display unit. False or None returns raw nanoseconds.
            stop: Stop the timer first if it is still running.

        Returns:
            The formatted duration, the raw duration, or None if the timer
            was never started or is running and stop is False.
        """
        event = self._events.get(name)

        if event is None:
            self._warn("Timer requested, but not started: {name}.", name=name)
            return None

        if isinstance(event, _Running):
            if not stop:
                self._warn(
                    "Timer {name} found, but it is currently running.", name=name
                )
                return None
            duration = self.stop(name)
        else:
            duration = event

        if unit is None or unit is False:
            return duration
        return format_duration(duration, unit)

    def get_all(
        self, unit: TimeUnit | int | None | bool = TimeUnit.MS, stop: bool = True
    ) -> dict[str, str | int | None]:
        """Return every timer formatted with its unit suffix.

        With unit False or None the raw nanosecond durations are returned,
        as :meth:`get` does. A divisor that is not a TimeUnit gets no suffix.
        """
        results: dict[str, str | int | None] = {}
        for name in list(self._events):
            value = self.get(name, unit, stop)
            suffix = None if unit is None or unit is False else _unit_suffix(unit)
            if value is None or suffix is None:
                results[name] = value
            else:
                results[name] = f"{value} {suffix}"
        return results

    def is_running(self, name: str) -> bool:
        return isinstance(self._events.get(name), _Running)

    def names(self) -> list[str]:
        return list(self._events)

    def reset(self, name: str | None = None) -> None:
        """Forget one timer, or all timers when name is None."""
        if name is None:
            self._events.clear()
        else:
            self._events.pop(name, None)

    @contextmanager
    def measure(self, name: str, override: bool = True) -> Iterator["Timer"]:
        """Context manager that times the enclosed block under name."""
        self.start(name, override=override)
        try:
            yield self
        finally:
            if self.is_running(name):
                self.stop(name)

    def __contains__(self, name: object) -> bool:
        return name in self._events
