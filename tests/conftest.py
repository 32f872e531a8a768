"""Shared test fixtures for all test modules."""

import pytest

from diaglog.core.buffer import LogBuffer
from diaglog.core.diagnostics import Diagnostics
from diaglog.core.logger import Logger
from diaglog.core.precision import PrecisionTracker
from diaglog.core.timer import Timer


class FakeClock:
    """Deterministic nanosecond clock for timing tests."""

    def __init__(self, start: int = 1_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ns: int) -> None:
        self.now += ns


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at one second."""
    return FakeClock()


@pytest.fixture
def buffer() -> LogBuffer:
    """Provide an empty log buffer."""
    return LogBuffer()


@pytest.fixture
def logger(buffer: LogBuffer) -> Logger:
    """Provide a logger writing to the buffer fixture."""
    return Logger(buffer=buffer)


@pytest.fixture
def precision_logger(clock: FakeClock) -> Logger:
    """Provide a precision-enabled logger driven by the fake clock."""
    return Logger(precision=PrecisionTracker(clock), precision_enabled=True)


@pytest.fixture
def timer(logger: Logger, clock: FakeClock) -> Timer:
    """Provide a timer whose warnings go to the logger fixture."""
    return Timer(logger, clock=clock)


@pytest.fixture
def fallback_lines() -> list[str]:
    """Collect lines sent to a fallback sink."""
    return []


@pytest.fixture
def diagnostics(fallback_lines: list[str]) -> Diagnostics:
    """Provide a Diagnostics context whose fallback sink records lines."""

    def sink(entry, line: str) -> None:
        fallback_lines.append(line)

    return Diagnostics(fallback=sink)
