"""Integration tests for a full diagnostics session."""

import logging
import time

import pytest

from diaglog import (
    Diagnostics,
    DiagnosticsConfig,
    DiagLogHandler,
    Level,
    TimeUnit,
    TimerMisuseWarning,
)
from diaglog.core.precision import DELTA_MS_KEY, OFFSET_MS_KEY


def _busy_wait(seconds: float) -> None:
    deadline = time.perf_counter() + seconds
    while time.perf_counter() < deadline:
        pass


def _ms(value: str) -> float:
    return float(value.removesuffix("ms"))


class TestPrecisionSession:
    """Precision timing across a real clock."""

    def test_entries_carry_increasing_deltas(self) -> None:
        """Later entries report a larger delta and an offset."""
        diagnostics = Diagnostics(DiagnosticsConfig(precision=True))

        with diagnostics.session() as diag:
            diag.logger.info("start")
            _busy_wait(0.005)
            diag.logger.info("end")
            entries = diag.logger.drain()

        assert [e.message for e in entries] == ["start", "end"]
        first, second = (e.context for e in entries)
        assert _ms(second[DELTA_MS_KEY]) >= 5.0
        if DELTA_MS_KEY in first:
            assert _ms(second[DELTA_MS_KEY]) >= _ms(first[DELTA_MS_KEY])
        assert OFFSET_MS_KEY not in first
        assert _ms(second[OFFSET_MS_KEY]) >= 5.0

    def test_precision_can_be_requested_per_entry(self) -> None:
        """Only entries asking for precision get timing context."""
        diagnostics = Diagnostics()

        diagnostics.logger.info("plain")
        _busy_wait(0.001)
        diagnostics.logger.info("timed", precision=True)

        plain, timed = diagnostics.logger.drain()
        assert DELTA_MS_KEY not in plain.context
        assert DELTA_MS_KEY in timed.context


class TestTimerSession:
    """Timer behavior with the real clock."""

    def test_measure_reports_elapsed_time(self) -> None:
        diagnostics = Diagnostics()

        with diagnostics.timer.measure("work"):
            _busy_wait(0.002)

        elapsed = diagnostics.timer.get("work", unit=TimeUnit.MS)
        assert elapsed is not None
        assert float(elapsed) >= 2.0
        assert not diagnostics.logger.has_entries()

    def test_misuse_is_logged_and_flushed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Misuse warnings end up in the fallback log when nobody reads them."""
        diagnostics = Diagnostics()

        with caplog.at_level(logging.WARNING, logger="diaglog.fallback"):
            with diagnostics.session() as diag:
                diag.timer.stop("never-started")
                (entry,) = diag.logger.get_entries()
                assert entry.level is Level.WARNING
                assert isinstance(entry.context["exception"], TimerMisuseWarning)

        assert caplog.messages == ["Warning: Timer not started never-started."]
        assert not diagnostics.logger.has_entries()


class TestStdlibBridge:
    """Stdlib logging records flowing into a session."""

    def test_records_are_rendered_with_direct_entries(self) -> None:
        diagnostics = Diagnostics()
        stdlib = logging.getLogger("diaglog.tests.bridge")
        stdlib.handlers.clear()
        stdlib.propagate = False
        stdlib.setLevel(logging.DEBUG)
        stdlib.addHandler(DiagLogHandler(diagnostics.logger, include_attrs=[]))

        try:
            diagnostics.logger.notice("User {user} signed in", {"user": "ada"})
            stdlib.warning("disk at %d%%", 91)
            text = diagnostics.dump_text()
        finally:
            stdlib.handlers.clear()

        assert text == "Notice: User ada signed in\nWarning: disk at 91%\n"

    def test_html_dump_marks_errors(self) -> None:
        diagnostics = Diagnostics(DiagnosticsConfig(precision=True))
        diagnostics.logger.error("Failed {code}", {"code": 500})

        html = diagnostics.dump_html(include_stylesheet=False)

        assert html.startswith('<pre class="log-dump"')
        assert 'class="log-entry is-error"' in html
        assert '<b class="highlight">500</b>' in html
        assert "log-precision-delta" in html
        assert not diagnostics.logger.has_entries()
