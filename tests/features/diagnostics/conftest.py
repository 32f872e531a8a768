"""BDD step definitions for buffering, template and timer features."""

import pytest
from pytest_bdd import given, parsers, then, when
from tests.features.diagnostics.steps_helpers import LoggingScenarioContext

from diaglog.core.diagnostics import Diagnostics
from diaglog.core.errors import InvalidLevelError
from diaglog.core.levels import Level
from diaglog.core.logger import Logger
from diaglog.core.timer import TimeUnit, Timer


@pytest.fixture
def ctx(clock) -> LoggingScenarioContext:
    """Fresh scenario context for each test."""
    fallback_lines: list[str] = []
    diagnostics = Diagnostics(fallback=lambda entry, line: fallback_lines.append(line))
    return LoggingScenarioContext(
        diagnostics=diagnostics,
        timer=Timer(diagnostics.logger, clock=clock),
        fallback_lines=fallback_lines,
    )


# === Background Steps ===


@given("a diagnostics context")
def given_diagnostics_context(ctx: LoggingScenarioContext) -> None:
    """Context is created by the ctx fixture."""
    assert not ctx.logger.has_entries()


# === Buffering Steps ===


@given(parsers.parse("another logger holding {n:d} entries"))
def given_other_logger(ctx: LoggingScenarioContext, n: int) -> None:
    ctx.other = Logger()
    for i in range(n):
        ctx.other.info("imported {i}", {"i": i})


@when(parsers.parse('the {level:w} entry "{message}" is logged'))
def when_entry_logged(ctx: LoggingScenarioContext, level: str, message: str) -> None:
    try:
        ctx.logger.entry(level, message)
    except InvalidLevelError as exc:
        ctx.error = exc


@when("the buffer is drained")
def when_buffer_drained(ctx: LoggingScenarioContext) -> None:
    ctx.drained = ctx.logger.drain()


@when(parsers.parse('a session logs the {level:w} entry "{message}" and leaves it unread'))
def when_session_leaves_entry(
    ctx: LoggingScenarioContext, level: str, message: str
) -> None:
    with ctx.diagnostics.session() as diagnostics:
        diagnostics.logger.entry(level, message)


@when(parsers.parse('a session logs the {level:w} entry "{message}" and drains it'))
def when_session_drains_entry(
    ctx: LoggingScenarioContext, level: str, message: str
) -> None:
    with ctx.diagnostics.session() as diagnostics:
        diagnostics.logger.entry(level, message)
        ctx.drained = diagnostics.logger.drain()


@when("the other logger is imported")
def when_other_imported(ctx: LoggingScenarioContext) -> None:
    ctx.logger.import_from(ctx.other)


@then(parsers.parse("{n:d} entries should be drained"))
def then_n_drained(ctx: LoggingScenarioContext, n: int) -> None:
    assert len(ctx.drained) == n


@then(parsers.parse('the drained messages should be "{messages}"'))
def then_drained_messages(ctx: LoggingScenarioContext, messages: str) -> None:
    assert [str(entry) for entry in ctx.drained] == messages.split(", ")


@then("the buffer should be empty")
def then_buffer_empty(ctx: LoggingScenarioContext) -> None:
    assert ctx.logger.count() == 0


@then(parsers.parse("the buffer should hold {n:d} entries"))
def then_buffer_holds(ctx: LoggingScenarioContext, n: int) -> None:
    assert len(ctx.logger) == n


@then("the other logger should be empty")
def then_other_empty(ctx: LoggingScenarioContext) -> None:
    assert ctx.other is not None
    assert not ctx.other.has_entries()


@then("an invalid level error should be raised")
def then_invalid_level(ctx: LoggingScenarioContext) -> None:
    assert isinstance(ctx.error, InvalidLevelError)


@then(parsers.parse('the last entry message should start with "{prefix}"'))
def then_message_prefix(ctx: LoggingScenarioContext, prefix: str) -> None:
    assert ctx.last_entry().message.startswith(prefix)


@then(parsers.parse('the fallback should receive "{line}"'))
def then_fallback_line(ctx: LoggingScenarioContext, line: str) -> None:
    assert ctx.fallback_lines == [line]


@then("the fallback should receive nothing")
def then_fallback_empty(ctx: LoggingScenarioContext) -> None:
    assert ctx.fallback_lines == []


# === Template Steps ===


@when(
    parsers.parse(
        'the {level:w} entry "{template}" is logged with "{key}" set to "{value}"'
    )
)
def when_entry_with_value(
    ctx: LoggingScenarioContext, level: str, template: str, key: str, value: str
) -> None:
    ctx.logger.entry(level, template, {key: value})


@when(
    parsers.parse(
        'the {level:w} entry "{template}" is logged with boolean "{key}" set to {flag:w}'
    )
)
def when_entry_with_flag(
    ctx: LoggingScenarioContext, level: str, template: str, key: str, flag: str
) -> None:
    ctx.logger.entry(level, template, {key: flag == "true"})


@when(parsers.parse('an exception with message "{message}" is logged'))
def when_exception_logged(ctx: LoggingScenarioContext, message: str) -> None:
    ctx.raised = RuntimeError(message)
    ctx.logger.exception(ctx.raised)


@then(parsers.parse('the resolved message should be "{resolved}"'))
def then_resolved(ctx: LoggingScenarioContext, resolved: str) -> None:
    assert ctx.last_entry().resolve() == resolved


@then(parsers.parse('the last entry level should be "{level}"'))
def then_last_level(ctx: LoggingScenarioContext, level: str) -> None:
    assert ctx.last_entry().level is Level.from_name(level)


@then("the last entry should hold the exception")
def then_holds_exception(ctx: LoggingScenarioContext) -> None:
    assert ctx.last_entry().context["exception"] is ctx.raised


# === Timer Steps ===


@given(parsers.parse('a timer "{name}" is started'))
def given_timer_started(ctx: LoggingScenarioContext, name: str) -> None:
    ctx.timer.start(name)


@when(parsers.parse("{us:d} microseconds pass"))
def when_time_passes(clock, us: int) -> None:
    clock.advance(us * int(TimeUnit.US))


@when(parsers.parse('the timer "{name}" is stopped'))
def when_timer_stopped(ctx: LoggingScenarioContext, name: str) -> None:
    ctx.timer.stop(name)


@when(parsers.parse('the timer "{name}" is started again'))
def when_timer_restarted(ctx: LoggingScenarioContext, name: str) -> None:
    ctx.timer.start(name)


@when(parsers.parse('the timer "{name}" is read without stopping'))
def when_timer_peeked(ctx: LoggingScenarioContext, name: str) -> None:
    ctx.read_value = ctx.timer.get(name, stop=False)


@then(parsers.parse('the timer "{name}" should read "{value}" in "{unit}"'))
def then_timer_reads(
    ctx: LoggingScenarioContext, name: str, value: str, unit: str
) -> None:
    assert ctx.timer.get(name, unit=TimeUnit[unit]) == value


@then(parsers.parse('the timer "{name}" should not be running'))
def then_timer_stopped(ctx: LoggingScenarioContext, name: str) -> None:
    assert not ctx.timer.is_running(name)


@then("the read value should be empty")
def then_read_empty(ctx: LoggingScenarioContext) -> None:
    assert ctx.read_value is None


@then(parsers.parse('a warning entry "{message}" should be buffered'))
def then_warning_buffered(ctx: LoggingScenarioContext, message: str) -> None:
    entry = ctx.last_entry()
    assert entry.level is Level.WARNING
    assert str(entry) == message
