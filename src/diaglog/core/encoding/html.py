"""HTML fragment encoder for log entries.

Produces a ``<pre class="log-dump">`` block with one row per entry: a level
column, a timer column (when precision context is present) and the
highlighted message.
"""

import html
import time
from collections.abc import Iterable

from diaglog.core.encoding.text import format_timestamp
from diaglog.core.models import LogEntry
from diaglog.core.precision import DELTA_MS_KEY, OFFSET_MS_KEY

STYLESHEET = """
pre.log-dump {
    --padding: 8px;
    display: grid;
    grid-template-columns: max-content max-content 1fr;
    padding: 0 var(--padding);
    column-gap: 1ch;
    color: #fefefe;
    background-color: #15191e80;
    font-family: monospace;
    font-size: 15px;
    line-height: 1.5;
}
pre.log-dump div.log-entry { display: contents; }
pre.log-dump div[class*="log-column-"] { white-space: normal; padding: 5px 0; }
pre.log-dump .log-column-timer { display: flex; justify-content: flex-end; }
pre.log-dump .log-column-timer > span.log-precision-delta { color: #bfacac; }
pre.log-dump .log-column-timer > span.log-precision-offset { display: none; color: #a2b3ef; }
pre.log-dump .log-column-timer.has-offset:hover > span.log-precision-delta { display: none; }
pre.log-dump .log-column-timer.has-offset:hover > span.log-precision-offset { display: inline; }
pre.log-dump .highlight { display: inline-block; color: #52dfff; }
pre.log-dump .highlight-separator { color: #fefefe; }
pre.log-dump .highlight-success { color: #45d5bd; }
pre.log-dump .highlight-warning { color: #d69045; }
pre.log-dump .highlight-danger { color: #d55645; }
pre.log-dump .log-level.debug { color: #e6f2ff; }
pre.log-dump .log-level.info { color: #2fe02f; }
pre.log-dump .log-level.notice { color: #2fa5e0; }
pre.log-dump .log-level.warning { color: #e0992f; }
pre.log-dump .log-level.error { color: #e12f2f; }
pre.log-dump .log-level.critical { font-weight: bold; color: #ff0000; }
pre.log-dump .log-level.alert { color: white; background-color: #e12f2f; }
pre.log-dump .log-level.emergency { color: #ff0000; }
pre.log-dump .log-entry.is-error .log-column-message { font-weight: bold; }
"""


def _timer_column(entry: LogEntry) -> str:
    delta = entry.context.get(DELTA_MS_KEY)
    offset = entry.context.get(OFFSET_MS_KEY)

    spans = []
    if delta:
        spans.append(
            f'<span class="log-precision-delta">{html.escape(str(delta))}</span>'
        )
    if offset:
        spans.append(
            f'<span class="log-precision-offset">{html.escape(str(offset))}</span>'
        )

    css_class = "log-column-timer has-offset" if offset else "log-column-timer"
    return f'<div class="{css_class}">{"".join(spans)}</div>'


def encode_entry(entry: LogEntry, promote_brackets: bool = False) -> str:
    """Render a single entry as a ``div.log-entry`` row."""
    level = entry.level.display_name
    row_class = "log-entry is-error" if entry.level.is_error else "log-entry"
    message = entry.resolve(highlight=True, promote_brackets=promote_brackets)

    return (
        f'<div class="{row_class}">'
        f'<div class="log-column-level"><span class="log-level {level}">{level}</span></div>'
        f"{_timer_column(entry)}"
        f'<div class="log-column-message {level}"><span class="log-message">{message}</span></div>'
        "</div>"
    )


def encode_html(
    entries: Iterable[LogEntry],
    include_stylesheet: bool = True,
    promote_brackets: bool = False,
) -> str:
    """Encode log entries to an HTML fragment.

    Args:
        entries: An iterable of LogEntry objects.
        include_stylesheet: Prefix the fragment with a ``<style>`` block.
        promote_brackets: Resolve stray bracket tags in messages.

    Returns:
        The HTML fragment. Messages are HTML-escaped with values highlighted.
    """
    rows = "\n".join(encode_entry(entry, promote_brackets) for entry in entries)
    generated = html.escape(format_timestamp(time.time(), "%Y-%m-%d %H:%M:%S"))

    fragment = f'<pre class="log-dump" data-timestamp="{generated}">{rows}</pre>'
    if include_stylesheet:
        return f"<style>{STYLESHEET}</style>{fragment}"
    return fragment
