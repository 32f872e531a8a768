"""In-memory buffer of log entries."""

from collections.abc import Iterator

from diaglog.core.models import LogEntry
from diaglog.core.ports import DrainCompatible


class LogBuffer:
    """Ordered, append-only store of LogEntry objects.

    Entries are kept in insertion order until drained or cleared. Suitable
    for a single consumer within one process; not synchronized.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def append(self, entry: LogEntry) -> None:
        """Append an entry to the end of the buffer."""
        self._entries.append(entry)

    def entries(
        self,
        resolve: bool = False,
        highlight: bool = False,
        promote_brackets: bool = False,
    ) -> list[LogEntry] | list[str]:
        """Return all entries without removing them.

        Args:
            resolve: Return resolved message strings instead of entries.
            highlight: Highlight values when resolving.
            promote_brackets: Resolve stray bracket tags when resolving.
        """
        return self._render(list(self._entries), resolve, highlight, promote_brackets)

    def drain(
        self,
        resolve: bool = False,
        highlight: bool = False,
        promote_brackets: bool = False,
    ) -> list[LogEntry] | list[str]:
        """Return all entries and empty the buffer.

        The buffer is swapped out before any resolution happens, so no entry
        is visible both in the result and in the buffer afterwards.
        """
        drained, self._entries = self._entries, []
        return self._render(drained, resolve, highlight, promote_brackets)

    def clear(self) -> None:
        """Discard all entries."""
        self._entries = []

    def count(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def import_from(self, source: DrainCompatible) -> int:
        """Append every entry drained from source, preserving their order.

        Drained items that are not LogEntry objects are rejected after the
        valid entries have been appended, so nothing valid is lost.

        Args:
            source: Any object implementing DrainCompatible.

        Returns:
            Number of imported entries.

        Raises:
            TypeError: If source does not implement DrainCompatible, or if it
                drained items that are not LogEntry objects.
        """
        if source is self:
            return 0
        if not isinstance(source, DrainCompatible):
            raise TypeError(
                f"{type(source).__name__} does not implement DrainCompatible"
            )

        imported: list[LogEntry] = []
        rejected: list[object] = []
        for item in source.drain():
            if isinstance(item, LogEntry):
                imported.append(item)
            else:
                rejected.append(item)
        self._entries.extend(imported)

        if rejected:
            names = ", ".join(sorted({type(item).__name__ for item in rejected}))
            raise TypeError(
                f"Imported {len(imported)} entries but rejected {len(rejected)} "
                f"items of type {names}, expected LogEntry"
            )
        return len(imported)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    @staticmethod
    def _render(
        entries: list[LogEntry],
        resolve: bool,
        highlight: bool,
        promote_brackets: bool,
    ) -> list[LogEntry] | list[str]:
        if not resolve:
            return entries
        return [
            entry.resolve(highlight=highlight, promote_brackets=promote_brackets)
            for entry in entries
        ]
