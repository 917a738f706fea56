"""Per-path history owned by a single classification stream."""
from collections.abc import Iterator

from globwatch.types import FileHistory


class HistoryStore:
    """Mutable mapping of path to its last-known history.

    Holds at most one entry per path. Entries are only removed through
    discard(); there is no background expiry. A store belongs to exactly
    one stream and is never shared.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._entries: dict[str, FileHistory] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def get(self, path: str) -> FileHistory | None:
        """Return the history for a path, if any."""
        return self._entries.get(path)

    def discard(self, path: str) -> FileHistory | None:
        """Remove and return the history for a path.

        Args:
            path: Path whose entry should be purged.

        Returns:
            The removed history, or None if the path was unknown.
        """
        return self._entries.pop(path, None)

    def commit(self, path: str, history: FileHistory) -> None:
        """Store the history for a path, replacing any existing entry."""
        self._entries[path] = history
