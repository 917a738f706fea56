"""Classification stream and public watch entry point."""

import os
import time
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from pathlib import Path

import structlog

from globwatch.cancellation import CancellationToken
from globwatch.classifier import DEFAULT_THRESHOLD_MS, EventClassifier
from globwatch.filter import PathFilter
from globwatch.history import HistoryStore
from globwatch.source import WatchdogSource, async_stat
from globwatch.types import FileStat, RawNotification, WatchEvent

logger = structlog.get_logger()

StatFunc = Callable[[str], Awaitable[FileStat | None]]
Clock = Callable[[], float]


def now_ms() -> float:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time() * 1000


async def _pull(iterator: AsyncIterator[RawNotification]) -> RawNotification | None:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return None


class ClassificationStream:
    """Lazy stream of classified events for paths matching a glob.

    Pulls one raw notification at a time, drops it unless its path
    matches, looks up current metadata and classifies it against the
    stream's own history. Only one notification is in flight; the next is
    not requested until the consumer asks for the next event.

    Iterating again starts over with an empty history.

    Attributes:
        pattern: Glob pattern notifications are filtered by.
        history: History store of the current iteration.
    """

    def __init__(
        self,
        pattern: str,
        source: AsyncIterable[RawNotification],
        *,
        stat: StatFunc = async_stat,
        clock: Clock = now_ms,
        threshold_ms: float = DEFAULT_THRESHOLD_MS,
        modify_threshold_ms: float | None = None,
        strict_delete_dedup: bool = False,
        cancellation: CancellationToken | None = None,
        root: str | Path | None = None,
    ) -> None:
        """Initialize classification stream.

        Args:
            pattern: Glob pattern matched against root-relative paths.
            source: Raw notifications from the underlying watch.
            stat: Async metadata lookup, returning None for missing paths.
            clock: Current time in milliseconds.
            threshold_ms: Freshness window relative to creation time.
            modify_threshold_ms: Freshness window relative to modification
                time, defaults to threshold_ms.
            strict_delete_dedup: Report a delete only once per absence.
            cancellation: Token ending the stream at its next wait.
            root: Directory relative paths are resolved against for
                metadata lookups, None to use them as is.
        """
        self._filter = PathFilter(pattern)
        self._source = source
        self._stat = stat
        self._clock = clock
        self._threshold_ms = threshold_ms
        self._modify_threshold_ms = modify_threshold_ms
        self._strict_delete_dedup = strict_delete_dedup
        self._cancellation = cancellation
        self._root = Path(root) if root is not None else None
        self._history = HistoryStore()

    @property
    def pattern(self) -> str:
        """Glob pattern notifications are filtered by."""
        return self._filter.pattern

    @property
    def history(self) -> HistoryStore:
        """History store of the current iteration."""
        return self._history

    def __aiter__(self) -> AsyncIterator[WatchEvent]:
        return self._iterate()

    def _stat_path(self, path: str) -> str:
        if self._root is None:
            return path
        return str(self._root / path)

    async def _next_notification(
        self,
        iterator: AsyncIterator[RawNotification],
    ) -> RawNotification | None:
        if self._cancellation is None:
            return await _pull(iterator)
        return await self._cancellation.race(_pull(iterator))

    async def _iterate(self) -> AsyncIterator[WatchEvent]:
        self._history = HistoryStore()
        classifier = EventClassifier(
            self._history,
            threshold_ms=self._threshold_ms,
            modify_threshold_ms=self._modify_threshold_ms,
            strict_delete_dedup=self._strict_delete_dedup,
        )
        iterator = aiter(self._source)
        emitted = 0

        try:
            while True:
                notification = await self._next_notification(iterator)
                if notification is None:
                    break

                path = notification.path
                if not self._filter.matches(path):
                    logger.debug("notification_dropped", path=path)
                    continue

                # Taken on arrival, before the metadata lookup.
                now = self._clock()
                stat = await self._stat(self._stat_path(path))
                event = classifier.classify(path, notification.raw, stat, now)
                emitted += 1
                yield event
        finally:
            aclose = getattr(iterator, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.info(
                "classification_stream_closed",
                pattern=self.pattern,
                events_emitted=emitted,
                cancelled=(
                    self._cancellation is not None and self._cancellation.is_cancelled
                ),
            )


def watch(
    pattern: str,
    *,
    root: str | Path | None = None,
    recursive: bool = True,
    cancellation: CancellationToken | None = None,
    threshold_ms: float = DEFAULT_THRESHOLD_MS,
    modify_threshold_ms: float | None = None,
    strict_delete_dedup: bool = False,
) -> ClassificationStream:
    """Watch a directory tree for lifecycle events on matching files.

    Args:
        pattern: Glob pattern matched against paths relative to root.
        root: Directory to watch, defaults to the current directory.
        recursive: Watch subdirectories when True.
        cancellation: Token that ends the stream when cancelled.
        threshold_ms: Freshness window relative to creation time.
        modify_threshold_ms: Freshness window relative to modification
            time, defaults to threshold_ms.
        strict_delete_dedup: Report a delete only once per absence.

    Returns:
        Async iterable of classified events.
    """
    root_path = Path(root if root is not None else os.getcwd()).absolute()
    source = WatchdogSource(root_path, recursive=recursive, cancellation=cancellation)
    return ClassificationStream(
        pattern,
        source,
        threshold_ms=threshold_ms,
        modify_threshold_ms=modify_threshold_ms,
        strict_delete_dedup=strict_delete_dedup,
        cancellation=cancellation,
        root=root_path,
    )
