"""Watchdog-backed notification source and metadata lookup."""

import asyncio
import os
from collections.abc import AsyncIterator
from pathlib import Path

import structlog
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from globwatch.cancellation import CancellationToken
from globwatch.types import FileStat, RawNotification

logger = structlog.get_logger()

FORWARDED_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_TYPE_CREATED,
        EVENT_TYPE_MODIFIED,
        EVENT_TYPE_DELETED,
        EVENT_TYPE_MOVED,
    }
)


class WatchError(RuntimeError):
    """Raised when the underlying directory watch cannot run."""


def decode_path(path: str | bytes) -> str:
    """Decode a watchdog path to text.

    Args:
        path: Path as reported by watchdog.

    Returns:
        Path string, with undecodable bytes replaced.
    """
    if isinstance(path, str):
        return path
    return bytes(path).decode("utf-8", errors="replace")


def relative_path(path: str | bytes, root: Path) -> str | None:
    """Express a watchdog path relative to the watch root.

    Args:
        path: Absolute path reported by watchdog.
        root: Absolute watch root.

    Returns:
        POSIX-style relative path, or None if the path is the root itself
        or lies outside it.
    """
    try:
        relative = Path(decode_path(path)).relative_to(root)
    except ValueError:
        return None
    if relative == Path("."):
        return None
    return relative.as_posix()


class QueueingHandler(FileSystemEventHandler):
    """Watchdog handler forwarding events onto an asyncio queue.

    Runs on the observer thread and hands each notification to the event
    loop thread. A move is forwarded as two notifications, one for the
    old path and one for the new path.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[RawNotification],
        root: Path,
    ) -> None:
        """Initialize queueing handler.

        Args:
            loop: Event loop owning the queue.
            queue: Queue consumed by the notification source.
            root: Absolute watch root used to relativize paths.
        """
        super().__init__()
        self._loop = loop
        self._queue = queue
        self._root = root

    def _paths(self, event: FileSystemEvent) -> list[str | bytes]:
        if event.event_type == EVENT_TYPE_MOVED:
            return [event.src_path, event.dest_path]
        return [event.src_path]

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Forward a raw watchdog event to the event loop.

        Args:
            event: Raw watchdog filesystem event.
        """
        if event.event_type not in FORWARDED_EVENT_TYPES:
            return

        for path in self._paths(event):
            notification = RawNotification(
                path=relative_path(path, self._root),
                raw=event,
            )
            try:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, notification)
            except RuntimeError as e:
                logger.error(
                    "watcher_forward_error",
                    error=str(e),
                    path=decode_path(path),
                )


class WatchdogSource:
    """Async iterable of raw notifications for a directory tree.

    Starts a watchdog observer when iteration begins and stops it when
    iteration ends, whether by cancellation, error or the consumer
    closing the iterator.

    Attributes:
        root: Absolute directory being watched.
        recursive: Whether subdirectories are watched.
    """

    def __init__(
        self,
        root: str | Path,
        recursive: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> None:
        """Initialize notification source.

        Args:
            root: Directory to watch.
            recursive: Watch subdirectories when True.
            cancellation: Token ending the notification stream.
        """
        self._root = Path(root).absolute()
        self._recursive = recursive
        self._cancellation = cancellation

    @property
    def root(self) -> Path:
        """Absolute directory being watched."""
        return self._root

    @property
    def recursive(self) -> bool:
        """Whether subdirectories are watched."""
        return self._recursive

    def __aiter__(self) -> AsyncIterator[RawNotification]:
        return self._iterate()

    def _check_root(self) -> None:
        if not self._root.exists():
            raise WatchError(f"Watch path does not exist: {self._root}")
        if not self._root.is_dir():
            raise WatchError(f"Watch path is not a directory: {self._root}")

    async def _iterate(self) -> AsyncIterator[RawNotification]:
        self._check_root()

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[RawNotification] = asyncio.Queue()
        handler = QueueingHandler(loop, queue, self._root)

        observer = Observer()
        observer.schedule(handler, str(self._root), recursive=self._recursive)
        try:
            observer.start()
        except OSError as e:
            raise WatchError(f"Failed to start watcher for {self._root}: {e}") from e

        logger.info(
            "watcher_started",
            root=str(self._root),
            recursive=self._recursive,
        )

        try:
            while True:
                if self._cancellation is None:
                    notification = await queue.get()
                else:
                    notification = await self._cancellation.race(queue.get())
                if notification is None:
                    return
                yield notification
        finally:
            observer.stop()
            observer.join(timeout=5.0)
            logger.info("watcher_stopped", root=str(self._root))


def _birthtime(st: os.stat_result) -> float:
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime is None:
        return st.st_ctime
    return birthtime


async def async_stat(path: str | Path) -> FileStat | None:
    """Fetch modification and creation times for a path.

    Creation time falls back to the inode change time on platforms that
    do not record a birth time.

    Args:
        path: Path to look up.

    Returns:
        Timestamps in milliseconds, or None if the path is missing or
        inaccessible.
    """
    try:
        st = await asyncio.to_thread(os.stat, path)
    except OSError:
        return None
    return FileStat(mtime=st.st_mtime * 1000, birthtime=_birthtime(st) * 1000)
