"""Pytest configuration and fixtures."""

import asyncio
import sys
from collections.abc import AsyncIterator, Iterable
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from globwatch.classifier import EventClassifier
from globwatch.history import HistoryStore
from globwatch.types import FileStat, RawNotification


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class StatTable:
    """In-memory metadata lookup keyed by path."""

    def __init__(self) -> None:
        self.entries: dict[str, FileStat] = {}
        self.calls: list[str] = []

    def set(self, path: str, mtime: float, birthtime: float) -> None:
        self.entries[path] = FileStat(mtime=mtime, birthtime=birthtime)

    def remove(self, path: str) -> None:
        self.entries.pop(path, None)

    async def __call__(self, path: str) -> FileStat | None:
        self.calls.append(path)
        await asyncio.sleep(0)
        return self.entries.get(path)


async def notifications(paths: Iterable[str | None]) -> AsyncIterator[RawNotification]:
    """Yield a fixed sequence of raw notifications."""
    for path in paths:
        await asyncio.sleep(0)
        yield RawNotification(path=path, raw={"filename": path})


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def stat_table() -> StatTable:
    """Create an empty metadata table."""
    return StatTable()


@pytest.fixture
def store() -> HistoryStore:
    """Create an empty history store."""
    return HistoryStore()


@pytest.fixture
def classifier(store: HistoryStore) -> EventClassifier:
    """Create a classifier with the default threshold."""
    return EventClassifier(store)
