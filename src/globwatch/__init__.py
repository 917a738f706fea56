"""Glob-filtered filesystem watching with create/modify/delete inference."""
from globwatch.cancellation import CancellationToken
from globwatch.classifier import EventClassifier
from globwatch.filter import PathFilter
from globwatch.history import HistoryStore
from globwatch.source import WatchdogSource, WatchError, async_stat
from globwatch.stream import ClassificationStream, watch
from globwatch.types import (
    EventType,
    FileHistory,
    FileStat,
    RawNotification,
    WatchEvent,
)

__all__ = [
    "CancellationToken",
    "ClassificationStream",
    "EventClassifier",
    "EventType",
    "FileHistory",
    "FileStat",
    "HistoryStore",
    "PathFilter",
    "RawNotification",
    "WatchError",
    "WatchEvent",
    "WatchdogSource",
    "async_stat",
    "watch",
]
