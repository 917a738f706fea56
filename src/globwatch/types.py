"""Event and history models for glob-filtered filesystem watching."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Lifecycle events inferred from raw filesystem notifications."""

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
    UNKNOWN = "unknown"


class RawNotification(BaseModel):
    """Single notification produced by the underlying directory watch.

    Attributes:
        path: Changed path relative to the watch root, or None when the
            backend could not resolve one.
        raw: Backend event object the notification was derived from.
    """

    path: str | None = Field(default=None, description="Path relative to root")
    raw: Any = Field(default=None, description="Backend event")


class WatchEvent(BaseModel):
    """Classified filesystem event delivered to consumers.

    Attributes:
        type: Inferred lifecycle event.
        path: Path of the subject file relative to the watch root.
        raw: Originating raw notification, passed through unmodified.
    """

    type: EventType = Field(description="Event type")
    path: str = Field(description="Path relative to the watch root")
    raw: Any = Field(default=None, exclude=True, repr=False)


class FileStat(BaseModel):
    """Filesystem timestamps for a path, in milliseconds since the epoch."""

    mtime: float = Field(description="Last modification time (ms)")
    birthtime: float = Field(description="Creation time (ms)")


class FileHistory(BaseModel):
    """Last-known state of a watched path.

    Attributes:
        observed_at: When the latest notification for the path was processed.
        last_modified_at: Most recently known modification time.
        created_at: Most recently known creation time.
        create_emitted: A create event was emitted for the current lifetime.
        delete_emitted: A delete event was emitted for the current absence.
    """

    observed_at: float = 0.0
    last_modified_at: float = 0.0
    created_at: float = 0.0
    create_emitted: bool = False
    delete_emitted: bool = False
