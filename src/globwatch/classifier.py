"""Heuristic classification of raw notifications into lifecycle events."""

from typing import Any

import structlog

from globwatch.history import HistoryStore
from globwatch.types import EventType, FileHistory, FileStat, WatchEvent

logger = structlog.get_logger()

DEFAULT_THRESHOLD_MS = 150.0


class EventClassifier:
    """Infers create/modify/delete/unknown from metadata and path history.

    A notification carries no reliable change type, so the classifier
    compares the current timestamps of the path against a freshness window
    and uses one-shot flags in the history to report each create and
    delete only once per transition.

    By default a failed metadata lookup purges the path's history before
    it is read, so every notification for an absent path is reported as a
    delete. With strict_delete_dedup the prior history is read first and
    a delete is reported once per absence.

    Attributes:
        threshold_ms: Window after creation in which a path counts as new.
        modify_threshold_ms: Window after modification in which a path
            counts as modified.
        strict_delete_dedup: Report a delete only once per absence.
    """

    def __init__(
        self,
        store: HistoryStore,
        threshold_ms: float = DEFAULT_THRESHOLD_MS,
        modify_threshold_ms: float | None = None,
        strict_delete_dedup: bool = False,
    ) -> None:
        """Initialize classifier.

        Args:
            store: History store owned by the calling stream.
            threshold_ms: Freshness window relative to creation time.
            modify_threshold_ms: Freshness window relative to modification
                time, defaults to threshold_ms.
            strict_delete_dedup: Suppress repeated deletes for a path that
                stays absent.
        """
        self._store = store
        self._threshold_ms = threshold_ms
        self._modify_threshold_ms = (
            threshold_ms if modify_threshold_ms is None else modify_threshold_ms
        )
        self._strict_delete_dedup = strict_delete_dedup

    @property
    def threshold_ms(self) -> float:
        """Freshness window relative to creation time."""
        return self._threshold_ms

    @property
    def modify_threshold_ms(self) -> float:
        """Freshness window relative to modification time."""
        return self._modify_threshold_ms

    @property
    def strict_delete_dedup(self) -> bool:
        """Whether deletes are reported once per absence."""
        return self._strict_delete_dedup

    def _prior_history(self, path: str, stat: FileStat | None) -> FileHistory | None:
        if stat is not None:
            return self._store.get(path)
        if self._strict_delete_dedup:
            return self._store.discard(path)
        self._store.discard(path)
        return self._store.get(path)

    def _build_history(
        self,
        prior: FileHistory | None,
        stat: FileStat | None,
        now: float,
    ) -> FileHistory:
        if stat is not None:
            last_modified_at = stat.mtime
            created_at = stat.birthtime
        elif prior is not None:
            last_modified_at = prior.last_modified_at
            created_at = prior.created_at
        else:
            last_modified_at = 0.0
            created_at = 0.0

        create_emitted = prior.create_emitted if prior is not None else False
        delete_emitted = prior.delete_emitted if prior is not None else False

        if self._strict_delete_dedup:
            # Absence ends the lifetime, presence ends the absence.
            if stat is None:
                create_emitted = False
            else:
                delete_emitted = False

        return FileHistory(
            observed_at=now,
            last_modified_at=last_modified_at,
            created_at=created_at,
            create_emitted=create_emitted,
            delete_emitted=delete_emitted,
        )

    def classify(
        self,
        path: str,
        raw: Any,
        stat: FileStat | None,
        now: float,
    ) -> WatchEvent:
        """Classify one notification and record the updated history.

        Args:
            path: Root-relative path that passed the glob filter.
            raw: Originating raw notification, attached to the event as is.
            stat: Current metadata, or None if the lookup failed.
            now: Processing time in milliseconds since the epoch.

        Returns:
            Exactly one classified event.
        """
        prior = self._prior_history(path, stat)
        history = self._build_history(prior, stat, now)

        if (
            stat is not None
            and not history.create_emitted
            and now - history.created_at < self._threshold_ms
        ):
            event_type = EventType.CREATE
            history.create_emitted = True
        elif stat is None and not history.delete_emitted:
            event_type = EventType.DELETE
            history.delete_emitted = True
        elif now - history.last_modified_at < self._modify_threshold_ms:
            event_type = EventType.MODIFY
        else:
            event_type = EventType.UNKNOWN

        self._store.commit(path, history)

        logger.debug(
            "event_classified",
            path=path,
            event_type=event_type.value,
            stat_available=stat is not None,
            create_emitted=history.create_emitted,
            delete_emitted=history.delete_emitted,
        )

        return WatchEvent(type=event_type, path=path, raw=raw)
