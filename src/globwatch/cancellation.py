"""Cancellation signal shared between a watch and its controller."""
import asyncio
import contextlib
from collections.abc import Awaitable
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class CancellationToken:
    """External abort signal for a watch stream.

    Cancelling ends the stream at its next wait for a notification; a
    notification already being classified still completes.

    Attributes:
        is_cancelled: Whether cancel() has been called.
    """

    def __init__(self) -> None:
        """Initialize an untriggered token."""
        self._cancelled = False
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested.

        Returns:
            True once cancel() was called.
        """
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation.

        Idempotent - calling multiple times has no additional effect.
        """
        if self._cancelled:
            return
        logger.info("watch_cancel_requested")
        self._cancelled = True
        self._event.set()

    async def wait(self) -> None:
        """Wait until cancellation is requested."""
        await self._event.wait()

    async def race(self, awaitable: Awaitable[T]) -> T | None:
        """Await a result unless cancellation is requested first.

        The pending awaitable is cancelled and drained when the token
        fires, so the caller can safely close what it was reading from.

        Args:
            awaitable: Work to wait for, such as the next notification.

        Returns:
            The awaitable's result, or None if cancelled first.
        """
        if self._cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            return None

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter},
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if waiter not in done:
            return work.result()

        work.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await work
        return None
