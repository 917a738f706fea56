"""Cancellation token tests."""

import asyncio

import pytest

from globwatch.cancellation import CancellationToken


@pytest.mark.asyncio
async def test_cancel_is_idempotent() -> None:
    """Cancelling twice leaves the token cancelled."""
    token = CancellationToken()
    assert not token.is_cancelled

    token.cancel()
    token.cancel()

    assert token.is_cancelled
    await asyncio.wait_for(token.wait(), timeout=1.0)


@pytest.mark.asyncio
async def test_race_returns_result() -> None:
    """Work finishing first returns its result."""
    token = CancellationToken()

    async def work() -> str:
        return "done"

    assert await token.race(work()) == "done"


@pytest.mark.asyncio
async def test_race_cancels_pending_work() -> None:
    """Cancellation first stops the pending work and returns None."""
    token = CancellationToken()
    cancelled = asyncio.Event()

    async def work() -> str:
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return "never"

    racing = asyncio.ensure_future(token.race(work()))
    await asyncio.sleep(0)
    token.cancel()

    assert await asyncio.wait_for(racing, timeout=1.0) is None
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_race_propagates_errors() -> None:
    """Errors from the work reach the caller."""
    token = CancellationToken()

    async def work() -> str:
        raise OSError("watch failed")

    with pytest.raises(OSError, match="watch failed"):
        await token.race(work())
