"""Entry point for printing classified events from the command line."""

import asyncio
import contextlib
import signal
import sys

import structlog

from globwatch.cancellation import CancellationToken
from globwatch.config import Settings
from globwatch.logging import configure_logging
from globwatch.source import WatchError
from globwatch.stream import watch

logger = structlog.get_logger()


async def run(settings: Settings) -> None:
    """Log classified events until SIGTERM/SIGINT.

    Args:
        settings: Watch configuration.
    """
    cancellation = CancellationToken()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, cancellation.cancel)

    stream = watch(
        settings.pattern,
        root=settings.root_path,
        recursive=settings.recursive,
        cancellation=cancellation,
        threshold_ms=settings.threshold_ms,
        modify_threshold_ms=settings.modify_threshold_ms,
        strict_delete_dedup=settings.strict_delete_dedup,
    )

    async for event in stream:
        logger.info("file_event", event_type=event.type.value, path=event.path)


def main() -> None:
    """Entry point for python -m globwatch."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    try:
        with contextlib.suppress(KeyboardInterrupt):
            asyncio.run(run(settings))
    except WatchError as e:
        logger.error("watch_failed", error=str(e))
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
