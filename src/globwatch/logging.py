"""Structured logging configuration using structlog."""

import logging
import sys

import structlog
from structlog.types import Processor

SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def build_stdlib_handler(json_logs: bool = True) -> logging.Handler:
    """Create a stdout handler rendering stdlib records like structlog events.

    Observer errors logged by watchdog through the standard library end up
    in the same stream and format as the watch's own events.

    Args:
        json_logs: Render JSON lines when True, console lines otherwise.

    Returns:
        Handler for the root logger.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                *SHARED_PROCESSORS,
                structlog.stdlib.add_logger_name,
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )
    return handler


def configure_logging(debug: bool = False, json_logs: bool = True) -> None:
    """Configure structlog for watch output.

    Args:
        debug: Enable debug-level logging, including one line per
            classified notification, when True.
        json_logs: Render JSON lines when True, human-readable console
            lines otherwise.
    """
    level = logging.DEBUG if debug else logging.INFO

    structlog.configure(
        processors=[
            *SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            _renderer(json_logs),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, handlers=[build_stdlib_handler(json_logs)])

    logging.getLogger("watchdog").setLevel(logging.WARNING)
