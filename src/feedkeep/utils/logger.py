"""structlog setup for the CLI.

Console output while developing, JSON lines when ``log_json`` is set.
"""

import logging
import sys

import structlog

# Libraries that log every request or job run at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler", "aiosqlite")


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """Configure structlog and the stdlib loggers of our dependencies.

    Args:
        log_level: Minimum level for feedkeep's own events.
        json_format: Emit one JSON object per line instead of console output.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    library_level = level if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str | None = None, **context) -> structlog.stdlib.BoundLogger:
    """Logger bound to a component name and any extra context."""
    logger = structlog.get_logger()
    if component:
        context["component"] = component
    return logger.bind(**context) if context else logger
