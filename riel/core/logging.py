"""
Structured logging setup built on structlog.

Usage:
    from riel.core.logging import get_logger, setup_logging

    setup_logging("DEBUG")      # call once at startup
    logger = get_logger(__name__)
    logger.info("Pipeline run started", execution_id="...")

The engine logs through structlog on top of stdlib ``logging``.  The ``riel``
logger carries a NullHandler, so until the application configures logging
(with ``setup_logging`` or its own handlers) nothing is printed.
"""

from __future__ import annotations

import logging
import sys

import structlog

from riel.core.config import settings


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog and route it through the stdlib ``logging`` module.

    Args:
        level: Log level name.  Defaults to ``settings.LOG_LEVEL``.
        json_logs: Render events as JSON lines instead of the console
                   renderer.  Defaults to ``settings.LOG_JSON``.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json_logs is None else json_logs

    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level '{level_name}'")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: structlog.types.Processor
    if use_json:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structlog logger that emits through the stdlib logger ``name``.

    Events always end up in ``logging``, configured or not, so an
    application that never calls ``setup_logging`` gets nothing on stdout.
    """
    return structlog.wrap_logger(
        logging.getLogger(name or "riel"),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
