"""
Structured logging configuration.

structlog renders either JSON lines or coloured console output. Logs go to
stderr; stdout carries the rich tables. Each scan binds its league and a
short run id so every event of one run can be grepped together.
"""

import logging
import sys
import uuid
from typing import Optional, TextIO

import structlog

_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: str = "INFO",
    format: str = "console",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name, case-insensitive
        format: 'json' or 'console'
        stream: Where log lines are written (default stderr)
    """
    stream = stream or sys.stderr
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_scan_context(league: str, command: str) -> str:
    """Attach league, command and a fresh run id to every log event of this run."""
    run_id = uuid.uuid4().hex[:8]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id, league=league, command=command)
    return run_id
