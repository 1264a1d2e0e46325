"""Logging for the scheduler, built on structlog.

Log lines go to stderr so the schedule and summaries printed by the command
line tool stay alone on stdout. The engine reports shortages and excluded
supervisors at warning level and per-period details at debug level.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure logging from ``SchedulerConfig.log_json`` and ``log_level``.

    The command line tool calls this once with the values of ``--log-json``
    and ``--log-level``. An unknown level name falls back to INFO.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # pandas and openpyxl log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger tagged with the calling module; resolved at first use, not import."""
    return structlog.get_logger(module=name)
