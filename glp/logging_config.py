import logging
import sys

import structlog


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # resolve sys.stderr per call so redirected streams are honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: int | str = logging.WARNING) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
