# gateway/monitoring/logger.py
"""
Structured JSON logging for the NextCloud FTP Gateway.

Modules log through `structlog.get_logger()`; this module wires structlog
and the stdlib root logger (used by pyftpdlib) to the same stream.
"""
import logging
import sys
from typing import TextIO

import structlog


def resolve_level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logging(level: str = "INFO", stream: TextIO = None) -> None:
    """
    Configure process-wide logging.

    Args:
        level: Log level name (DEBUG, INFO, ...). Unknown names fall back to INFO.
        stream: Output stream, stdout by default
    """
    stream = stream or sys.stdout
    numeric_level = resolve_level(level)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
    )
