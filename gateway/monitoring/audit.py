# gateway/monitoring/audit.py
"""
Audit hook for filesystem operations.

The filesystem adapter reports every FTP-driven operation to an injected
observer instead of logging directly, so adapter behaviour can be tested
without capturing log output.
"""
from typing import Any, Callable

import structlog

logger = structlog.get_logger()

# observer(operation, **details)
OperationObserver = Callable[..., None]


def log_operation(operation: str, **details: Any) -> None:
    """Default observer: one structured log line per operation."""
    logger.info("fs_operation", operation=operation, **details)
