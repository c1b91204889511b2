"""Logger factory for botagent modules."""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger


def get_logger(name: str) -> BoundLogger:
    """
    Get a structlog logger.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Example:
        >>> from botagent.logger import get_logger
        >>> log = get_logger(__name__)
        >>> log.debug("patterns_loaded", source="patterns.json", count=42)
    """
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """Bind context (e.g. ``source=...``) to *logger* for subsequent calls."""
    return logger.bind(**context)
