"""Centralized logging for the study notebook backend.

Loggers are obtained through :func:`get_logger`, which configures the root
logger from settings on first use. Output depends on ``ENVIRONMENT``:
colored detailed lines in development, key=value lines in staging and JSON in
production. Every record carries the correlation id of the request that
produced it.

Usage:
    ```python
    from ...infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Document ingested", extra={"document_id": str(document.id)})
    ```
"""

from .config import (
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
