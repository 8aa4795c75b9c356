"""Logger factory that configures logging on first use."""

import inspect
import logging
from threading import Lock
from typing import Optional, Union

from ..config.settings import get_settings
from .config import setup_logging_configuration

_logging_configured = False
_configuration_lock = Lock()


def get_logger(name: Optional[str] = None, **extra_context) -> Union[logging.Logger, logging.LoggerAdapter]:
    """Get a logger, configuring the logging system if needed.

    Args:
        name: Logger name. Detected from the calling module when omitted.
        **extra_context: Fields attached to every record of the returned logger.

    Returns:
        A logger, or a ``LoggerAdapter`` when extra context is given.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Quiz generated", extra={"question_count": 5})

        grading_logger = get_logger(__name__, component="grading")
        ```
    """
    if not _logging_configured:
        configure_logging()

    if name is None:
        name = _detect_calling_module()

    base_logger = logging.getLogger(name)

    if extra_context:
        return logging.LoggerAdapter(base_logger, extra_context)
    return base_logger


def configure_logging() -> None:
    """Configure logging once per process."""
    global _logging_configured

    with _configuration_lock:
        if _logging_configured:
            return

        setup_logging_configuration()
        _logging_configured = True

        settings = get_settings()
        logging.getLogger(__name__).info(
            f"Logging configured for {settings.ENVIRONMENT.value} environment",
            extra={
                "log_level": settings.LOG_LEVEL,
                "log_format": settings.LOG_FORMAT,
                "file_enabled": settings.LOG_FILE_ENABLED,
            },
        )


def _detect_calling_module() -> str:
    """Return the ``__name__`` of the module that called :func:`get_logger`."""
    frame = inspect.currentframe()

    try:
        for _ in range(2):
            if frame is None:
                break
            frame = frame.f_back

        if frame is None:
            return "unknown"
        return str(frame.f_globals.get("__name__", "unknown"))
    finally:
        del frame
