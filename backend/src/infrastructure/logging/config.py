"""Environment-aware logging setup and request correlation ids.

- Development / local: colored detailed console, DEBUG when verbose
- Staging: structured console, optional rotating file
- Production: JSON console, WARNING when optimized, quiet third-party loggers
"""

import contextvars
import logging
import uuid
from typing import List, Optional

from ..config.settings import EnvironmentOption, get_settings
from .handlers import (
    create_console_handler,
    create_file_handler,
    create_null_handler,
)

correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    """Stamp every record with the correlation id of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "no-correlation"
        return True


def setup_logging_configuration() -> None:
    """Configure the root logger from application settings.

    Called once, lazily, by the logger factory.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if settings.ENVIRONMENT == EnvironmentOption.STAGING:
        handlers = _staging_handlers(settings)
    elif settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        handlers = _production_handlers(settings)
    else:
        handlers = _development_handlers(settings)

    for handler in handlers:
        if settings.LOG_CORRELATION_ID:
            handler.addFilter(CorrelationIdFilter())
        root_logger.addHandler(handler)

    root_logger.setLevel(settings.LOG_LEVEL_INT)

    if settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        _quiet_noisy_loggers()


def _file_handler(settings) -> logging.Handler:
    return create_file_handler(
        filepath=settings.LOG_FILE_PATH,
        format_type="structured",
        level=logging.DEBUG,
        max_bytes=settings.LOG_FILE_MAX_SIZE,
        backup_count=settings.LOG_FILE_BACKUP_COUNT,
    )


def _development_handlers(settings) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.DEBUG if settings.LOG_DEVELOPMENT_VERBOSE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="detailed", level=console_level, use_colors=True))

    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))

    return handlers


def _staging_handlers(settings) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if settings.LOG_CONSOLE_ENABLED:
        handlers.append(
            create_console_handler(format_type=settings.LOG_FORMAT, level=settings.LOG_LEVEL_INT, use_colors=False)
        )

    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))

    return handlers


def _production_handlers(settings) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.WARNING if settings.LOG_PRODUCTION_OPTIMIZE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="json", level=console_level, use_colors=False))

    return handlers


def _quiet_noisy_loggers() -> None:
    """Raise the level of chatty third-party loggers."""
    noisy_loggers = {
        "asyncpg": logging.WARNING,
        "sqlalchemy.engine": logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "httpx": logging.WARNING,
        "httpcore": logging.WARNING,
        "google_genai": logging.WARNING,
        "pdfminer": logging.WARNING,
        "sentence_transformers": logging.WARNING,
    }

    for logger_name, level in noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def configure_testing_logging() -> None:
    """Silence logging below ERROR for test runs."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(create_null_handler())
    root_logger.setLevel(logging.ERROR)

    for logger_name in ("sqlalchemy.engine", "asyncpg", "pdfminer"):
        logging.getLogger(logger_name).setLevel(logging.ERROR)


def set_correlation_id(correlation_id: str) -> contextvars.Token:
    """Bind a correlation id to the current request context."""
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token) -> None:
    """Restore the correlation id that was active before ``set_correlation_id``."""
    correlation_id_var.reset(token)


def get_correlation_id() -> Optional[str]:
    """Return the correlation id of the current request, if any."""
    return correlation_id_var.get()


def generate_correlation_id() -> str:
    """Generate a new correlation id."""
    return str(uuid.uuid4())
