"""Logging configuration for the ordering service.

Standard library handlers carry the output and structlog formats it:
human-readable console lines in development, JSON in production and
staging. Order events carry customer addresses, so outside development
they are masked before rendering.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LOG_FILE = "orders.log"
ERROR_LOG_FILE = "orders_error.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Event keys that hold a customer email address
EMAIL_KEYS = ("customer_email", "recipient")

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_environment(environ=None) -> str:
    env = os.environ if environ is None else environ
    return (env.get("ENV") or env.get("ENVIRONMENT") or "development").lower()


def get_log_level(environ=None) -> str:
    """Log level from LOG_LEVEL, else derived from the environment name."""
    env = os.environ if environ is None else environ
    default = _LEVELS_BY_ENV.get(get_environment(env), "INFO")
    return (env.get("LOG_LEVEL") or default).upper()


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | None = None) -> None:
    """Configure standard library logging.

    Logs always go to stdout. ``log_dir`` (default: LOG_DIR, else ``logs``)
    adds a rotating file for everything and one for errors only; an empty
    LOG_DIR turns file output off.
    """
    log_level = get_log_level()
    if log_dir is None:
        log_dir = os.getenv("LOG_DIR", "logs")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(path / LOG_FILE, log_level))
        root_logger.addHandler(_rotating_handler(path / ERROR_LOG_FILE, logging.ERROR))

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def mask_email_address(address: str) -> str:
    """``jane.doe@example.com`` -> ``j***@example.com``."""
    local, sep, domain = address.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_emails(_logger, _method_name, event_dict):
    """structlog processor: mask customer addresses in an event."""
    for key in EMAIL_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = mask_email_address(value)

    payload = event_dict.get("payload")
    if isinstance(payload, dict) and isinstance(payload.get("recipient"), str):
        event_dict["payload"] = {**payload, "recipient": mask_email_address(payload["recipient"])}
    return event_dict


def build_processors(env: str) -> list:
    """Processor chain for ``env``; the renderer is always last."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if env == "development":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(
                    show_locals=True,
                    max_frames=2,
                ),
            )
        )
        return processors

    processors.append(mask_emails)
    if env in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def setup_structlog(env: str | None = None) -> None:
    """Configure structlog for structured logging."""
    structlog.configure(
        processors=build_processors(env or get_environment()),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging()
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Add context variables that will be included in all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
