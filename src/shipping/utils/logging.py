"""Logging configuration for the shipping connector.

Everything goes through structlog on top of stdlib logging. Console output is
human readable in development and JSON in production and staging, or as set
by ``LOG_FORMAT``. Carrier credentials and marketplace secrets are masked
before any renderer sees them.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

LOG_FILE_STEM = "shipping-connector"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {
        "password",
        "access_key",
        "authorization",
        "secret",
        "shared_auth_secret",
        "label_data",
    }
)

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("ENV") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, otherwise a default for the running environment."""
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(_environment(), "INFO")).upper()


def use_json_logs() -> bool:
    log_format = os.getenv("LOG_FORMAT")
    if log_format:
        return log_format.lower() == "json"
    return _environment() in ("production", "staging")


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v) for k, v in value.items()}
    return value


def redact_secrets(logger, method_name: str, event_dict: dict) -> dict:
    """structlog processor masking credential-bearing keys, including nested ones."""
    return _redact(event_dict)


def _rotating_handler(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: Path | None = None) -> None:
    """Send records to stdout, a rotating log file and a rotating error file."""
    log_level = get_log_level()
    log_dir = log_dir or Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console_handler,
        _rotating_handler(log_dir / f"{LOG_FILE_STEM}.log", log_level),
        _rotating_handler(log_dir / f"{LOG_FILE_STEM}_error.log", logging.ERROR),
    ]

    # Carrier and marketplace calls are logged by the adapters
    for noisy in ("httpx", "httpcore", "protean"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def setup_structlog(json_logs: bool | None = None) -> None:
    if json_logs is None:
        json_logs = use_json_logs()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        redact_secrets,
    ]

    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging()
    setup_structlog()


def add_context(**kwargs: Any) -> None:
    """Bind values included in every log line of the current request or pass."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
