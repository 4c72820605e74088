"""Logging configuration for the storefront domain.

structlog renders on top of the standard library handlers. Settings come from
the environment so the same code logs colourfully in development, quietly in
tests and as JSON in production:

    PROTEAN_ENV / ENV   development | test | staging | production
    LOG_LEVEL           overrides the level derived from the environment
    LOG_DIR             directory for the rotating log files (default ``logs``)
    LOG_TO_FILE         ``0`` disables the file handlers

Customer email addresses are masked outside development.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_STRUCTURED_ENVS = ("production", "staging")

# Event keys that carry an email address
_EMAIL_KEYS = ("customer_email", "user_email", "email")

_MAX_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class LogSettings:
    env: str = "development"
    level: str = "DEBUG"
    log_dir: str = "logs"
    to_file: bool = True

    @property
    def structured(self) -> bool:
        return self.env in _STRUCTURED_ENVS

    @property
    def mask_emails(self) -> bool:
        return self.env != "development"

    @classmethod
    def from_env(cls) -> "LogSettings":
        env = (os.getenv("PROTEAN_ENV") or os.getenv("ENV") or "development").lower()
        return cls(
            env=env,
            level=os.getenv("LOG_LEVEL", _LEVELS.get(env, "INFO")).upper(),
            log_dir=os.getenv("LOG_DIR", "logs"),
            to_file=os.getenv("LOG_TO_FILE", "1") != "0",
        )


def mask_email(value: str) -> str:
    """``ines@example.com`` -> ``i***@example.com``."""
    local, sep, host = str(value).partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{host}"


def mask_emails(_, __, event_dict: dict) -> dict:
    """structlog processor hiding the local part of email fields."""
    for key in _EMAIL_KEYS:
        if event_dict.get(key):
            event_dict[key] = mask_email(event_dict[key])
    return event_dict


def _handlers(settings: LogSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if not settings.to_file:
        return handlers

    log_path = Path(settings.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    for suffix, level in (("", None), ("_error", logging.ERROR)):
        handler = logging.handlers.RotatingFileHandler(
            filename=log_path / f"storefront{suffix}.log",
            maxBytes=_MAX_BYTES,
            backupCount=5,
            encoding="utf-8",
        )
        if level is not None:
            handler.setLevel(level)
        handlers.append(handler)
    return handlers


def _processors(settings: LogSettings) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.mask_emails:
        processors.append(mask_emails)

    if settings.structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(max_frames=4),
            )
        )
    return processors


def configure_logging(settings: LogSettings | None = None) -> LogSettings:
    """Install handlers and structlog processors. Returns the settings used."""
    settings = settings or LogSettings.from_env()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.level)
    root_logger.handlers = _handlers(settings)

    for noisy in ("protean", "sqlalchemy.engine", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str, user_email: str | None = None, **extra: Any) -> None:
    """Attach request identifiers to every log line emitted while serving it."""
    context = {"request_id": request_id, **extra}
    if user_email:
        context["user_email"] = user_email
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
