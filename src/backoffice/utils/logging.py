"""Logging setup: stdlib handlers carry the output, structlog renders it.

Production and staging emit one JSON object per line; other environments get
the colored console renderer. Request handlers bind per-request values with
``bind_request_context`` so every line logged while serving carries them.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

from backoffice.config import Settings, get_settings

DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
STRUCTURED_ENVIRONMENTS = ("production", "staging")

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Libraries that are too chatty below WARNING
QUIET_LOGGERS = ("asyncio", "protean", "sqlalchemy.engine", "redis")


def log_level_for(settings: Settings) -> str:
    """An explicit LOG_LEVEL wins; otherwise the environment decides."""
    return (settings.log_level or DEFAULT_LEVELS.get(settings.environment, "INFO")).upper()


def _rotating(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def build_handlers(level: str, log_dir: str | None, prefix: str = "backoffice") -> list[logging.Handler]:
    """Console handler, plus a main and an errors-only file when ``log_dir`` is set."""
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating(directory / f"{prefix}.log", level))
        handlers.append(_rotating(directory / f"{prefix}_error.log", logging.ERROR))
    return handlers


def build_processors(environment: str) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]
    if environment in STRUCTURED_ENVIRONMENTS:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Install handlers on the root logger and point structlog at it."""
    settings = settings or get_settings()
    level = log_level_for(settings)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = build_handlers(level, settings.log_dir)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(settings.environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values: Any) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
