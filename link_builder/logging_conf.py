"""Stdlib logging handlers with JSON output, fed by structlog events."""

from __future__ import annotations

import logging.config
from pathlib import Path
from typing import Any

import structlog

APP_LOGGER = "link_builder"
APP_LOG_NAME = "link_builder.log"
ERROR_LOG_NAME = "error.log"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def _handler(level: str, filename: Path | None = None) -> dict[str, Any]:
    if filename is None:
        return {"class": "logging.StreamHandler", "level": level, "formatter": "json"}
    return {
        "class": "logging.FileHandler",
        "level": level,
        "filename": str(filename),
        "formatter": "json",
        "encoding": "utf-8",
    }


def build_logging_config(log_dir: Path, verbose: bool = False) -> dict[str, Any]:
    """Return the ``dictConfig`` payload: console, application log, error-only log."""

    level = "DEBUG" if verbose else "INFO"
    handlers = {
        "console": _handler(level),
        "app_file": _handler(level, log_dir / APP_LOG_NAME),
        "error_file": _handler("ERROR", log_dir / ERROR_LOG_NAME),
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.json.JsonFormatter", "fmt": JSON_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            APP_LOGGER: {"handlers": list(handlers), "level": level, "propagate": False},
        },
    }


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Install handlers once per process and return the application logger."""

    global _configured
    if not _configured:
        log_dir = log_dir or Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        logging.config.dictConfig(build_logging_config(log_dir, verbose))
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                # the JSON formatter on each handler does the rendering
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _configured = True
    return structlog.get_logger(APP_LOGGER)


__all__ = ["build_logging_config", "configure_logging"]
