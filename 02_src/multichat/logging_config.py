"""Structured logging configuration for Multichat."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

# Extra record attributes copied into the JSON payload when present.
_EXTRA_FIELDS = ("agent_id", "agent_name", "stage", "context")

# Third-party loggers that log every HTTP request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai", "google_genai")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, tagged with the stream it concerns."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        task_name = getattr(record, "taskName", None)
        if task_name:
            payload["task"] = task_name

        payload.update(
            {name: getattr(record, name) for name in _EXTRA_FIELDS if hasattr(record, name)}
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    log_to_file: bool = True,
) -> None:
    """Install JSON logging on the root logger.

    ``log_level`` falls back to the LOG_LEVEL variable, then INFO. Records
    go to stdout and, unless ``log_to_file`` is False, to a rotating file at
    ``log_file`` (04_logs/app.log by default).
    """
    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }

    if log_to_file:
        if log_file is None:
            log_file = str(DEFAULT_LOG_PATH)
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "multichat.logging_config.JSONFormatter",
            },
        },
        "handlers": handlers,
        "loggers": {
            name: {"level": "WARNING"} for name in _NOISY_LOGGERS
        },
        "root": {
            "level": level,
            "handlers": list(handlers),
        },
    }

    logging.config.dictConfig(config)


def get_logger(name: str) -> logging.Logger:
    """Module logger; configuration comes from setup_logging()."""
    return logging.getLogger(name)
