"""JSON logging for the API.

Every record carries the id of the request being served (bound by
``ObservabilityMiddleware``), so the log lines of one write can be grouped
with its ``X-Request-ID`` response header.
"""

from __future__ import annotations

import json
import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from blogcms.core.config import settings

_STANDARD_ATTRS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime"}

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def bind_request_id(request_id: str | None):
    """Set the current request id; returns the token for ``reset_request_id``."""
    return request_id_var.set(request_id)


def reset_request_id(token) -> None:
    request_id_var.reset(token)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra`` fields are kept under their own key."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        extra = {key: value for key, value in record.__dict__.items() if key not in _STANDARD_ATTRS}
        if extra:
            entry["extra"] = extra
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JsonFormatter}},
            "handlers": {"default": {"class": "logging.StreamHandler", "formatter": "json"}},
            "root": {"handlers": ["default"], "level": level},
            "loggers": {
                "uvicorn.error": {"level": level},
                "uvicorn.access": {"handlers": ["default"], "level": level, "propagate": False},
                # SQL echo solo cuando se pide DEBUG explícitamente
                "sqlalchemy.engine": {"level": logging.WARNING if level > logging.DEBUG else level},
                # Cloudinary loguea cada request HTTP en INFO
                "urllib3": {"level": logging.WARNING},
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def security_alert(message: str, **context: Any) -> None:
    """Failed logins and rejected API keys; alerting rules match on ``alert``."""
    get_logger("blogcms.security").warning(message, extra={"alert": True, **context})
