"""Central logging configuration for the service.

Logs go to stdout and integrate with Uvicorn/FastAPI. Configuration is
driven by environment variables so it works before Settings are loaded.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

# Extras attached by middleware, handlers and auth flows.
_EXTRA_KEYS = (
    "method",
    "path",
    "query",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_agent",
    "error_type",
    "user_id",
    "auth_method",
)


def env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key in _EXTRA_KEYS:
            if key in record.__dict__:
                value = record.__dict__[key]
                payload[key] = value if isinstance(value, int | float) else str(value)

        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> None:
    """Configure stdlib logging for chatauth + uvicorn.

    Env vars:
    - LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    - LOG_JSON: true/false (default: false)
    - LOG_REQUESTS: true/false (default: true)
    - LOG_UVICORN_ACCESS: true/false
        - if unset: false when LOG_REQUESTS=true, otherwise true.
    """

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_requests = env_bool("LOG_REQUESTS", default=True)
    uvicorn_access = env_bool("LOG_UVICORN_ACCESS", default=not log_requests)
    formatter_name = "json" if env_bool("LOG_JSON", default=False) else "text"

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "json": {
                "()": "chatauth.core.logging.JsonFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter_name,
                "stream": sys.stdout,
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "uvicorn": {"level": level, "propagate": True},
            "uvicorn.error": {"level": level, "propagate": True},
            "uvicorn.access": {
                "level": "INFO" if uvicorn_access else "WARNING",
                "propagate": True,
            },
            "httpx": {
                "level": os.getenv("HTTPX_LOG_LEVEL", "WARNING"),
                "propagate": True,
            },
            "sqlalchemy.engine": {
                "level": os.getenv("SQL_LOG_LEVEL", "WARNING"),
                "propagate": True,
            },
        },
    }

    logging.config.dictConfig(config)
