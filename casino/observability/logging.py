"""JSON logging with request correlation ids."""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from asgi_correlation_id.context import correlation_id
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "casino-api"


class CorrelationIdFilter(logging.Filter):
    """Attach the current request correlation ID to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or "unknown"
        return True


def build_logging_config(level: str = "INFO") -> dict[str, Any]:
    """Return the dictConfig payload shared by the app and uvicorn."""
    routed = {"handlers": ["default"], "level": level, "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"with_correlation": {"()": CorrelationIdFilter}},
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "fmt": (
                    "%(asctime)s %(levelname)s %(name)s "
                    "%(message)s %(correlation_id)s"
                ),
                "rename_fields": {"levelname": "level", "asctime": "timestamp"},
                "static_fields": {"service": SERVICE_NAME},
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["with_correlation"],
            }
        },
        "root": {"handlers": ["default"], "level": level},
        "loggers": {
            "uvicorn.error": dict(routed),
            "uvicorn.access": dict(routed),
            # SQL echo is configured through DB_ECHO, keep it out of INFO noise
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    dictConfig(build_logging_config(level.upper()))
