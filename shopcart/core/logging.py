"""Structured JSON logging shared by the API, the sweeper and the Celery worker."""

from __future__ import annotations

import json
import logging
import logging.config
import uuid
from datetime import datetime, timezone
from typing import Any, MutableMapping

from shopcart.core.config import settings

_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

# Lifted to the top level of each line so a cart can be followed across requests and sweeps.
CONTEXT_FIELDS = ("cart_id", "product_id", "operation", "phase")


def _loggable(value: Any) -> Any:
    return str(value) if isinstance(value, uuid.UUID) else value


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        fields = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS}
        for key in CONTEXT_FIELDS:
            value = fields.pop(key, None)
            if value is not None:
                payload[key] = value
        if fields:
            payload["extra"] = fields

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger carrying bound context (cart id, operation, sweep phase).

    Bound values are merged into every record's ``extra``; values passed at
    the call site take precedence.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        merged = {key: _loggable(value) for key, value in (self.extra or {}).items()}
        merged.update({key: _loggable(value) for key, value in (kwargs.get("extra") or {}).items()})
        kwargs["extra"] = merged
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextLogger":
        return ContextLogger(self.logger, {**(self.extra or {}), **context})


def setup_logging() -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JsonFormatter}},
            "handlers": {
                "stdout": {"class": "logging.StreamHandler", "formatter": "json"},
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {
                "shopcart": {"level": level},
                "celery": {"level": level},
                "uvicorn.error": {"level": level},
                "uvicorn.access": {"handlers": ["stdout"], "level": level, "propagate": False},
                # Statement echo stays off unless explicitly lowered.
                "sqlalchemy.engine": {"level": logging.WARNING},
            },
        }
    )


def get_logger(name: str, **context: Any) -> ContextLogger:
    return ContextLogger(logging.getLogger(name), context)
