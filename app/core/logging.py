"""Logging setup shared by the HTTP server and operator scripts."""

from __future__ import annotations

import logging
import logging.config
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str] = ContextVar("wallet_request_id", default="-")


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str):
    """Attach ``request_id`` to the current context; returns a reset token."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = _request_id.get()
        return True


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    fmt = fmt or "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_id": {"()": RequestIdFilter},
            },
            "formatters": {
                "default": {"format": fmt, "datefmt": "%H:%M:%S"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "default",
                    "filters": ["request_id"],
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )


__all__ = [
    "REQUEST_ID_HEADER",
    "RequestIdFilter",
    "bind_request_id",
    "configure_logging",
    "get_request_id",
    "reset_request_id",
]
