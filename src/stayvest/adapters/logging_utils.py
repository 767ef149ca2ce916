# src/stayvest/adapters/logging_utils.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import config

SERVICE_NAME = "stayvest"


class JsonLogFormatter(logging.Formatter):
    """
    One JSON object per line. Structured fields go through
    ``extra={"context": {...}}`` and land under the ``context`` key.
    """

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "event": record.getMessage(),
            "context": _context_of(record),
        }
        if record.exc_info:
            exc_type = record.exc_info[0]
            entry["error"] = {
                "type": exc_type.__name__ if exc_type else None,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def _context_of(record: logging.LogRecord) -> dict[str, Any]:
    ctx = getattr(record, "context", None)
    if ctx is None:
        return {}
    if isinstance(ctx, dict):
        return ctx
    return {"value": ctx}


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Return a logger writing JSON lines to stdout. The handler is attached once
    per logger name; ``level`` defaults to STAYVEST_LOG_LEVEL.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(h.formatter, JsonLogFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel((level or config.LOG_LEVEL).upper())
    return logger
