"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
    "taskName",
}

_SECRET_KEYS = {"password", "api_key", "apikey", "authorization", "secret", "token"}
_MASK = "***"

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _mask_secrets(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: _MASK if str(key).lower() in _SECRET_KEYS else _mask_secrets(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_mask_secrets(item) for item in value]
    return value


class JsonFormatter(logging.Formatter):
    """Render log records as compact JSON with secret-looking extras masked."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS
        }
        if extras:
            data.update(_mask_secrets(extras))

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def configure_logging(
    *,
    level: int | str = logging.INFO,
    structured: bool | None = None,
) -> None:
    """Configure root logging with optional JSON output.

    ``structured=None`` leaves an already configured root logger alone.
    """

    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    formatter: logging.Formatter = (
        JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)
    )

    if root.handlers:
        if structured is None:
            return
        for handler in root.handlers:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
