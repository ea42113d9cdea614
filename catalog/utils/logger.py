"""
Logging helpers.

get_logger() returns a logger that accepts structured keyword fields:

    logger.info("Product created", product_id=3, role="admin")

Fields are rendered as ``key=value`` pairs in text mode, or merged into the
record object in JSON mode.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple

ROOT_LOGGER_NAME = "catalog"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Keyword arguments the stdlib logger understands natively
_RESERVED_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


class StructuredLogger(logging.LoggerAdapter):
    """LoggerAdapter that turns unknown keyword arguments into fields."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _RESERVED_KWARGS}
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = getattr(record, "fields", None)
        if not fields:
            return base
        rendered = " ".join(f"{k}={v}" for k, v in fields.items())
        return f"{base} | {rendered}"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _build_formatter(fmt: str) -> logging.Formatter:
    if (fmt or "").strip().lower() == "json":
        return JsonFormatter()
    return TextFormatter(TEXT_FORMAT)


def setup_logging(
    level: str = "INFO",
    fmt: str = "text",
    file_path: Optional[str] = None,
    max_bytes: int = 10485760,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the package root logger.

    Replaces any handlers installed by a previous call, so it is safe to call
    again after settings change.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = _build_formatter(fmt)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(path), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> StructuredLogger:
    """Return a structured logger under the package root logger."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return StructuredLogger(logging.getLogger(name), {})
