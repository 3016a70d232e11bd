from __future__ import annotations

import json
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

DEFAULT_LOG_LEVEL = os.getenv("STOCKVIEW_LOG_LEVEL", "INFO")
DEFAULT_LOG_DIR = Path(os.getenv("STOCKVIEW_LOG_DIR", "data/logs"))


def configure_logging(log_level: str | None = None, log_path: Path | None = None) -> None:
    """Send readable lines to stdout and JSON lines to ``log_path``.

    Reconfigures the root logger even when handlers already exist, so the
    application factory wins over the fallback set up by ``get_logger``.
    """
    level = getattr(logging, (log_level or DEFAULT_LOG_LEVEL).upper(), logging.INFO)
    destination = log_path or DEFAULT_LOG_DIR / "app.log"
    destination.parent.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ConsoleFormatter())
    file_handler = logging.FileHandler(destination)
    file_handler.setFormatter(JsonFormatter())

    logging.basicConfig(level=level, handlers=[console_handler, file_handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def _encode_event(event: str, fields: dict[str, Any]) -> str:
    return json.dumps({"event": event, **fields}, default=str)


def split_event(message: str) -> tuple[str | None, dict[str, Any]]:
    """Return ``(event, fields)`` for messages written by ``log_event``.

    Plain messages come back as ``(None, {})``.
    """
    try:
        payload = json.loads(message)
    except json.JSONDecodeError:
        return None, {}
    if not isinstance(payload, dict) or "event" not in payload:
        return None, {}
    event = payload.pop("event")
    return str(event), payload


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        event, fields = split_event(message)
        data: dict[str, Any] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "logger": record.name,
            "severity": record.levelname,
        }
        if event is None:
            data["message"] = message
        else:
            data["event"] = event
            data.update(fields)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        event, fields = split_event(message)
        if event is not None:
            message = " ".join([event, *(f"{key}={fields[key]}" for key in sorted(fields))])
        clock = time.strftime("%H:%M:%S", time.localtime(record.created))
        line = f"{clock} | {record.levelname:<8} | {record.name} | {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    logger.info(_encode_event(event, fields))


def log_debug_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(_encode_event(event, fields))


@contextmanager
def log_timing(logger: logging.Logger, event: str, **fields: Any) -> Iterator[None]:
    """Log ``<event>.start`` then ``.complete`` or ``.error`` with ``elapsed_ms``."""
    start = time.perf_counter()
    logger.info(_encode_event(f"{event}.start", fields))
    try:
        yield
    except Exception:
        elapsed_ms = round((time.perf_counter() - start) * 1000.0, 3)
        logger.exception(_encode_event(f"{event}.error", {**fields, "elapsed_ms": elapsed_ms}))
        raise
    elapsed_ms = round((time.perf_counter() - start) * 1000.0, 3)
    logger.info(_encode_event(f"{event}.complete", {**fields, "elapsed_ms": elapsed_ms}))
