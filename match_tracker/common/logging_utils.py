"""Central logging setup for the tracker service, CLI and tests.

- One call to `configure_logging()` wires the root logger; later calls are no-ops
  unless `force=True`.
- Console output is coloured on a TTY, plain otherwise; `log_format="json"` emits
  one JSON object per line (for log shippers).
- An optional directory adds a `match_tracker.log` file handler next to the
  console handler.

Explicit arguments win over the environment (`LOG_LEVEL`, `LOG_FORMAT`,
`LOG_NO_COLOR`), which wins over the defaults.

Usage:
    from match_tracker.common.logging_utils import configure_logging, get_logger
    configure_logging(service="tracker", level="DEBUG")
    logger = get_logger(__name__)
"""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

_CONFIG_LOCK = threading.Lock()
_ALREADY_CONFIGURED = False

LOG_FILE_NAME = "match_tracker.log"
PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else was passed via `extra=`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ColorFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\x1b[38;5;245m",
        "INFO": "\x1b[38;5;39m",
        "WARNING": "\x1b[38;5;214m",
        "ERROR": "\x1b[38;5;196m",
        "CRITICAL": "\x1b[48;5;196m\x1b[38;5;231m",
    }
    RESET = "\x1b[0m"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{ts} | {record.levelname:<8} | {record.name} | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        color = self.COLORS.get(record.levelname)
        return f"{color}{line}{self.RESET}" if color else line


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = repr(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _console_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    if sys.stderr.isatty() and os.getenv("LOG_NO_COLOR") != "1":
        return ColorFormatter()
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def configure_logging(
    service: str | None = None,
    *,
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_dir: Optional[str] = None,
    force: bool = False,
) -> None:
    """Configure root logging once.

    Parameters
    ----------
    service: logical service name, attached as `service` field to records from `get_logger`.
    level: log level name; falls back to LOG_LEVEL, then INFO.
    log_format: "console" or "json"; falls back to LOG_FORMAT, then console.
    log_dir: directory for the log file; no file handler when empty.
    force: reconfigure even if already configured.
    """
    global _ALREADY_CONFIGURED
    with _CONFIG_LOCK:
        if _ALREADY_CONFIGURED and not force:
            return

        level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        fmt = (log_format or os.getenv("LOG_FORMAT", "console")).lower()

        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)

        console = logging.StreamHandler()
        console.setFormatter(_console_formatter(fmt))
        root.addHandler(console)

        if log_dir:
            log_file = Path(log_dir) / LOG_FILE_NAME
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(
                JsonFormatter() if fmt == "json" else logging.Formatter(PLAIN_FORMAT)
            )
            root.addHandler(file_handler)

        root.setLevel(getattr(logging, level_name, logging.INFO))
        _ServiceLoggerAdapter.BASE_SERVICE = service
        _ALREADY_CONFIGURED = True


def get_logger(name: str) -> logging.Logger | logging.LoggerAdapter:
    base = logging.getLogger(name)
    if _ServiceLoggerAdapter.BASE_SERVICE:
        return _ServiceLoggerAdapter(base, {"service": _ServiceLoggerAdapter.BASE_SERVICE})
    return base


class _ServiceLoggerAdapter(logging.LoggerAdapter):
    BASE_SERVICE: Optional[str] = None

    def process(self, msg: Any, kwargs: dict[str, Any]):  # noqa: D401
        extra = kwargs.get("extra") or {}
        extra.setdefault("service", self.extra["service"])
        kwargs["extra"] = extra
        return msg, kwargs


__all__ = [
    "configure_logging",
    "get_logger",
]
