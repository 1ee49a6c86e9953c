"""Structured Logging — JSON formatter, daily file sink, and setup for the service.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, student_id, error_kind, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development
    - File sink writes one JSON object per line to <log_dir>/<YYYY-MM-DD>.log

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging only, full control
    - setup_logging called once on startup via lifespan; repeated calls
      replace previously installed handlers instead of stacking them
"""

import json
import logging
import os
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "operation", "student_id", "error_kind", "error_code", "error_severity", "path",
    "backup_file", "record_count", "committed_ids",
)

_installed_handlers: list[logging.Handler] = []


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class DailyFileHandler(logging.Handler):
    """Append records to a file named after the current UTC date."""

    def __init__(self, log_dir: str):
        super().__init__()
        self.log_dir = log_dir
        os.makedirs(log_dir, exist_ok=True)

    def current_path(self) -> str:
        day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        return os.path.join(self.log_dir, f"{day}.log")

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with open(self.current_path(), "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except Exception:
            self.handleError(record)


def setup_logging(level: str = "INFO", fmt: str = "json", log_dir: str | None = None):
    """Configure logging for the application."""
    for handler in _installed_handlers:
        logging.root.removeHandler(handler)
    _installed_handlers.clear()

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    _installed_handlers.append(handler)

    if log_dir:
        file_handler = DailyFileHandler(log_dir)
        file_handler.setFormatter(JSONFormatter())
        _installed_handlers.append(file_handler)

    for h in _installed_handlers:
        logging.root.addHandler(h)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
