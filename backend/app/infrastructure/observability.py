"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Record context (driver_id, driver_number, team_id, team_name) and request
      context (error_code, path, operation) surfaced when present
    - JSON format in production; text format appends the same context as key=value
    - timestamp is the moment the record was created, in UTC

Design Decisions:
    - record_context() derives log extras from a driver or team record so every
      mutation log identifies the record the same way
"""

import logging
import json
from datetime import datetime, timezone

RECORD_FIELDS = ("driver_id", "driver_number", "team_id", "team_name")
REQUEST_FIELDS = ("error_code", "path", "operation")
EXTRA_FIELDS = RECORD_FIELDS + REQUEST_FIELDS


def record_context(record) -> dict:
    """Log extras identifying a driver (has driver_number) or a team."""
    if hasattr(record, "driver_number"):
        return {
            "driver_id": record.id,
            "driver_number": record.driver_number,
            "team_id": record.team_id,
        }
    return {"team_id": record.id, "team_name": record.name}


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update(_extras(record))
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with record context appended, e.g. `[driver_id=3 team_id=1]`."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if not extras:
            return line
        context = " ".join(f"{key}={value}" for key, value in extras.items())
        return f"{line} [{context}]"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
