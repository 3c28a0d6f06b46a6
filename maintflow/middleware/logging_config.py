"""
Structured logging for the workflow service.

Two output formats on stderr:
    json      one JSON object per line, for the log aggregator (production)
    readable  coloured single line for a terminal (development, testing)

LOG_LEVEL picks the level (INFO in production, DEBUG otherwise) and
LOG_FORMAT forces a format regardless of environment.

Request context travels as ``extra=`` fields (see REQUEST_FIELDS); the
timing middleware fills them in for every API call.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Attributes copied from a LogRecord into the JSON line when present
REQUEST_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
    "intervention_id",
)

SERVICE_NAME = "maintflow"

_NOISY_LOGGERS = ("werkzeug", "urllib3", "flask_limiter", "limits")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, timestamped from the record itself."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for key in REQUEST_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = round(value, 1) if key == "duration_ms" else value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message [#id] [status 12ms]`` with ANSI colours."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{ts} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        intervention_id = getattr(record, "intervention_id", None)
        if intervention_id is not None:
            line += f" [#{intervention_id}]"
        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            status = getattr(record, "status", "")
            line += f" [{status} {duration:.0f}ms]"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _select_format(app) -> str:
    forced = os.getenv("LOG_FORMAT", "").lower()
    if forced in ("json", "readable"):
        return forced
    if app.config.get("DEBUG") or app.config.get("TESTING"):
        return "readable"
    return "json"


def configure_logging(app):
    """Install a single stderr handler on the root logger.

    Safe to call once per app instance: the root handlers are replaced, not
    appended to.
    """
    fmt = _select_format(app)
    level_name = os.getenv("LOG_LEVEL", "INFO" if fmt == "json" else "DEBUG").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ReadableFormatter())
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.setLevel(level)
    if not app.config.get("TESTING"):
        app.logger.info("Logging configured: level=%s format=%s", level_name, fmt)
