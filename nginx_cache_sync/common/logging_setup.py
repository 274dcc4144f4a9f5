"""
Logging Setup

One line per event on stdout, prefixed the way the daemon has always
tagged its output:

    {"msg": "[nginx-cache-sync] Cache cleared successfully", "level": "info", ..., "path": "/var/run/nginx-cache/"}

Text mode writes the same prefixed message followed by key=value pairs.
Context travels in a single ``fields`` extra; build it with log_fields().
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

LOG_PREFIX = "[nginx-cache-sync]"
ROOT_LOGGER = "nginx_cache_sync"


def log_fields(**fields: Any) -> dict:
    """extra= payload carrying structured context for one log call"""
    return {"fields": fields}


class JsonFormatter(logging.Formatter):
    """Single JSON object per line: prefixed msg, level, time, then fields"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "msg": f"{LOG_PREFIX} {record.getMessage()}",
            "level": record.levelname.lower(),
            "time": datetime.now(timezone.utc).isoformat(),
            "logger": record.name,
        }
        for key, value in getattr(record, "fields", {}).items():
            # Fixed keys win over context of the same name
            entry.setdefault(key, value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Prefixed plain text with key=value context, for running in a terminal"""

    def __init__(self):
        super().__init__(
            f"%(asctime)s %(levelname)s {LOG_PREFIX} %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        fields = getattr(record, "fields", None)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def configure_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Attach the stdout handler to the package logger.

    Called once with defaults before settings load (so configuration errors
    are still reported) and again with the configured level and format.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_format else TextFormatter())
    logger.addHandler(handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. get_logger("sync.purger")"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
