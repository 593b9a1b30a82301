"""
Logging setup for dynstore applications and the CLI.

Library modules only create loggers through get_logger(); handlers are
installed by setup_logging(), which the CLI calls on startup.

Environment Variables:
    DYNSTORE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL - default: INFO
    DYNSTORE_LOG_FORMAT: json or text - default: json
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(trace_id)s] %(message)s"


class TraceIDFilter(logging.Filter):
    """Give records logged without an adapter a trace_id of "N/A"."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Replace root handlers with one stderr handler.

    Args:
        level: Level name; falls back to DYNSTORE_LOG_LEVEL
        fmt: "json" or "text"; falls back to DYNSTORE_LOG_FORMAT
    """
    resolved = _resolve_level(level or os.getenv("DYNSTORE_LOG_LEVEL", "INFO"))
    log_format = (fmt or os.getenv("DYNSTORE_LOG_FORMAT", "json")).lower()

    root = logging.getLogger()
    root.setLevel(resolved)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    # stderr keeps CLI --json output on stdout parseable
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())
    if log_format == "json":
        handler.setFormatter(
            JsonFormatter(
                JSON_FIELDS,
                rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """Logger for `name` whose records carry trace_id (a store name, say)."""
    return logging.LoggerAdapter(logging.getLogger(name), {"trace_id": trace_id or "N/A"})
