"""Logging setup for Formata.

Text output by default; ``structured=True`` switches to one JSON object per
record. Session context (project name, current frame) travels as
LoggerAdapter extras and lands in the JSON ``context`` block.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else on a record is an extra.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as ``{"level", "message", "timestamp", "context"}``.

    ``context`` holds the emitting location (logger name, module, function,
    line), any extras such as ``project`` or ``frame_id``, and the error type,
    message and stack trace when the record carries an exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **_extras(record),
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            context["error_type"] = exc_type.__name__ if exc_type else None
            context["error_message"] = str(exc_value) if exc_value else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        created = datetime.fromtimestamp(record.created, tz=UTC)
        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": created.isoformat(),
                "context": context,
            },
            default=str,
        )


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single root handler, replacing any previous configuration.

    Args:
        level: Level name, case-insensitive.
        format_string: Text format. Ignored when ``structured`` is set.
        filename: Log file path. Logs go to stdout when None.
        structured: Emit JSON lines via StructuredJSONFormatter.

    Examples:
        >>> configure_logging(level="DEBUG")
        >>> configure_logging(structured=True, filename="editor.jsonl")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    )
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger, wrapped to attach ``context`` to every record.

    Context values that are None are dropped, so callers can pass optional
    state (e.g. no current frame) unconditionally. With no context left the
    plain logger is returned.

    Example:
        >>> log = get_logger(__name__, project="Spring Show", frame_id=None)
        >>> log.extra
        {'project': 'Spring Show'}
    """
    named = logging.getLogger(name)
    extra = {key: value for key, value in context.items() if value is not None}
    if extra:
        return logging.LoggerAdapter(named, extra)
    return named
