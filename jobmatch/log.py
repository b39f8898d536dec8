"""Stdout logging for the web app.

Records from a request handler carry the browser session they belong to,
so one user's chat and analysis activity can be followed across lines.
"""

import json
import logging
import sys
from contextvars import ContextVar

_session_id: ContextVar[str | None] = ContextVar("session_id", default=None)


def set_session_id(sid: str | None) -> None:
    """Set/clear the session id attached to log records."""
    _session_id.set(sid)


def get_session_id() -> str | None:
    return _session_id.get()


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, epoch seconds, logger, message, session."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "level": record.levelname,
            "ts": round(record.created, 3),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        sid = _session_id.get()
        if sid:
            base["session_id"] = sid
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def configure_logging(level: int | str = "INFO", json_logs: bool = True) -> logging.Logger:
    """Configure root logging to stdout.

    Args:
        level: Logging level as int or string (e.g. logging.INFO or "INFO").
        json_logs: Use `JSONFormatter` when True, a plain text format otherwise.

    Returns:
        The "jobmatch" logger.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger("jobmatch")


__all__ = ["configure_logging", "set_session_id", "get_session_id", "JSONFormatter"]
