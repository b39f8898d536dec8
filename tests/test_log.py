import json
import logging

from jobmatch.log import JSONFormatter, get_session_id, set_session_id


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord("jobmatch.chat", logging.INFO, __file__, 1, msg, None, None)


def test_formatter_includes_session_when_set() -> None:
    set_session_id("abc123")
    try:
        line = JSONFormatter().format(_record("reply sent"))
    finally:
        set_session_id(None)

    data = json.loads(line)
    assert data["level"] == "INFO"
    assert data["logger"] == "jobmatch.chat"
    assert data["msg"] == "reply sent"
    assert data["session_id"] == "abc123"
    assert get_session_id() is None


def test_formatter_omits_session_when_unset() -> None:
    data = json.loads(JSONFormatter().format(_record("startup")))
    assert "session_id" not in data
    assert isinstance(data["ts"], float)
