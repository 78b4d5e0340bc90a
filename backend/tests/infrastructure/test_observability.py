"""Structured logging — JSON lines with extra fields when present."""

import json
import logging

from session_tracker.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "session_tracker.test", logging.INFO, __file__, 1, "saved %s", ("x",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "session_tracker.test"
    assert log["message"] == "saved x"
    assert "session_id" not in log


def test_json_formatter_surfaces_extras():
    log = json.loads(JSONFormatter().format(
        _record(session_id="s1", user_id="u1", error_code="FETCH_ERROR"),
    ))
    assert log["session_id"] == "s1"
    assert log["user_id"] == "u1"
    assert log["error_code"] == "FETCH_ERROR"
