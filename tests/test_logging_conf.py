"""Tests for the JSON log formatter."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from staticdir.domain.outcomes import OutcomeKind
from staticdir.logging_conf import JsonFormatter, get_logger


def _record(msg, *, extra: dict | None = None, exc_info=None) -> logging.LogRecord:
    logger = logging.getLogger("test.json")
    return logger.makeRecord(
        "test.json", logging.INFO, __file__, 1, msg, (), exc_info, extra=extra
    )


def test_base_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record("static.stream")))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.json"
    assert payload["message"] == "static.stream"
    assert "ts" in payload


def test_extra_fields_are_merged() -> None:
    line = JsonFormatter().format(
        _record("static.stream", extra={"event": "static_stream", "size": 12})
    )
    payload = json.loads(line)

    assert payload["event"] == "static_stream"
    assert payload["size"] == 12
    assert "\n" not in line


def test_unencodable_values_become_strings() -> None:
    payload = json.loads(
        JsonFormatter().format(
            _record("x", extra={"file": Path("/srv/a.txt"), "kind": OutcomeKind.not_found})
        )
    )

    assert payload["file"] == "/srv/a.txt"
    assert payload["kind"] == "not_found"


def test_dict_message_is_inlined() -> None:
    payload = json.loads(JsonFormatter().format(_record({"event": "summary", "passed": 3})))

    assert payload["event"] == "summary"
    assert payload["passed"] == 3
    assert "message" not in payload


def test_exception_info() -> None:
    try:
        raise PermissionError("denied")
    except PermissionError:
        rec = _record("static.error", exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(rec))

    assert "PermissionError: denied" in payload["exc_info"]


def test_get_logger_names() -> None:
    assert get_logger("service.static").name == "service.static"
    assert get_logger().name == "staticdir"
