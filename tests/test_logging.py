from __future__ import annotations

import json
import logging

from autopress.utils.logging import JsonFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("autopress.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extras() -> None:
    data = json.loads(JsonFormatter().format(_record(event="batch.item", topic="coffee")))
    assert data["message"] == "hello world"
    assert data["event"] == "batch.item"
    assert data["topic"] == "coffee"
    assert data["level"] == "INFO"


def test_json_formatter_masks_secrets() -> None:
    data = json.loads(
        JsonFormatter().format(_record(password="hunter2", details={"api_key": "k", "url": "u"}))
    )
    assert data["password"] == "***"
    assert data["details"] == {"api_key": "***", "url": "u"}
