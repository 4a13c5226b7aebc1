"""Unit tests for structured JSON logging"""

import json
import logging
from pythonjsonlogger.json import JsonFormatter
from lending_gateway.infrastructure.observability.logging import CustomJsonFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("lending_gateway.events", logging.INFO, __file__, 1, "Loan payment recorded", None, None)
    record.__dict__.update(extra)
    return record


def test_formatter_built_on_current_json_module():
    assert issubclass(CustomJsonFormatter, JsonFormatter)


def test_formatter_emits_one_json_object():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")

    payload = json.loads(formatter.format(_record(request_id="req-1", outcome="partial")))

    assert payload["message"] == "Loan payment recorded"
    assert payload["level"] == "INFO"
    assert payload["service"] == "lending-gateway"
    assert payload["name"] == "lending_gateway.events"
    assert payload["request_id"] == "req-1"
    assert payload["outcome"] == "partial"
    assert payload["timestamp"].endswith("+00:00")
