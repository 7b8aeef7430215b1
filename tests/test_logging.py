import json
import logging

from fxwidget.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx


def _record(**extra):
    record = logging.LogRecord("fxwidget.test", logging.INFO, __file__, 1, "refreshed %s", ("BRL",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_rate_context():
    record = _record(base="BRL", provider="frankfurter")
    RequestIdFilter().filter(record)

    out = json.loads(JsonFormatter().format(record))

    assert out["message"] == "refreshed BRL"
    assert out["base"] == "BRL"
    assert out["provider"] == "frankfurter"
    assert "kind" not in out
    assert out["request_id"] == "-"


def test_request_id_comes_from_context():
    token = request_id_ctx.set("abc-123")
    try:
        record = _record()
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx.reset(token)

    assert json.loads(JsonFormatter().format(record))["request_id"] == "abc-123"
