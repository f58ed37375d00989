from __future__ import annotations

import json
import logging
import sys

from ddb_bench.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_ROUNDS = 10
EXPECTED_MISMATCHES = 3


def _record(msg: str = "hello", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.rounds = EXPECTED_ROUNDS
    record.adapter = "native"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["rounds"] == EXPECTED_ROUNDS
    assert payload["adapter"] == "native"


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"mismatches": EXPECTED_MISMATCHES}

    payload = json.loads(_json_formatter(record))

    assert payload["mismatches"] == EXPECTED_MISMATCHES
    assert "extra" not in payload


def test_json_formatter_leaves_out_builtin_record_attributes() -> None:
    payload = json.loads(_json_formatter(_record()))

    for builtin in ("pathname", "lineno", "args", "msecs", "threadName"):
        assert builtin not in payload


def test_json_formatter_renders_exceptions_and_unserializable_values() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record(exc_info=sys.exc_info())
    record.path = object()

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exc_info"]
    assert payload["path"].startswith("<object object")


def test_configure_logging_quiets_botocore() -> None:
    configure_logging(level="DEBUG", json_logs=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("botocore").level == logging.WARNING
    handler = logging.getLogger().handlers[0]
    assert isinstance(handler.formatter, JsonFormatter)
