import json
import logging

import pytest

from btcchecker.errors import ConfigError
from btcchecker.observability import JSONFormatter, setup_logging


def test_json_formatter_includes_request_fields():
    record = logging.LogRecord("btcchecker.http", logging.INFO, __file__, 1, "started %s", ("GET",), None)
    record.request_id = "abc"
    out = json.loads(JSONFormatter().format(record))
    assert out["message"] == "started GET"
    assert out["level"] == "INFO"
    assert out["request_id"] == "abc"
    assert "status" not in out


def test_setup_logging_sets_level():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    try:
        setup_logging("warning", "json")
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[-1].formatter, JSONFormatter)
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ConfigError):
        setup_logging("chatty")
