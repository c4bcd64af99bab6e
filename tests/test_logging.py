import logging

import orjson
import pytest

from utils.logging import JsonFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("apps.cacher", logging.WARNING, __file__, 1, "Refreshed %s", ("a.m3u",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_message_and_extra():
    line = JsonFormatter().format(_record(attempts=3, url="https://upstream.test"))
    payload = orjson.loads(line)

    assert payload["message"] == "Refreshed a.m3u"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "apps.cacher"
    assert payload["attempts"] == 3
    assert payload["url"] == "https://upstream.test"
    assert "args" not in payload


def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(level="debug", format_type="text")
        setup_logging(level="debug", format_type="json")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_rejects_unknown_format():
    with pytest.raises(ValueError):
        setup_logging(format_type="xml")
