"""
Tests for JSON and text formatters.
"""

import json
import logging

import pytest

from rest_client.core.logging.formatters import JSONFormatter, TextFormatter, get_formatter


def _record(**extra):
    record = logging.LogRecord("rest_client", logging.INFO, __file__, 1, "Request completed", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_fields(self):
        line = JSONFormatter().format(_record(method="GET", status_code=200))
        data = json.loads(line)

        assert data["level"] == "INFO"
        assert data["logger"] == "rest_client"
        assert data["message"] == "Request completed"
        assert data["method"] == "GET"
        assert data["status_code"] == 200
        assert "timestamp" in data

    def test_non_serializable_extra(self):
        line = JSONFormatter().format(_record(obj=object()))
        assert "object" in json.loads(line)["obj"]


class TestTextFormatter:

    def test_extras_appended(self):
        line = TextFormatter().format(_record(method="GET"))
        assert "[INFO] [rest_client] Request completed" in line
        assert line.endswith("method=GET")

    def test_no_extras(self):
        line = TextFormatter().format(_record())
        assert line.endswith("Request completed")


class TestGetFormatter:

    def test_known(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("TEXT"), TextFormatter)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown format type"):
            get_formatter("colored")
