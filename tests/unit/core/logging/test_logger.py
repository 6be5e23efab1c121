"""
Tests for RestClientLogger and client request logging.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

import responses

from rest_client.core.logging.config import LoggingConfig
from rest_client.core.logging.filters import clear_correlation_id, set_correlation_id
from rest_client.core.logging.logger import RestClientLogger
from rest_client.core.options import ClientOptions
from rest_client.core.request import RestRequest
from rest_client.core.rest_client import RestClient
from rest_client.utils.sanitizer import MASK


def _read_lines(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestRestClientLogger:

    def test_defaults(self):
        logger = RestClientLogger()
        assert logger.name == "rest_client"
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        logger.close()

    def test_file_handler(self, logging_config_with_file):
        logger = RestClientLogger(logging_config_with_file, name="rest_client.test_file")
        assert [type(h) for h in logger.handlers] == [RotatingFileHandler]
        logger.close()

    def test_structured_fields_masked(self, logging_config_with_file):
        with RestClientLogger(logging_config_with_file, name="rest_client.test_mask") as logger:
            logger.info("Request started", url="https://a.com/?api_key=secret", password="pw", method="GET")

        (line,) = _read_lines(logging_config_with_file.file_path)
        assert line["message"] == "Request started"
        assert line["url"] == f"https://a.com/?api_key={MASK}"
        assert line["password"] == MASK
        assert line["method"] == "GET"

    def test_correlation_id(self, logging_config_with_file):
        set_correlation_id("req-42")
        try:
            with RestClientLogger(logging_config_with_file, name="rest_client.test_cid") as logger:
                logger.warning("Something")
        finally:
            clear_correlation_id()

        (line,) = _read_lines(logging_config_with_file.file_path)
        assert line["correlation_id"] == "req-42"
        assert line["level"] == "WARNING"

    def test_level_filtering(self, tmp_path):
        config = LoggingConfig.create(
            level="WARNING", format="json", enable_console=False, file_path=str(tmp_path / "w.log")
        )
        with RestClientLogger(config, name="rest_client.test_level") as logger:
            logger.debug("hidden")
            logger.info("hidden")
            logger.error("shown")

        assert [line["message"] for line in _read_lines(config.file_path)] == ["shown"]

    def test_exception_includes_traceback(self, logging_config_with_file):
        with RestClientLogger(logging_config_with_file, name="rest_client.test_exc") as logger:
            try:
                raise ValueError("bad")
            except ValueError:
                logger.exception("Failed")

        (line,) = _read_lines(logging_config_with_file.file_path)
        assert "ValueError: bad" in line["exception"]

    def test_close_idempotent(self):
        logger = RestClientLogger()
        logger.close()
        logger.close()
        assert logger.handlers == []

    def test_recreate_replaces_handlers(self):
        first = RestClientLogger(name="rest_client.test_recreate")
        second = RestClientLogger(name="rest_client.test_recreate")
        assert len(second.handlers) == 1
        first.close()
        second.close()


class TestClientLogging:
    """Events logged by RestClient."""

    @responses.activate
    def test_request_lifecycle_logged(self, base_url, logging_config_with_file):
        responses.add(responses.GET, f"{base_url}/old", status=302, headers={"Location": "/new"})
        responses.add(responses.GET, f"{base_url}/new", json={})
        request = RestRequest("old").add_query_parameter("api_key", "secret")

        with RestClient(ClientOptions(base_url=base_url, logging=logging_config_with_file)) as client:
            client.execute(request)

        lines = _read_lines(logging_config_with_file.file_path)
        messages = [line["message"] for line in lines]
        assert messages == ["Request started", "Redirect followed", "Request completed"]
        assert lines[0]["url"] == f"{base_url}/old?api_key={MASK}"
        assert all(line["correlation_id"] == request.request_id for line in lines)
        assert lines[-1]["status_code"] == 200

    @responses.activate
    def test_failure_logged(self, base_url, logging_config_with_file):
        import requests

        responses.add(responses.GET, f"{base_url}/x", body=requests.exceptions.ConnectionError("refused"))

        with RestClient(ClientOptions(base_url=base_url, logging=logging_config_with_file)) as client:
            client.get("x")

        lines = _read_lines(logging_config_with_file.file_path)
        assert lines[-1]["message"] == "Request failed"
        assert lines[-1]["level"] == "ERROR"
        assert lines[-1]["error_type"] == "ConnectionError"

    @responses.activate
    def test_no_logging_by_default(self, client, base_url):
        responses.add(responses.GET, f"{base_url}/x", body="ok")
        client.get("x")
        assert client._logger is None
