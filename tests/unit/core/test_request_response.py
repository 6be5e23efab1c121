"""
Tests for RestRequest and RestResponse models.
"""

import pytest
import requests

from rest_client.core.exceptions import ConnectionError
from rest_client.core.options import ResponseStatus
from rest_client.core.request import Parameter, ParameterType, RestRequest
from rest_client.core.response import RestResponse, declared_charset


class TestRestRequest:

    def test_defaults(self):
        request = RestRequest()
        assert request.resource == ""
        assert request.method == "GET"
        assert request.parameters == []
        assert request.timeout_ms is None
        assert request.authenticator is None
        assert request.request_id

    def test_method_uppercased(self):
        assert RestRequest("x", "post").method == "POST"

    def test_unique_request_ids(self):
        assert RestRequest().request_id != RestRequest().request_id

    def test_fluent_parameters(self):
        request = (
            RestRequest("users/{id}")
            .add_url_segment("id", 42)
            .add_query_parameter("expand", "roles")
            .add_header("X-Trace", "abc")
        )

        assert request.parameters_of(ParameterType.URL_SEGMENT) == [
            Parameter("id", 42, ParameterType.URL_SEGMENT)
        ]
        assert request.parameters_of(ParameterType.QUERY)[0].name == "expand"
        header = request.parameters_of(ParameterType.HEADER)[0]
        assert header.encode is False

    def test_parameter_is_immutable(self):
        parameter = Parameter("a", 1)
        with pytest.raises(Exception):
            parameter.name = "b"


class TestRestResponse:

    def _raw(self, status_code=200, content=b'{"a": 1}') -> requests.Response:
        raw = requests.Response()
        raw.status_code = status_code
        raw.reason = "OK"
        raw._content = content
        raw.url = "https://api.example.com/a"
        raw.headers["Content-Type"] = "application/json"
        raw.encoding = "utf-8"
        return raw

    def test_from_raw(self):
        request = RestRequest("a")
        response = RestResponse.from_raw(request, self._raw())

        assert response.request is request
        assert response.status == ResponseStatus.NONE
        assert response.status_code == 200
        assert response.reason == "OK"
        assert response.url == "https://api.example.com/a"
        assert response.headers["content-type"] == "application/json"
        assert response.text == '{"a": 1}'

    def test_is_successful_requires_completed(self):
        response = RestResponse.from_raw(RestRequest(), self._raw())
        assert response.is_successful_status_code is True
        assert response.is_successful is False

        response.status = ResponseStatus.COMPLETED
        assert response.is_successful is True

    def test_completed_404_is_not_successful(self):
        response = RestResponse.from_raw(RestRequest(), self._raw(404, b""))
        response.status = ResponseStatus.COMPLETED
        assert response.is_successful is False
        assert response.text == ""

    def test_raise_for_error(self):
        response = RestResponse(request=RestRequest())
        response.raise_for_error()

        error = ConnectionError("refused")
        response.set_error(error)
        assert response.error_message == "refused"
        with pytest.raises(ConnectionError):
            response.raise_for_error()

    def test_undeclared_charset_not_guessed(self):
        raw = self._raw(content='{"name": "é"}'.encode())
        raw.headers["Content-Type"] = "text/plain"
        raw.encoding = "ISO-8859-1"

        response = RestResponse.from_raw(RestRequest(), raw)

        assert response.encoding is None
        assert response.text == '{"name": "é"}'


class TestDeclaredCharset:

    @pytest.mark.parametrize("content_type, expected", [
        ("application/json; charset=utf-8", "utf-8"),
        ('text/plain; Charset="latin-1"', "latin-1"),
        ("text/plain", None),
        ("text/html; boundary=x", None),
        ("", None),
    ])
    def test_parse(self, content_type, expected):
        assert declared_charset({"Content-Type": content_type}) == expected

    def test_no_headers(self):
        assert declared_charset(None) is None
