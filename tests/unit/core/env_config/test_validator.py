"""
Tests for OptionsModel and RestClientSettings.
"""

import pytest
from pydantic import ValidationError

from rest_client.core.env_config.validator import (
    LoggingSettings,
    OptionsModel,
    RestClientSettings,
)
from rest_client.core.logging.config import LogFormat, LogLevel
from rest_client.core.options import ClientCertificate, ClientOptions, DecompressionMethod


class TestOptionsModel:

    def test_defaults_match_client_options(self):
        options = OptionsModel().to_options()
        defaults = ClientOptions()

        for name in (
            "follow_redirects", "max_redirects", "max_timeout_ms", "automatic_decompression",
            "user_agent", "text_encoding", "throw_on_deserialization_error",
            "fail_on_deserialization_error", "throw_on_any_error",
        ):
            assert getattr(options, name) == getattr(defaults, name), name

    def test_full_mapping(self):
        model = OptionsModel.model_validate({
            "base_url": "https://api.example.com",
            "username": "user",
            "password": "pw",
            "client_certificates": [{"cert_file": "c.pem", "key_file": "c.key"}],
            "automatic_decompression": ["br"],
            "max_redirects": 3,
            "logging": {"level": "debug", "format": "json"},
        })
        options = model.to_options()

        assert options.credentials == ("user", "pw")
        assert options.client_certificates == (ClientCertificate("c.pem", "c.key"),)
        assert options.automatic_decompression == frozenset({DecompressionMethod.BROTLI})
        assert options.max_redirects == 3
        assert options.logging.level == LogLevel.DEBUG
        assert options.logging.format == LogFormat.JSON

    def test_overrides_win(self):
        sentinel = object()
        options = OptionsModel(max_timeout_ms=100).to_options(max_timeout_ms=50, authenticator=sentinel)
        assert options.max_timeout_ms == 50
        assert options.authenticator is sentinel

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            OptionsModel.model_validate({"follow_redirect": True})

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            OptionsModel(max_redirects=-1)
        with pytest.raises(ValidationError):
            OptionsModel(max_timeout_ms=-1)

    def test_unknown_decompression_rejected(self):
        with pytest.raises(ValidationError):
            OptionsModel(automatic_decompression=["zstd"])

    def test_password_requires_username(self):
        with pytest.raises(ValidationError):
            OptionsModel(password="pw")

    def test_logging_settings(self):
        config = LoggingSettings(level="warning", file_path="/tmp/x.log").to_logging_config()
        assert config.level == LogLevel.WARNING
        assert config.file_path == "/tmp/x.log"


class TestRestClientSettings:

    def test_reads_prefixed_env(self, clean_env):
        clean_env.setenv("REST_CLIENT_BASE_URL", "https://env.example.com")
        clean_env.setenv("REST_CLIENT_MAX_TIMEOUT_MS", "2500")
        clean_env.setenv("REST_CLIENT_THROW_ON_ANY_ERROR", "true")
        clean_env.setenv("REST_CLIENT_AUTOMATIC_DECOMPRESSION", "gzip, BR")

        model = RestClientSettings().to_options_model()

        assert model.base_url == "https://env.example.com"
        assert model.max_timeout_ms == 2500
        assert model.throw_on_any_error is True
        assert model.automatic_decompression == ["gzip", "br"]
        assert model.logging is None

    def test_empty_decompression(self, clean_env):
        clean_env.setenv("REST_CLIENT_AUTOMATIC_DECOMPRESSION", "")
        assert RestClientSettings().to_options_model().automatic_decompression == []

    def test_logging_enabled_by_level(self, clean_env):
        clean_env.setenv("REST_CLIENT_LOG_LEVEL", "debug")
        clean_env.setenv("REST_CLIENT_LOG_FORMAT", "JSON")

        model = RestClientSettings().to_options_model()

        assert model.logging.level == "DEBUG"
        assert model.logging.format == "json"

    def test_client_certificate(self, clean_env):
        clean_env.setenv("REST_CLIENT_CLIENT_CERT_FILE", "/certs/c.pem")

        model = RestClientSettings().to_options_model()

        assert model.client_certificates[0].cert_file == "/certs/c.pem"
        assert model.client_certificates[0].key_file is None

    def test_invalid_value(self, clean_env):
        clean_env.setenv("REST_CLIENT_MAX_REDIRECTS", "-3")
        with pytest.raises(ValidationError):
            RestClientSettings()
