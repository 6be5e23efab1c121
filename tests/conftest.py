"""
Pytest configuration and fixtures for rest-client-core tests.
"""

import pytest
import responses as responses_lib

from rest_client.core.logging.config import LoggingConfig
from rest_client.core.logging.filters import clear_correlation_id
from rest_client.core.options import ClientOptions
from rest_client.core.rest_client import RestClient


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def options(base_url):
    """ClientOptions with default policies."""
    return ClientOptions(base_url=base_url)


@pytest.fixture
def client(options):
    """RestClient instance for testing."""
    client = RestClient(options)
    yield client
    client.close()


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig that writes JSON lines to a temporary file.

    The client logger does not propagate, so tests read the file.
    """
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        file_path=str(tmp_path / "client.log")
    )


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove REST_CLIENT_* variables and run from an empty directory (no stray .env)."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("REST_CLIENT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
