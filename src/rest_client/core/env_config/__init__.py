"""
Environment and file configuration for REST Client.

Example:
    >>> from rest_client.core.env_config import load_from_env, OptionsFileLoader
    >>>
    >>> # From REST_CLIENT_* variables and .env
    >>> options = load_from_env()
    >>>
    >>> # From YAML, with callables supplied in code
    >>> options = OptionsFileLoader.from_yaml("client.yaml", authenticator=auth)
"""

from .loader import load_from_env
from .file_loader import OptionsFileLoader, ConfigValidationError, CONFIG_FILE_ENV_VAR
from .validator import (
    RestClientSettings,
    OptionsModel,
    LoggingSettings,
    ClientCertificateModel,
)

__all__ = [
    "load_from_env",
    "OptionsFileLoader",
    "ConfigValidationError",
    "CONFIG_FILE_ENV_VAR",
    "RestClientSettings",
    "OptionsModel",
    "LoggingSettings",
    "ClientCertificateModel",
]
