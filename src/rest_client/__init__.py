"""REST Client Library - HTTP client driven by a shared options/policy object."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.rest_client import RestClient
from .core.options import (
    ClientOptions,
    ClientCertificate,
    DecompressionMethod,
    ResponseStatus,
    SslPolicyErrors,
    default_classify_response,
)
from .core.request import Parameter, ParameterType, RestRequest
from .core.response import RestResponse
from .core.deserializer import JsonDeserializer
from .core.exceptions import (
    RestClientException,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    SSLError,
    TooManyRedirectsError,
    CertificateValidationError,
    ConfigurationError,
    InvalidArgumentError,
    DeserializationError,
)
from .core.logging import LoggingConfig
from .core.env_config import load_from_env, OptionsFileLoader, ConfigValidationError
from .authenticators import (
    Authenticator,
    HttpBasicAuthenticator,
    JwtAuthenticator,
    ApiKeyAuthenticator,
)

# NullHandler: без настройки логирования пакет молчит
logging.getLogger('rest_client').addHandler(logging.NullHandler())

try:
    __version__ = version("rest-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "RestClient",
    "ClientOptions",
    "ClientCertificate",
    "DecompressionMethod",
    "ResponseStatus",
    "SslPolicyErrors",
    "default_classify_response",

    # Request / Response
    "Parameter",
    "ParameterType",
    "RestRequest",
    "RestResponse",
    "JsonDeserializer",

    # Exceptions
    "RestClientException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "SSLError",
    "TooManyRedirectsError",
    "CertificateValidationError",
    "ConfigurationError",
    "InvalidArgumentError",
    "DeserializationError",

    # Config
    "LoggingConfig",
    "load_from_env",
    "OptionsFileLoader",
    "ConfigValidationError",

    # Authenticators
    "Authenticator",
    "HttpBasicAuthenticator",
    "JwtAuthenticator",
    "ApiKeyAuthenticator",

    "__version__",
]
