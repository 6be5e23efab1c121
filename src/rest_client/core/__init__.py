"""Core REST Client модули."""

from .options import (
    ClientOptions,
    ClientCertificate,
    DecompressionMethod,
    ResponseStatus,
    SslPolicyErrors,
    default_classify_response,
)
from .encoding import url_encode, url_encode_query
from .exceptions import (
    RestClientException,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    SSLError,
    TooManyRedirectsError,
    CertificateValidationError,
    FatalError,
    ConfigurationError,
    InvalidArgumentError,
    DeserializationError,
    classify_requests_exception,
)
from .request import Parameter, ParameterType, RestRequest
from .response import RestResponse
from .deserializer import JsonDeserializer
from .error_handler import ErrorHandler
from .transport import CertificateValidatingAdapter, create_adapter
from .rest_client import RestClient

__all__ = [
    # Options
    "ClientOptions",
    "ClientCertificate",
    "DecompressionMethod",
    "ResponseStatus",
    "SslPolicyErrors",
    "default_classify_response",
    "url_encode",
    "url_encode_query",

    # Exceptions
    "RestClientException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "SSLError",
    "TooManyRedirectsError",
    "CertificateValidationError",
    "FatalError",
    "ConfigurationError",
    "InvalidArgumentError",
    "DeserializationError",
    "classify_requests_exception",

    # Request / Response
    "Parameter",
    "ParameterType",
    "RestRequest",
    "RestResponse",
    "JsonDeserializer",

    # Client
    "ErrorHandler",
    "CertificateValidatingAdapter",
    "create_adapter",
    "RestClient",
]
