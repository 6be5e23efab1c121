"""Authentication strategies for RestClient."""
from .api_key import ApiKeyAuthenticator
from .base import Authenticator
from .http_basic import HttpBasicAuthenticator
from .jwt import JwtAuthenticator

__all__ = ["Authenticator", "ApiKeyAuthenticator", "HttpBasicAuthenticator", "JwtAuthenticator"]
