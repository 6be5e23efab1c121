"""API key authentication (header or query string)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import requests

from ..core.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from ..core.options import ClientOptions

_LOCATIONS = ("header", "query")


@dataclass(slots=True)
class ApiKeyAuthenticator:
    """Send an API key either as a header or as a query parameter.

    Query values go through ``options.encode_query`` like any other query
    parameter.
    """

    api_key: str
    name: str = "X-API-Key"
    location: str = "header"

    def __post_init__(self) -> None:
        if self.location not in _LOCATIONS:
            raise InvalidArgumentError(f"must be one of {_LOCATIONS}", "location")

    def authenticate(self, request: requests.PreparedRequest, options: ClientOptions) -> None:
        if self.location == "header":
            request.headers[self.name] = self.api_key
            return
        pair = (
            f"{options.encode_query(self.name, options.text_encoding)}="
            f"{options.encode_query(self.api_key, options.text_encoding)}"
        )
        separator = "&" if "?" in request.url else "?"
        request.url = f"{request.url}{separator}{pair}"
