"""HTTP Basic authentication."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import requests
from requests.auth import _basic_auth_str

if TYPE_CHECKING:
    from ..core.options import ClientOptions


@dataclass(slots=True)
class HttpBasicAuthenticator:
    """Apply HTTP Basic auth headers."""

    username: str
    password: str

    def authenticate(self, request: requests.PreparedRequest, options: ClientOptions) -> None:
        request.headers["Authorization"] = _basic_auth_str(self.username, self.password)
