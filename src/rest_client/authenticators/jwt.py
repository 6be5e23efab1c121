"""JWT bearer token authentication."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from ..core.options import ClientOptions


@dataclass(slots=True)
class JwtAuthenticator:
    """Apply an already issued bearer token."""

    token: str

    def authenticate(self, request: requests.PreparedRequest, options: ClientOptions) -> None:
        token = self.token
        if token.lower().startswith("bearer "):
            token = token[len("bearer "):]
        request.headers["Authorization"] = f"Bearer {token}"

    def update_token(self, token: str) -> None:
        """Replace the token used by subsequent requests."""
        self.token = token
