"""Authenticator contract."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import requests

if TYPE_CHECKING:
    from ..core.options import ClientOptions


@runtime_checkable
class Authenticator(Protocol):
    """Strategy that adds authentication material to an outgoing request.

    The client calls ``authenticate`` exactly once per attempt, including
    every redirect hop, right before the request is sent.
    """

    def authenticate(self, request: requests.PreparedRequest, options: ClientOptions) -> None:
        """Mutate ``request`` in place (headers, query string, ...)."""
