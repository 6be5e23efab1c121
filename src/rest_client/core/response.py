"""Result object returned by RestClient.execute()."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from .options import ResponseStatus
from .request import RestRequest


def declared_charset(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """
    Charset from the Content-Type header, only when the server set one.

    requests falls back to ISO-8859-1 for ``text/*``; that guess is not used.
    """
    content_type = headers.get("Content-Type") if headers else None
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("'\"") or None
    return None


@dataclass
class RestResponse:
    """
    Outcome of one logical request.

    With the default error policy failures are recorded here instead of
    being raised, so callers can branch on ``status``/``is_successful``.

    Attributes:
        request: The request that produced this response
        status: Client-level outcome (see ClientOptions.classify_response)
        status_code: HTTP status code (0 when no response was received)
        reason: HTTP reason phrase
        url: Final URL after redirects
        headers: Response headers
        content: Raw body
        encoding: Body charset declared in Content-Type (None if absent)
        data: Deserialized body (None if not requested or failed)
        error_message: Description of a captured failure
        error_exception: The captured exception
        raw: The underlying requests.Response, if any
    """

    request: RestRequest
    status: ResponseStatus = ResponseStatus.NONE
    status_code: int = 0
    reason: str = ""
    url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""
    encoding: Optional[str] = None
    data: Any = None
    error_message: Optional[str] = None
    error_exception: Optional[BaseException] = None
    raw: Optional[requests.Response] = None

    @classmethod
    def from_raw(cls, request: RestRequest, raw: requests.Response) -> "RestResponse":
        """Copy the transport-level fields of ``raw``."""
        return cls(
            request=request,
            status_code=raw.status_code,
            reason=raw.reason or "",
            url=raw.url,
            headers=raw.headers,
            content=raw.content or b"",
            encoding=declared_charset(raw.headers),
            raw=raw,
        )

    @property
    def is_successful_status_code(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_successful(self) -> bool:
        return self.is_successful_status_code and self.status == ResponseStatus.COMPLETED

    @property
    def text(self) -> str:
        if not self.content:
            return ""
        return self.content.decode(self.encoding or "utf-8", errors="replace")

    def set_error(self, error: BaseException) -> None:
        """Attach a captured failure as diagnostic data."""
        self.error_exception = error
        self.error_message = str(error)

    def raise_for_error(self) -> None:
        """Re-raise a captured failure, if any."""
        if self.error_exception is not None:
            raise self.error_exception
