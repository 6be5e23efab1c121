"""Request model passed to RestClient.execute()."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from ..authenticators.base import Authenticator


class ParameterType(str, Enum):
    """Where a parameter is placed in the outgoing request."""
    URL_SEGMENT = "url_segment"
    QUERY = "query"
    HEADER = "header"


@dataclass(frozen=True)
class Parameter:
    """A named request parameter.

    Attributes:
        name: Parameter name (``{name}`` placeholder for URL segments)
        value: Parameter value, converted with ``str()``
        type: Placement of the parameter
        encode: Pass the value through the options' encode function
    """

    name: str
    value: Any
    type: ParameterType = ParameterType.QUERY
    encode: bool = True


@dataclass
class RestRequest:
    """
    A single logical request.

    Attributes:
        resource: Path relative to base_url (or an absolute URL), may hold
            ``{name}`` placeholders for URL segment parameters
        method: HTTP method
        parameters: URL segment, query and header parameters
        body: bytes, str, or any JSON-serializable object
        content_type: Media type for str/JSON bodies
        timeout_ms: Request-level timeout (None = client cap only)
        authenticator: Overrides ClientOptions.authenticator for this request
        request_id: Unique id, sent as X-Correlation-ID

    Example:
        >>> req = RestRequest("users/{id}").add_url_segment("id", 42)
        >>> req.add_query_parameter("expand", "roles")
    """

    resource: str = ""
    method: str = "GET"
    parameters: List[Parameter] = field(default_factory=list)
    body: Any = None
    content_type: str = "application/json"
    timeout_ms: Optional[int] = None
    authenticator: Optional["Authenticator"] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        self.method = self.method.upper()

    def add_parameter(self, parameter: Parameter) -> "RestRequest":
        self.parameters.append(parameter)
        return self

    def add_url_segment(self, name: str, value: Any, encode: bool = True) -> "RestRequest":
        return self.add_parameter(Parameter(name, value, ParameterType.URL_SEGMENT, encode))

    def add_query_parameter(self, name: str, value: Any, encode: bool = True) -> "RestRequest":
        return self.add_parameter(Parameter(name, value, ParameterType.QUERY, encode))

    def add_header(self, name: str, value: str) -> "RestRequest":
        return self.add_parameter(Parameter(name, value, ParameterType.HEADER, False))

    def parameters_of(self, parameter_type: ParameterType) -> List[Parameter]:
        """Return parameters of one placement, in insertion order."""
        return [p for p in self.parameters if p.type == parameter_type]
