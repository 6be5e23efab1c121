# src/rest_client/core/rest_client.py
from typing import Any, Callable, List, Optional, Tuple, TYPE_CHECKING
import json
import threading
import time
from urllib.parse import urljoin, urlsplit

import requests
from requests.models import DEFAULT_REDIRECT_LIMIT
from requests.structures import CaseInsensitiveDict
from requests.utils import get_netrc_auth

from .error_handler import ErrorHandler
from .exceptions import DeserializationError, InvalidArgumentError, TooManyRedirectsError
from .options import ClientOptions, Credentials, DecompressionMethod, ResponseStatus
from .request import Parameter, ParameterType, RestRequest
from .response import RestResponse
from .session_manager import ThreadSafeSessionManager
from .transport import create_adapter

if TYPE_CHECKING:
    from ..authenticators.base import Authenticator
    from .logging import RestClientLogger

Deserializer = Callable[[RestResponse], Any]

# Эти параметры могут повторяться независимо от опций (?a=1&a=2)
_MULTI_PARAMETER_TYPES = frozenset({ParameterType.QUERY})

# Порядок значений в Accept-Encoding
_DECOMPRESSION_ORDER = (DecompressionMethod.GZIP, DecompressionMethod.DEFLATE, DecompressionMethod.BROTLI)


class RestClient:
    """
    REST клиент, который применяет ClientOptions к каждому запросу.

    Жизненный цикл запроса:
        1. build_url: URL segment -> options.encode, query -> options.encode_query
        2. Каждая попытка (включая редиректы и повтор после 401):
           credentials -> authenticator.authenticate() -> отправка
        3. options.classify_response() - ровно один раз на обмен
        4. Десериализация (если передан deserializer)
        5. Ошибки: ErrorHandler по флагам throw_on_* / fail_on_*

    Thread-safe: ClientOptions общий, сессии requests у каждого потока свои.

    Example:
        >>> client = RestClient(ClientOptions(base_url="https://api.example.com"))
        >>> response = client.get("users/{id}", parameters=[Parameter("id", 1, ParameterType.URL_SEGMENT)])
        >>> if response.is_successful:
        ...     print(response.text)
    """

    def __init__(
        self,
        options: Optional[ClientOptions] = None,
        base_url: Optional[str] = None
    ):
        """
        Args:
            options: ClientOptions instance
            base_url: Shortcut for ClientOptions(base_url=...); overrides options.base_url
        """
        if options is None:
            options = ClientOptions(base_url=base_url)
        elif base_url is not None:
            options = options.copy(base_url=base_url)

        self._options = options
        self._error_handler = ErrorHandler()
        self._default_parameters: List[Parameter] = []
        self._parameters_lock = threading.Lock()

        logger_instance: Optional["RestClientLogger"] = None
        if options.logging:
            from .logging import RestClientLogger
            logger_name = "rest_client.client"
            if options.base_url:
                logger_name = f"rest_client.{urlsplit(options.base_url).netloc}"
            logger_instance = RestClientLogger(config=options.logging, name=logger_name)
        self._logger = logger_instance

        self._session_manager = ThreadSafeSessionManager(session_factory=self._create_session)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self):
        """Закрывает логгер и все сессии (из всех потоков)."""
        if self._logger is not None:
            self._logger.close()
        self._session_manager.close_all()

    def reset_transport(self):
        """
        Пересоздать сессии при следующем запросе.

        Нужно после смены configure_transport, remote_certificate_validator
        или user_agent: они применяются при создании сессии.
        """
        self._session_manager.close_all()

    def _create_session(self) -> requests.Session:
        """Create a session configured from the current options."""
        options = self._options
        session = requests.Session()
        # netrc и прокси из окружения управляются опциями явно
        session.trust_env = False

        adapter = create_adapter(options)
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        if options.user_agent:
            session.headers['User-Agent'] = options.user_agent
        else:
            session.headers.pop('User-Agent', None)

        methods = [m.value for m in _DECOMPRESSION_ORDER if m in options.automatic_decompression]
        session.headers['Accept-Encoding'] = ", ".join(methods) if methods else "identity"

        return session

    # ==================== Default parameters ====================

    def add_default_parameter(self, parameter: Parameter) -> "RestClient":
        """
        Добавить параметр ко всем запросам клиента.

        Raises:
            InvalidArgumentError: Параметр с таким именем уже есть, а
                allow_multiple_default_parameters_with_same_name выключен
                (query параметры могут повторяться всегда)
        """
        with self._parameters_lock:
            if (
                not self._options.allow_multiple_default_parameters_with_same_name
                and parameter.type not in _MULTI_PARAMETER_TYPES
                and any(p.name == parameter.name for p in self._default_parameters)
            ):
                raise InvalidArgumentError(
                    f"a default parameter named {parameter.name!r} has already been added",
                    "parameter"
                )
            self._default_parameters.append(parameter)
        return self

    @property
    def default_parameters(self) -> Tuple[Parameter, ...]:
        with self._parameters_lock:
            return tuple(self._default_parameters)

    def _merged_parameters(self, request: RestRequest) -> List[Parameter]:
        """Request parameters first; defaults fill in what the request lacks."""
        merged = list(request.parameters)
        for default in self.default_parameters:
            overridden = default.type not in _MULTI_PARAMETER_TYPES and any(
                p.name == default.name and p.type == default.type for p in request.parameters
            )
            if not overridden:
                merged.append(default)
        return merged

    # ==================== URL, headers, body ====================

    def build_url(self, request: RestRequest) -> str:
        """
        Строит полный URL запроса.

        Example:
            >>> req = RestRequest("users/{id}").add_url_segment("id", "a b")
            >>> client.build_url(req.add_query_parameter("q", "x&y"))
            'https://api.example.com/users/a%20b?q=x%26y'
        """
        options = self._options
        parameters = self._merged_parameters(request)

        resource = request.resource
        for p in parameters:
            if p.type == ParameterType.URL_SEGMENT:
                value = str(p.value)
                resource = resource.replace("{%s}" % p.name, options.encode(value) if p.encode else value)

        if resource.startswith(("http://", "https://")):
            url = resource
        elif options.base_url:
            base = options.base_url.rstrip("/")
            url = f"{base}/{resource.lstrip('/')}" if resource else options.base_url
        else:
            url = resource

        query = []
        for p in parameters:
            if p.type == ParameterType.QUERY:
                value = str(p.value)
                if p.encode:
                    value = options.encode_query(value, options.text_encoding)
                query.append(f"{options.encode_query(p.name, options.text_encoding)}={value}")
        if query:
            url += ("&" if "?" in url else "?") + "&".join(query)

        return url

    def _build_headers(self, request: RestRequest) -> CaseInsensitiveDict:
        options = self._options
        headers: CaseInsensitiveDict = CaseInsensitiveDict()

        if options.base_host:
            headers['Host'] = options.base_host
        if options.cache_policy:
            headers['Cache-Control'] = options.cache_policy
        if options.expect_100_continue:
            headers['Expect'] = '100-continue'

        for p in self._merged_parameters(request):
            if p.type == ParameterType.HEADER:
                headers[p.name] = str(p.value)

        headers.setdefault('X-Correlation-ID', request.request_id)
        return headers

    def _build_body(self, request: RestRequest, headers: CaseInsensitiveDict) -> Optional[bytes]:
        """Encode the body with options.text_encoding; bytes are sent as is."""
        body = request.body
        if body is None:
            return None
        if isinstance(body, (bytes, bytearray)):
            return bytes(body)

        text = body if isinstance(body, str) else json.dumps(body)
        content_type = request.content_type
        if not self._options.disable_charset:
            content_type += f"; charset={self._options.text_encoding}"
        headers.setdefault('Content-Type', content_type)
        return text.encode(self._options.text_encoding)

    # ==================== Sending ====================

    def _resolve_credentials(self, url: str) -> Optional[Credentials]:
        if self._options.credentials is not None:
            return self._options.credentials
        if self._options.use_default_credentials:
            return get_netrc_auth(url)
        return None

    @staticmethod
    def _redirect_method(method: str, status_code: int) -> str:
        """Same method switching as browsers and requests."""
        if status_code in (302, 303) and method != 'HEAD':
            return 'GET'
        if status_code == 301 and method == 'POST':
            return 'GET'
        return method

    def _send(
        self,
        request: RestRequest,
        url: str,
        authenticator: Optional["Authenticator"],
        timeout_ms: Optional[int]
    ) -> requests.Response:
        """
        Отправить запрос, следуя редиректам и 401-челленджу вручную.

        Authenticator вызывается ровно один раз на каждую попытку.
        """
        options = self._options
        session = self.session
        method = request.method
        headers = self._build_headers(request)
        body = self._build_body(request, headers)

        certificates = options.client_certificates
        send_kwargs = {
            'timeout': timeout_ms / 1000 if timeout_ms else None,
            'verify': True,
            'cert': certificates[0].as_requests_cert() if certificates else None,
            'proxies': dict(options.proxy or {}),
            'allow_redirects': False,
        }

        max_redirects = options.max_redirects
        if max_redirects is None:
            max_redirects = DEFAULT_REDIRECT_LIMIT

        credentials = self._resolve_credentials(url)
        send_credentials = credentials is not None and options.pre_authenticate
        challenged = False
        history: List[requests.Response] = []

        while True:
            prepared = session.prepare_request(
                requests.Request(method=method, url=url, headers=dict(headers), data=body)
            )
            if send_credentials:
                prepared.prepare_auth(credentials)
            if authenticator is not None:
                authenticator.authenticate(prepared, options)

            raw = session.send(prepared, **send_kwargs)

            if raw.status_code == 401 and credentials is not None and not send_credentials and not challenged:
                challenged = send_credentials = True
                raw.close()
                continue

            if not (options.follow_redirects and raw.is_redirect):
                break

            if len(history) >= max_redirects:
                raw.close()
                raise TooManyRedirectsError(max_redirects, url)

            history.append(raw)
            raw.close()

            location = session.get_redirect_target(raw)
            if location.startswith('//'):
                location = f"{urlsplit(raw.url).scheme}:{location}"
            url = urljoin(raw.url, location)
            if session.should_strip_auth(raw.url, url):
                # base_host belongs to the original host
                credentials = None
                send_credentials = False
                headers.pop('Host', None)

            new_method = self._redirect_method(method, raw.status_code)
            if new_method != method:
                body = None
                headers.pop('Content-Type', None)
                method = new_method

            if self._logger:
                self._logger.debug(
                    "Redirect followed",
                    status_code=raw.status_code,
                    location=url,
                    method=method,
                    redirects=len(history)
                )

        raw.history = history
        return raw

    def execute(
        self,
        request: RestRequest,
        deserializer: Optional[Deserializer] = None
    ) -> RestResponse:
        """
        Выполнить запрос.

        Args:
            request: Запрос
            deserializer: RestResponse -> данные (например, JsonDeserializer(User))

        Returns:
            RestResponse. С политикой по умолчанию ошибки записываются в
            ответ, а не поднимаются.

        Raises:
            DeserializationError: throw_on_deserialization_error=True
            TransportError: throw_on_any_error=True
        """
        options = self._options
        # Снимок: смена authenticator не влияет на уже начатый запрос
        authenticator = request.authenticator or options.authenticator
        timeout_ms = options.resolve_timeout(request.timeout_ms)
        response = RestResponse(request=request)
        url: Optional[str] = None
        start_time = time.time()

        if self._logger:
            from .logging.filters import set_correlation_id
            set_correlation_id(request.request_id)

        try:
            try:
                url = self.build_url(request)
                if self._logger:
                    self._logger.info(
                        "Request started",
                        method=request.method,
                        url=url,
                        timeout_ms=timeout_ms
                    )
                raw = self._send(request, url, authenticator, timeout_ms)
                response = RestResponse.from_raw(request, raw)
                response.status = options.classify_response(raw)
            except Exception as e:
                if self._logger:
                    self._logger.error(
                        "Request failed",
                        method=request.method,
                        url=url,
                        error=str(e),
                        error_type=type(e).__name__,
                        duration_ms=round((time.time() - start_time) * 1000, 2)
                    )
                self._error_handler.handle_request_exception(options, response, e, url, timeout_ms)
                return response

            if (
                deserializer is not None
                and response.status == ResponseStatus.COMPLETED
                and response.is_successful_status_code
                and response.content
            ):
                try:
                    response.data = deserializer(response)
                except Exception as e:
                    error = e if isinstance(e, DeserializationError) else DeserializationError(
                        "Deserialization failed", response, e
                    )
                    if self._logger:
                        self._logger.warning(
                            "Deserialization failed",
                            url=url,
                            status_code=response.status_code,
                            error=str(error)
                        )
                    self._error_handler.handle_deserialization_error(options, response, error)

            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=request.method,
                    url=url,
                    status_code=response.status_code,
                    status=response.status.value,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                    response_size=len(response.content)
                )
            return response
        finally:
            if self._logger:
                from .logging.filters import clear_correlation_id
                clear_correlation_id()

    def _execute_method(self, method: str, resource: str, deserializer: Optional[Deserializer], **kwargs: Any) -> RestResponse:
        return self.execute(RestRequest(resource=resource, method=method, **kwargs), deserializer)

    def get(self, resource: str = "", deserializer: Optional[Deserializer] = None, **kwargs: Any) -> RestResponse:
        """GET запрос. kwargs - поля RestRequest (parameters, timeout_ms, ...)."""
        return self._execute_method("GET", resource, deserializer, **kwargs)

    def post(self, resource: str = "", deserializer: Optional[Deserializer] = None, **kwargs: Any) -> RestResponse:
        """POST запрос. Тело передаётся через body=..."""
        return self._execute_method("POST", resource, deserializer, **kwargs)

    def put(self, resource: str = "", deserializer: Optional[Deserializer] = None, **kwargs: Any) -> RestResponse:
        return self._execute_method("PUT", resource, deserializer, **kwargs)

    def patch(self, resource: str = "", deserializer: Optional[Deserializer] = None, **kwargs: Any) -> RestResponse:
        return self._execute_method("PATCH", resource, deserializer, **kwargs)

    def delete(self, resource: str = "", deserializer: Optional[Deserializer] = None, **kwargs: Any) -> RestResponse:
        return self._execute_method("DELETE", resource, deserializer, **kwargs)

    def head(self, resource: str = "", **kwargs: Any) -> RestResponse:
        return self._execute_method("HEAD", resource, None, **kwargs)

    def options_request(self, resource: str = "", **kwargs: Any) -> RestResponse:
        """OPTIONS запрос (имя `options` занято свойством)."""
        return self._execute_method("OPTIONS", resource, None, **kwargs)

    # ==================== Свойства ====================

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def authenticator(self) -> Optional["Authenticator"]:
        return self._options.authenticator

    @authenticator.setter
    def authenticator(self, value: Optional["Authenticator"]) -> None:
        self._options.authenticator = value

    @property
    def base_url(self) -> Optional[str]:
        return self._options.base_url

    @property
    def session(self) -> requests.Session:
        """Thread-local сессия текущего потока."""
        return self._session_manager.get_session()
