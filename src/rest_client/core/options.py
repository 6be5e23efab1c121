"""
Опции REST клиента.

ClientOptions - набор настроек и политик, которые клиент читает на каждом
запросе: идентичность (base_url, base_host), безопасность, поведение
транспорта, кодирование, классификация ответа и политика ошибок.

Экземпляр разделяется всеми потоками клиента по ссылке. Поля задаются при
создании; authenticator и configure_transport можно переназначать позже.
Переприсваивание атрибута в CPython атомарно, поэтому конкурентный запрос
видит либо старый, либо новый authenticator, но никогда не "половину".
"""

import codecs
import dataclasses
import warnings
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    FrozenSet,
    Mapping,
    Optional,
    Tuple,
    Union,
)
from urllib.parse import ParseResult, SplitResult, urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.auth import AuthBase

from .encoding import url_encode, url_encode_query
from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from ..authenticators.base import Authenticator
    from .logging import LoggingConfig

DEFAULT_USER_AGENT = "rest-client-core"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ENUMS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResponseStatus(str, Enum):
    """Client-level outcome of an exchange."""
    NONE = "none"
    COMPLETED = "completed"
    ERROR = "error"
    TIMED_OUT = "timed_out"
    ABORTED = "aborted"


class DecompressionMethod(str, Enum):
    """Content codings advertised in Accept-Encoding."""
    GZIP = "gzip"
    DEFLATE = "deflate"
    BROTLI = "br"


class SslPolicyErrors(IntFlag):
    """Certificate problems found by the default TLS verification."""
    NONE = 0
    REMOTE_CERTIFICATE_NOT_AVAILABLE = 1
    REMOTE_CERTIFICATE_NAME_MISMATCH = 2
    REMOTE_CERTIFICATE_CHAIN_ERRORS = 4


@dataclass(frozen=True)
class ClientCertificate:
    """
    Клиентский сертификат для mutual TLS.

    Args:
        cert_file: Путь к PEM сертификату (может содержать и ключ)
        key_file: Путь к приватному ключу (опционально)
    """
    cert_file: str
    key_file: Optional[str] = None

    def as_requests_cert(self) -> Union[str, Tuple[str, str]]:
        """Вернуть в формате параметра ``cert`` для requests."""
        if self.key_file:
            return (self.cert_file, self.key_file)
        return self.cert_file

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# POLICY FUNCTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

ClassifyResponse = Callable[[requests.Response], ResponseStatus]
EncodeValue = Callable[[str], str]
EncodeQueryValue = Callable[[str, str], str]
CertificateValidator = Callable[[Optional[bytes], Tuple[bytes, ...], SslPolicyErrors], bool]
TransportDecorator = Callable[[BaseAdapter], BaseAdapter]
Credentials = Union[AuthBase, Tuple[str, str]]


def default_classify_response(response: requests.Response) -> ResponseStatus:
    """
    Классификация по умолчанию.

    404 считается завершённым обменом: ресурс отсутствует, но HTTP-обмен
    прошёл корректно. Остальные не-2xx коды - ERROR.
    """
    status_code = response.status_code
    if 200 <= status_code < 300 or status_code == 404:
        return ResponseStatus.COMPLETED
    return ResponseStatus.ERROR


def _parse_base_url(value: Any) -> str:
    """Validate a base URL and return it as a string."""
    if isinstance(value, (SplitResult, ParseResult)):
        value = value.geturl()
    if not isinstance(value, str):
        raise InvalidArgumentError(
            f"expected str or parsed URL, got {type(value).__name__}", "base_url"
        )
    if not value.strip():
        raise InvalidArgumentError("must not be empty", "base_url")
    if any(ch.isspace() for ch in value):
        raise InvalidArgumentError(f"invalid URI {value!r}", "base_url")
    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidArgumentError(f"invalid URI {value!r}: {e}", "base_url") from e
    if not parts.scheme or not parts.netloc:
        raise InvalidArgumentError(f"not an absolute URI {value!r}", "base_url")
    return value

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT OPTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

# Логически часть неизменяемой политики; смена после создания - escape hatch
_SET_ONCE_FIELDS = frozenset({"encode", "encode_query"})


@dataclass(eq=False)
class ClientOptions:
    """
    Главная конфигурация RestClient.

    Args:
        base_url: Базовый URL (str или urllib.parse.SplitResult/ParseResult)
        base_host: Значение заголовка Host, независимое от base_url
        authenticator: Стратегия аутентификации (можно менять между запросами)
        configure_transport: Декоратор транспортного адаптера requests
        client_certificates: Клиентские сертификаты (используется первый)
        credentials: requests AuthBase или (user, password)
        use_default_credentials: Брать учётные данные из netrc, если credentials не заданы
        pre_authenticate: Отправлять credentials сразу, не дожидаясь 401
        remote_certificate_validator: (cert, chain, policy_errors) -> bool
        proxy: {'http': ..., 'https': ...} или один URL для обеих схем
        cache_policy: Значение Cache-Control для всех запросов
        follow_redirects: Следовать редиректам
        max_redirects: Лимит редиректов (None = по умолчанию requests)
        max_timeout_ms: Лимит времени запроса в мс (0 = без лимита)
        automatic_decompression: Поддерживаемые content codings
        expect_100_continue: None (не задано) / True / False
        user_agent: Заголовок User-Agent (None = не отправлять)
        text_encoding: Кодировка текста запроса и query-значений
        disable_charset: Не добавлять charset в Content-Type
        encode: Кодирование path/segment значений
        encode_query: Кодирование query значений (value, encoding)
        allow_multiple_default_parameters_with_same_name: Разрешить дубли default параметров
        classify_response: requests.Response -> ResponseStatus
        throw_on_deserialization_error: Поднимать DeserializationError
        fail_on_deserialization_error: Помечать ответ как ERROR при ошибке десериализации
        throw_on_any_error: Поднимать транспортные ошибки вместо записи в ответ
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> options = ClientOptions(base_url="https://api.example.com")
        >>> options = ClientOptions.from_url("https://api.example.com", max_timeout_ms=5000)
    """
    base_url: Optional[str] = None
    base_host: Optional[str] = None

    authenticator: Optional["Authenticator"] = None
    configure_transport: Optional[TransportDecorator] = None

    client_certificates: Tuple[ClientCertificate, ...] = ()
    credentials: Optional[Credentials] = None
    use_default_credentials: bool = False
    pre_authenticate: bool = False
    remote_certificate_validator: Optional[CertificateValidator] = None

    proxy: Optional[Mapping[str, str]] = None
    cache_policy: Optional[str] = None
    follow_redirects: bool = True
    max_redirects: Optional[int] = None
    max_timeout_ms: int = 0
    automatic_decompression: FrozenSet[DecompressionMethod] = field(
        default_factory=lambda: frozenset({DecompressionMethod.GZIP, DecompressionMethod.DEFLATE})
    )
    expect_100_continue: Optional[bool] = None
    user_agent: Optional[str] = DEFAULT_USER_AGENT

    text_encoding: str = "utf-8"
    disable_charset: bool = False
    encode: EncodeValue = url_encode
    encode_query: EncodeQueryValue = url_encode_query
    allow_multiple_default_parameters_with_same_name: bool = False

    classify_response: ClassifyResponse = default_classify_response

    throw_on_deserialization_error: bool = False
    fail_on_deserialization_error: bool = True
    throw_on_any_error: bool = False

    logging: Optional["LoggingConfig"] = None

    def __post_init__(self):
        """Validate the base URL and numeric limits, normalize collections."""
        if self.base_url is not None:
            object.__setattr__(self, "base_url", _parse_base_url(self.base_url))

        if self.max_redirects is not None and self.max_redirects < 0:
            raise InvalidArgumentError("must be non-negative", "max_redirects")
        if self.max_timeout_ms < 0:
            raise InvalidArgumentError("must be non-negative", "max_timeout_ms")

        try:
            codecs.lookup(self.text_encoding)
        except LookupError as e:
            raise InvalidArgumentError(f"unknown encoding {self.text_encoding!r}", "text_encoding") from e

        if isinstance(self.proxy, str):
            object.__setattr__(self, "proxy", {"http": self.proxy, "https": self.proxy})
        object.__setattr__(self, "client_certificates", tuple(self.client_certificates))
        object.__setattr__(
            self,
            "automatic_decompression",
            frozenset(DecompressionMethod(m) for m in self.automatic_decompression),
        )

        object.__setattr__(self, "_initialized", True)

    def __setattr__(self, name, value):
        """Warn when the encode functions are swapped after construction."""
        if name in _SET_ONCE_FIELDS and getattr(self, "_initialized", False):
            warnings.warn(
                f"Changing '{name}' after the options were created is discouraged: "
                f"requests already in flight may use either function.",
                RuntimeWarning,
                stacklevel=2
            )
        object.__setattr__(self, name, value)

    @classmethod
    def from_url(
        cls,
        base_url: Union[str, SplitResult, ParseResult],
        **kwargs
    ) -> "ClientOptions":
        """
        Создать опции с обязательным base_url.

        Raises:
            InvalidArgumentError: Если URL пустой или не распознаётся

        Example:
            >>> options = ClientOptions.from_url("https://api.example.com/v1")
        """
        if base_url is None:
            raise InvalidArgumentError("must not be empty", "base_url")
        return cls(base_url=base_url, **kwargs)

    def resolve_timeout(self, request_timeout_ms: Optional[int] = None) -> Optional[int]:
        """
        Вычислить эффективный таймаут (мс).

        Минимум из max_timeout_ms и таймаута запроса, если заданы оба;
        иначе тот, что задан; иначе None.

        Example:
            >>> ClientOptions(max_timeout_ms=5000).resolve_timeout(2000)
            2000
        """
        candidates = [t for t in (self.max_timeout_ms, request_timeout_ms) if t]
        if not candidates:
            return None
        return min(candidates)

    def copy(self, **changes: Any) -> "ClientOptions":
        """
        Создать копию опций с изменёнными полями.

        Example:
            >>> strict = options.copy(throw_on_any_error=True)
        """
        return dataclasses.replace(self, **changes)
