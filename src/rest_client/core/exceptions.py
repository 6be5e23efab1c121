"""
Иерархия исключений REST Client.

Классификация:
- TransportError (retryable=True) - сбой на уровне транспорта
- FatalError (fatal=True) - ошибка конфигурации или данных, НЕ ретраить

Какие из них поднимаются наружу, а какие сохраняются в RestResponse,
решает ErrorHandler по флагам ClientOptions.
"""

from typing import Any, Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RestClientException(Exception):
    """Базовое исключение REST Client."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(RestClientException):
    """
    Сетевая или протокольная ошибка, полученная от транспорта.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """
    retryable = True

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_ms: Эффективный таймаут (мс)
    """

    def __init__(self, message: str, url: Optional[str] = None, timeout_ms: Optional[int] = None):
        self.timeout_ms = timeout_ms
        msg = message
        if timeout_ms:
            msg += f" (timeout: {timeout_ms}ms)"
        super().__init__(msg, url)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    pass

class ProxyError(ConnectionError):
    """Ошибка прокси."""
    pass

class SSLError(ConnectionError):
    """TLS handshake failed."""
    retryable = False

class TooManyRedirectsError(TransportError):
    """
    Превышен лимит редиректов.

    Args:
        max_redirects: Лимит из ClientOptions
        url: Последний URL
    """
    retryable = False

    def __init__(self, max_redirects: int, url: Optional[str] = None):
        self.max_redirects = max_redirects
        super().__init__(f"Exceeded {max_redirects} redirects", url)

class CertificateValidationError(TransportError):
    """
    Сертификат сервера отклонён remote_certificate_validator.

    Args:
        url: URL запроса
        policy_errors: Ошибки политики, переданные валидатору
    """
    retryable = False

    def __init__(self, url: Optional[str] = None, policy_errors: Any = None):
        self.policy_errors = policy_errors
        msg = "Remote certificate was rejected by the validation callback"
        if policy_errors:
            msg += f" (policy errors: {policy_errors!r})"
        super().__init__(msg, url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(RestClientException):
    """Фатальная ошибка - НЕ ретраить."""
    fatal = True

class ConfigurationError(FatalError):
    """Ошибка конфигурации."""
    pass

class InvalidArgumentError(ConfigurationError, ValueError):
    """
    Невалидный аргумент конфигурации.

    Примеры:
    - Пустой или нераспознаваемый base_url
    - Отрицательный max_redirects
    - Дублирующийся default parameter
    """

    def __init__(self, message: str, argument: Optional[str] = None):
        self.argument = argument
        msg = message
        if argument:
            msg = f"{argument}: {message}"
        super().__init__(msg)

class DeserializationError(FatalError):
    """
    Тело ответа не удалось привести к ожидаемой форме.

    Args:
        message: Сообщение
        response: RestResponse, для которого упала десериализация
        cause: Исходное исключение
    """

    def __init__(self, message: str, response: Any = None, cause: Optional[BaseException] = None):
        self.response = response
        self.cause = cause
        msg = message
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: Optional[str] = None,
    timeout_ms: Optional[int] = None
) -> RestClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Наши собственные исключения возвращаются как есть.

    Args:
        exc: Исключение из requests (или любое другое)
        url: URL запроса
        timeout_ms: Эффективный таймаут запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, RestClientException):
        return exc

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout_ms)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError("Proxy error", url)

    elif isinstance(exc, requests.exceptions.SSLError):
        return SSLError(f"SSL error: {exc}", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError("Connection error", url)

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TransportError(f"Too many redirects: {exc}", url)

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request failed: {exc}", url)

    else:
        # Неизвестная ошибка (например, из authenticator) - оборачиваем
        return RestClientException(f"Unexpected error: {exc}")
