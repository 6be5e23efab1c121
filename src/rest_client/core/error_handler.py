# src/rest_client/core/error_handler.py

from typing import Optional

from .exceptions import (
    DeserializationError,
    TimeoutError,
    classify_requests_exception,
)
from .options import ClientOptions, ResponseStatus
from .response import RestResponse


class ErrorHandler:
    """Решает, поднять ошибку или записать её в RestResponse.

    Ошибки десериализации управляются только throw_on_deserialization_error
    и fail_on_deserialization_error; все остальные - только throw_on_any_error.
    """

    @staticmethod
    def handle_deserialization_error(
        options: ClientOptions,
        response: RestResponse,
        error: DeserializationError
    ) -> None:
        """
        Матрица для ошибок десериализации:

        throw=True              -> поднять DeserializationError
        throw=False, fail=True  -> status=ERROR, ошибка в ответе
        throw=False, fail=False -> status не меняется, ошибка как диагностика
        """
        response.data = None
        response.set_error(error)

        if options.throw_on_deserialization_error:
            raise error

        if options.fail_on_deserialization_error:
            response.status = ResponseStatus.ERROR

    @staticmethod
    def handle_request_exception(
        options: ClientOptions,
        response: RestResponse,
        error: Exception,
        url: Optional[str] = None,
        timeout_ms: Optional[int] = None
    ) -> None:
        """Обрабатывает сбои подготовки и отправки запроса."""
        our_error = classify_requests_exception(error, url, timeout_ms)

        if options.throw_on_any_error:
            if our_error is error:
                raise our_error
            raise our_error from error

        response.set_error(our_error)
        if isinstance(our_error, TimeoutError):
            response.status = ResponseStatus.TIMED_OUT
        else:
            response.status = ResponseStatus.ERROR

