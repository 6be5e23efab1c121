"""
Десериализация тела ответа.

Любая ошибка (битый JSON, неверная кодировка, несовпадение схемы)
превращается в DeserializationError; что с ней делать, решает
ErrorHandler по флагам ClientOptions.
"""

import dataclasses
import json
from typing import Any, Callable, Optional

from .exceptions import DeserializationError
from .response import RestResponse


class JsonDeserializer:
    """
    JSON десериализатор с опциональным приведением к модели.

    Args:
        model: Что сделать с декодированным JSON:
            - pydantic модель (используется ``model_validate``)
            - dataclass или класс (dict передаётся как kwargs)
            - любая другая функция одного аргумента
            - None - вернуть декодированный JSON как есть

    Examples:
        >>> JsonDeserializer()(response)
        >>> JsonDeserializer(User)(response)
    """

    def __init__(self, model: Optional[Callable[..., Any]] = None):
        self.model = model

    def __call__(self, response: RestResponse) -> Any:
        # без явного charset json.loads сам определяет UTF-8/16/32
        content = response.content
        try:
            decoded = json.loads(content.decode(response.encoding) if response.encoding else content)
        except (UnicodeDecodeError, LookupError, ValueError) as e:
            raise DeserializationError("Response did not contain valid JSON", response, e) from e

        if self.model is None:
            return decoded

        try:
            return self._build(decoded)
        except DeserializationError:
            raise
        except Exception as e:
            raise DeserializationError(
                f"Could not map response to {getattr(self.model, '__name__', self.model)!r}",
                response,
                e
            ) from e

    def _build(self, decoded: Any) -> Any:
        model = self.model
        validate = getattr(model, "model_validate", None)
        if callable(validate):
            return validate(decoded)
        if isinstance(decoded, dict) and (dataclasses.is_dataclass(model) or isinstance(model, type)):
            return model(**decoded)
        return model(decoded)
