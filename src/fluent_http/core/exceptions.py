"""
Иерархия исключений fluent-http-client.

Классификация:
- HttpException - ошибка обмена: статус >= 300 или сбой транспорта (499)
- CodecError - нет подходящего кодека для тела запроса/ответа
- ConfigurationError - некорректное использование клиента
"""

from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar

import requests

if TYPE_CHECKING:
    from .context import HttpClientContext

T = TypeVar("T")

# Статус для сбоев, когда сервер не вернул никакого HTTP ответа
TRANSPORT_FAILURE_STATUS = 499

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение fluent-http-client."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpException(HTTPClientException):
    """
    Ошибка выполнения запроса.

    Создаётся в двух случаях:
    - сервер ответил статусом >= 300 (есть response и сырое тело)
    - транспорт упал (I/O, таймаут, прерывание) - статус 499, response=None

    Тело ответа не декодируется при создании исключения. Методы
    body_as_bytes(), body_as_string() и bean() декодируют его по запросу
    через тот же BodyAdapter, что и успешные ответы.

    Args:
        status_code: HTTP статус (или 499 для сбоя транспорта)
        url: URL запроса
        response: Ответ транспорта (None при сбое транспорта)
        body: Сырые (не раскодированные) байты тела ответа
        context: Контекст, через который декодируется тело

    Example:
        >>> try:
        ...     ctx.request().path("hello").post().as_void()
        ... except HttpException as e:
        ...     errors = e.bean(dict)
    """

    def __init__(
        self,
        status_code: int,
        url: Optional[str] = None,
        response: Optional[requests.Response] = None,
        body: bytes = b"",
        context: Optional["HttpClientContext"] = None,
        message: str = "",
    ):
        self.status_code = status_code
        self.url = url
        self.response = response
        self.raw_body = body
        self._context = context

        msg = f"HTTP {status_code} error"
        if url:
            msg += f" for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

    @classmethod
    def transport_failure(cls, url: str, cause: BaseException) -> "HttpException":
        """Исключение для сбоя транспорта (статус 499), cause сохраняется в __cause__."""
        exc = cls(
            TRANSPORT_FAILURE_STATUS,
            url=url,
            message=f"{type(cause).__name__}: {cause}",
        )
        exc.__cause__ = cause
        return exc

    @property
    def is_transport_failure(self) -> bool:
        """True если ответа от сервера не было."""
        return self.response is None

    @property
    def headers(self) -> requests.structures.CaseInsensitiveDict:
        """Заголовки ответа (пустые при сбое транспорта)."""
        if self.response is None:
            return requests.structures.CaseInsensitiveDict()
        return self.response.headers

    def body_as_bytes(self) -> bytes:
        """Тело ответа после декодирования Content-Encoding."""
        if self._context is None or self.response is None:
            return self.raw_body
        return self._context.decode_response_body(self.response, self.raw_body)

    def body_as_string(self) -> str:
        """Тело ответа как строка (кодировка из Content-Type, по умолчанию utf-8)."""
        content = self._body_content()
        return content.text()

    def bean(self, cls: Type[T]) -> T:
        """
        Декодировать тело ответа в объект указанного типа.

        Raises:
            CodecError: Если нет подходящего reader для типа/content-type
        """
        if self._context is None:
            raise ConfigurationError("HttpException has no context to decode the body")
        return self._context.read_bean(cls, self._body_content())

    def _body_content(self):
        from .body import BodyContent

        if self._context is None or self.response is None:
            return BodyContent(None, self.raw_body)
        return self._context.read_content(self.response, self.raw_body)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CODECS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CodecError(HTTPClientException):
    """
    Нет кодека для (форма, тип, content-type) или кодек не смог
    (де)сериализовать данные.

    Args:
        message: Сообщение
        target: Тип, который пытались прочитать/записать
        content_type: Content-Type тела
    """

    def __init__(
        self,
        message: str,
        target: Any = None,
        content_type: Optional[str] = None,
    ):
        self.target = target
        self.content_type = content_type

        msg = message
        if target is not None:
            msg += f" (type: {getattr(target, '__name__', target)}"
            if content_type:
                msg += f", content-type: {content_type}"
            msg += ")"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СПЕЦИАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(HTTPClientException):
    """Ошибка конфигурации или повторное использование запроса."""
    pass
