# src/fluent_http/plugins/plugin.py

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Optional

import requests

if TYPE_CHECKING:
    from ..core.exceptions import HttpException
    from ..core.request import HttpClientRequest


@dataclass(frozen=True)
class RequestEvent:
    """
    Событие о завершённом обмене, передаётся в RequestListener.response().

    Attributes:
        method: HTTP метод
        url: Итоговый URL запроса
        status_code: HTTP статус (499 при сбое транспорта)
        duration_ms: Время от отправки до получения ответа
        request_headers: Заголовки запроса
        response_headers: Заголовки ответа (пустые при сбое транспорта)
        error: Исключение, если запрос завершился ошибкой
    """
    method: str
    url: str
    status_code: int
    duration_ms: float
    request_headers: Mapping[str, str] = field(default_factory=dict)
    response_headers: Mapping[str, str] = field(default_factory=dict)
    error: Optional["HttpException"] = None

    @property
    def is_success(self) -> bool:
        return self.error is None and self.status_code < 300


class RequestListener:
    """
    Получает событие по каждому запросу, включая неудачные.

    Example:
        >>> class Timing(RequestListener):
        ...     def response(self, event):
        ...         print(event.url, event.duration_ms)
    """

    def response(self, event: RequestEvent) -> None:
        """Вызывается после каждого обмена."""
        pass


class RequestIntercept:
    """
    Перехватчик запроса.

    Перехватчики вызываются в порядке регистрации. after_response
    вызывается всегда, в том числе для статусов >= 300 и сбоев транспорта
    (тогда response=None).
    """

    def before_request(self, request: "HttpClientRequest") -> None:
        """Вызывается перед отправкой; может менять заголовки и тело."""
        pass

    def after_response(
        self,
        response: Optional[requests.Response],
        request: "HttpClientRequest",
    ) -> None:
        """Вызывается после получения ответа (или сбоя транспорта)."""
        pass
