# src/fluent_http/core/context.py
"""
HttpClientContext: shared configuration, codecs, hooks and token cache.

One context is created per target service and shared by all threads; each
call to ``request()`` returns a fresh single-use request.
"""
import gzip
import logging
import uuid
import zlib
from typing import Any, Iterable, List, Optional, Type, TypeVar
from urllib.parse import urlparse

import requests
from requests.exceptions import RequestException

from ..adapters.json_adapter import JsonBodyAdapter
from ..plugins.plugin import RequestIntercept, RequestListener
from .auth import AuthTokenCache, AuthTokenProvider
from .body import BodyAdapter, BodyContent
from .config import HttpClientConfig, TimeoutConfig
from .exceptions import CodecError, ConfigurationError, HttpException
from .logging import HttpClientLogger
from .logging.filters import clear_correlation_id, set_correlation_id
from .request import HttpClientRequest
from .transport import RequestsTransport, Transport
from .url_builder import UrlBuilder

T = TypeVar("T")

logger = logging.getLogger(__name__)



def first_header(headers: Any, name: str) -> Optional[str]:
    """
    First value of a header, case-insensitive.

    requests joins repeated headers with ", "; only the first value is kept.
    """
    value = headers.get(name) if headers is not None else None
    if not value:
        return None
    return value.split(",")[0].strip()


class HttpClientContext:
    """
    Контекст HTTP клиента.

    Features:
        - Fluent запросы: ctx.request().path(...).get().bean(Dto)
        - Подстановка Bearer токена с кешированием (AuthTokenProvider)
        - Перехватчики и слушатели вызываются для каждого запроса, в том
          числе неудачного
        - Декодирование gzip, выбор кодека по Content-Type
        - Thread-safe: один контекст на много потоков

    Example:
        >>> with HttpClientContext(base_url="http://localhost:8887") as ctx:
        ...     res = ctx.request().path("hello").path("message").get().as_string()
        ...     print(res.status_code, res.body)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[HttpClientConfig] = None,
        transport: Optional[Transport] = None,
        body_adapter: Optional[BodyAdapter] = None,
        auth_token_provider: Optional[AuthTokenProvider] = None,
        intercepts: Optional[Iterable[RequestIntercept]] = None,
        listeners: Optional[Iterable[RequestListener]] = None,
    ):
        """
        Args:
            base_url: Базовый URL (переопределяет config.base_url)
            config: HttpClientConfig
            transport: Транспорт (по умолчанию RequestsTransport)
            body_adapter: Реестр кодеков (по умолчанию JsonBodyAdapter)
            auth_token_provider: Источник Bearer токенов (None = без авторизации)
            intercepts: Перехватчики, вызываются в порядке регистрации
            listeners: Слушатели событий запросов
        """
        if config is None:
            config = HttpClientConfig(base_url=base_url)
        elif base_url is not None:
            config = config.with_base_url(base_url)

        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_transport", transport or RequestsTransport(config))
        object.__setattr__(self, "_body_adapter", body_adapter or JsonBodyAdapter(config.default_content_type))
        object.__setattr__(self, "_auth_token_provider", auth_token_provider)
        object.__setattr__(self, "_token_cache", AuthTokenCache())
        object.__setattr__(self, "_intercepts", tuple(intercepts or ()))
        object.__setattr__(self, "_listeners", tuple(listeners or ()))

        logger_instance: Optional[HttpClientLogger] = None
        if config.logging:
            logger_name = "fluent_http"
            if config.base_url:
                logger_name = f"fluent_http.{urlparse(config.base_url).netloc or 'client'}"
            logger_instance = HttpClientLogger(config=config.logging, name=logger_name)
        object.__setattr__(self, "_logger", logger_instance)

        object.__setattr__(self, "_initialized", True)

    def __setattr__(self, name, value):
        """Контекст неизменяем после создания."""
        if hasattr(self, "_initialized"):
            raise RuntimeError(
                f"Cannot modify '{name}' - HttpClientContext is immutable. "
                f"Create new instance instead."
            )
        object.__setattr__(self, name, value)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Закрывает логгер и сессии транспорта."""
        if self._logger is not None:
            self._logger.close()
        self._transport.close()

    # ==================== Public API ====================

    def request(self) -> HttpClientRequest:
        """Новый запрос с настройками контекста по умолчанию."""
        return HttpClientRequest(self, self._config.timeout)

    def url(self) -> UrlBuilder:
        """UrlBuilder от base_url контекста."""
        return UrlBuilder(self._config.base_url)

    def converters(self) -> BodyAdapter:
        return self._body_adapter

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def token_cache(self) -> AuthTokenCache:
        return self._token_cache

    def check_response(self, response: requests.Response, body: bytes = b"",
                       url: Optional[str] = None) -> None:
        """
        Raise HttpException for status >= 300.

        The body is attached undecoded; the exception decodes it on demand.
        """
        if response.status_code >= 300:
            raise HttpException(
                response.status_code,
                url=url or response.url,
                response=response,
                body=body,
                context=self,
            )

    # ==================== Content ====================

    def content_type(self, response: requests.Response) -> Optional[str]:
        return first_header(response.headers, "Content-Type")

    def content_encoding(self, response: requests.Response) -> Optional[str]:
        encoding = first_header(response.headers, "Content-Encoding")
        return encoding.lower() if encoding else None

    def decode_content(self, encoding: Optional[str], body: bytes) -> bytes:
        """
        Decode a body by Content-Encoding.

        Only gzip is decoded; any other encoding is returned unchanged.
        """
        if encoding == "gzip" and body:
            try:
                return gzip.decompress(body)
            except (OSError, EOFError, zlib.error) as e:
                raise CodecError(f"Failed to decode gzip content: {e}") from e
        return body

    def decode_response_body(self, response: requests.Response, body: bytes) -> bytes:
        return self.decode_content(self.content_encoding(response), body)

    def read_content(self, response: requests.Response, body: bytes) -> BodyContent:
        """Decoded body plus the response Content-Type."""
        return BodyContent(self.content_type(response), self.decode_response_body(response, body))

    def write(self, bean: Any, content_type: Optional[str] = None) -> BodyContent:
        return self._body_adapter.bean_writer(type(bean)).write(bean, content_type)

    def read_bean(self, cls: Type[T], content: BodyContent) -> T:
        return self._body_adapter.bean_reader(cls).read(content)

    def read_list(self, cls: Type[T], content: BodyContent) -> List[T]:
        return self._body_adapter.list_reader(cls).read(content)

    # ==================== Auth ====================

    def auth_token(self) -> str:
        """Valid bearer token, obtained from the provider when missing or expired."""
        if self._auth_token_provider is None:
            raise ConfigurationError("No AuthTokenProvider configured")
        return self._token_cache.token(self._auth_token_provider, self.request)

    def invalidate_auth_token(self, token: str) -> bool:
        """Forget ``token`` so the next request obtains a new one."""
        return self._token_cache.invalidate(token)

    # ==================== Pipeline ====================

    def before_request(self, request: HttpClientRequest) -> None:
        if self._auth_token_provider is not None and not request.is_skip_auth_token:
            request.header("Authorization", "Bearer " + self.auth_token())

        if self._logger is not None and self._logger.config.enable_correlation_id:
            header_name = self._logger.config.correlation_header
            correlation_id = request.headers.get(header_name) or str(uuid.uuid4())
            request.header(header_name, correlation_id)
            set_correlation_id(correlation_id)

        try:
            for intercept in self._intercepts:
                intercept.before_request(request)
        except BaseException:
            self.release_correlation_id()
            raise

    def send(self, prepared: requests.PreparedRequest, timeout: TimeoutConfig) -> requests.Response:
        """
        Hand the request to the transport.

        I/O errors and timeouts become HttpException with status 499.
        """
        if self._logger is not None:
            self._logger.info("Request started", method=prepared.method, url=prepared.url)
        try:
            return self._transport.send(prepared, timeout.as_tuple())
        except (RequestException, OSError) as e:
            logger.debug("Transport failure for %s %s: %s", prepared.method, prepared.url, e)
            raise HttpException.transport_failure(prepared.url, e) from e

    def after_response(self, request: HttpClientRequest) -> None:
        """Notify listeners, then intercepts. Runs for failed requests too."""
        try:
            event = request.listener_event()
            self._log_exchange(event)
            for listener in self._listeners:
                listener.response(event)
            for intercept in self._intercepts:
                intercept.after_response(request.response, request)
        finally:
            self.release_correlation_id()

    def release_correlation_id(self) -> None:
        """Drop the thread's correlation ID once the exchange is over or abandoned."""
        if self._logger is not None:
            clear_correlation_id()

    def _log_exchange(self, event) -> None:
        if self._logger is None:
            return
        if event.error is None:
            self._logger.info(
                "Request completed",
                method=event.method,
                url=event.url,
                status_code=event.status_code,
                duration_ms=event.duration_ms,
            )
        else:
            self._logger.error(
                "Request failed",
                method=event.method,
                url=event.url,
                status_code=event.status_code,
                duration_ms=event.duration_ms,
                error=str(event.error),
            )
