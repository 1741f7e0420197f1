# src/fluent_http/core/request.py
"""
Fluent request builder and its terminal operations.

A request is created by ``HttpClientContext.request()``, accumulates URL,
headers, parameters and body, and is dispatched exactly once by one of the
terminal methods (``as_string``, ``bean``, ``stream``...).
"""
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple, Type, TypeVar, Union

import requests
from requests.structures import CaseInsensitiveDict

from ..plugins.plugin import RequestEvent
from .body import BodyContent, BodyReader, form_body
from .config import TimeoutConfig
from .exceptions import ConfigurationError, HttpException
from .response import HttpResponse
from .stream import BeanStream
from .transport import read_raw_body

if TYPE_CHECKING:
    from .context import HttpClientContext

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)

_NO_BEAN = object()


class HttpClientRequest:
    """
    Запрос с fluent API.

    Example:
        >>> dto = ctx.request() \\
        ...     .path("hello").path(43).query_param("other", "x") \\
        ...     .get() \\
        ...     .bean(HelloDto)

        >>> res = ctx.request() \\
        ...     .path("hello/saveform") \\
        ...     .form_param("name", "Bazz") \\
        ...     .post() \\
        ...     .as_discarding()
    """

    def __init__(self, context: "HttpClientContext", timeout: TimeoutConfig):
        self._context = context
        self._url = context.url()
        self._headers: CaseInsensitiveDict = CaseInsensitiveDict(context.config.headers)
        self._form: List[Tuple[str, str]] = []
        self._body: Optional[BodyContent] = None
        self._bean: Any = _NO_BEAN
        self._content_type: Optional[str] = None
        self._method = "GET"
        self._timeout = timeout
        self._skip_auth_token = False

        self._dispatched = False
        self._sent = False
        self._url_string: Optional[str] = None
        self._response: Optional[requests.Response] = None
        self._content: Optional[BodyContent] = None
        self._failure: Optional[HttpException] = None
        self._duration_ms = 0.0

    # ==================== URL ====================

    def url(self, url: str) -> "HttpClientRequest":
        """Override the context base URL for this request."""
        self._url.url(url)
        return self

    def path(self, segment: Any) -> "HttpClientRequest":
        """Append path segment(s); ``"a/b"`` adds two segments."""
        self._url.path(segment)
        return self

    def matrix_param(self, name: str, value: Any) -> "HttpClientRequest":
        """Add ``;name=value`` to the last added path segment."""
        self._url.matrix_param(name, value)
        return self

    def query_param(self, name: str, value: Any) -> "HttpClientRequest":
        """Add a query parameter. A ``None`` value is ignored."""
        self._url.query_param(name, value)
        return self

    def query_params(self, params: dict) -> "HttpClientRequest":
        self._url.query_params(params)
        return self

    # ==================== Headers / body ====================

    def header(self, name: str, value: Any) -> "HttpClientRequest":
        if value is not None:
            self._headers[name] = str(value)
        return self

    def header_if_absent(self, name: str, value: Any) -> "HttpClientRequest":
        if name not in self._headers:
            self.header(name, value)
        return self

    def form_param(self, name: str, value: Any) -> "HttpClientRequest":
        """Add a form parameter; the body becomes application/x-www-form-urlencoded."""
        if value is not None:
            self._form.append((name, str(value)))
        return self

    def content_type(self, content_type: str) -> "HttpClientRequest":
        self._content_type = content_type
        return self

    def body(self, body: Any, content_type: Optional[str] = None) -> "HttpClientRequest":
        """
        Set the request body.

        ``bytes``, ``str`` and ``BodyContent`` are sent as given. Any other
        object is written by the BodyAdapter when the request is sent.
        """
        if content_type:
            self._content_type = content_type
        self._bean = _NO_BEAN
        if isinstance(body, BodyContent):
            self._body = body
        elif isinstance(body, bytes):
            self._body = BodyContent(self._content_type, body)
        elif isinstance(body, str):
            self._body = BodyContent(self._content_type or "text/plain; charset=utf-8", body.encode("utf-8"))
        else:
            self._body = None
            self._bean = body
        return self

    def request_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> "HttpClientRequest":
        self._timeout = TimeoutConfig.of(timeout)
        return self

    def skip_auth_token(self) -> "HttpClientRequest":
        """Do not add the Authorization header to this request."""
        self._skip_auth_token = True
        return self

    # ==================== Method ====================

    def method(self, method: str) -> "HttpClientRequest":
        self._method = method.upper()
        return self

    def get(self) -> "HttpClientRequest":
        return self.method("GET")

    def post(self) -> "HttpClientRequest":
        return self.method("POST")

    def put(self) -> "HttpClientRequest":
        return self.method("PUT")

    def delete(self) -> "HttpClientRequest":
        return self.method("DELETE")

    def patch(self) -> "HttpClientRequest":
        return self.method("PATCH")

    def head(self) -> "HttpClientRequest":
        return self.method("HEAD")

    # ==================== Accessors ====================

    @property
    def method_name(self) -> str:
        return self._method

    @property
    def url_string(self) -> str:
        """The URL as it will be sent (fixed once the request is dispatched)."""
        if self._url_string is not None:
            return self._url_string
        return self._url.build()

    @property
    def headers(self) -> CaseInsensitiveDict:
        """Mutable request headers (intercepts may change them)."""
        return self._headers

    @property
    def is_skip_auth_token(self) -> bool:
        return self._skip_auth_token

    @property
    def timeout(self) -> TimeoutConfig:
        return self._timeout

    @property
    def response(self) -> Optional[requests.Response]:
        return self._response

    @property
    def failure(self) -> Optional[HttpException]:
        return self._failure

    def listener_event(self) -> RequestEvent:
        response = self._response
        if response is not None:
            status_code = response.status_code
        elif self._failure is not None:
            status_code = self._failure.status_code
        else:
            status_code = 0
        return RequestEvent(
            method=self._method,
            url=self.url_string,
            status_code=status_code,
            duration_ms=round(self._duration_ms, 2),
            request_headers=dict(self._headers),
            response_headers=dict(response.headers) if response is not None else {},
            error=self._failure,
        )

    # ==================== Terminal operations ====================

    def as_string(self) -> HttpResponse[str]:
        """Send and return the body as text."""
        return self._execute(lambda content: content.text())

    def as_bytes(self) -> HttpResponse[bytes]:
        """Send and return the body bytes (content-encoding decoded)."""
        return self._execute(lambda content: content.content)

    def as_void(self) -> HttpResponse[None]:
        """
        Send and ignore the body of a successful response.

        The body is still read, so an HttpException raised for an error
        status can decode it.
        """
        return self._execute(lambda content: None)

    def as_discarding(self) -> HttpResponse[None]:
        """Send and return status + headers only; the body is never read."""
        return self._execute(None)

    def bean(self, cls: Type[T]) -> T:
        """Send and decode the body as ``cls``."""
        reader = self._context.converters().bean_reader(cls)
        return self._execute(reader.read).body

    def as_list(self, cls: Type[T]) -> List[T]:
        """Send and decode the body as a list of ``cls``."""
        reader = self._context.converters().list_reader(cls)
        return self._execute(reader.read).body

    def read(self, reader: BodyReader[T]) -> T:
        """Send and decode the body with a caller supplied reader."""
        return self._execute(reader.read).body

    def stream(self, cls: Type[T]) -> BeanStream[T]:
        """
        Send and lazily decode a newline-delimited body as ``cls`` elements.

        The returned stream holds the connection open until it is exhausted
        or closed.
        """
        reader = self._context.converters().bean_reader(cls)
        response = self._receive(stream=True)
        return BeanStream(response, reader, self._context.content_encoding(response))

    # ==================== Pipeline ====================

    def _execute(self, convert: Optional[Callable[[BodyContent], R]]) -> HttpResponse[R]:
        response = self._receive(stream=convert is None)
        body = None
        if convert is not None:
            body = convert(self._content)
        else:
            response.close()
        return HttpResponse(
            status_code=response.status_code,
            headers=response.headers,
            body=body,
            url=self.url_string,
        )

    def _receive(self, stream: bool) -> requests.Response:
        """
        Run hooks, send, validate and (unless streaming) read the body.

        After-response hooks fire once the request was handed to the
        transport, whether it succeeded or not.
        """
        if self._dispatched:
            raise ConfigurationError("Request has already been dispatched")
        self._dispatched = True

        self._context.before_request(self)
        try:
            response = self._send()
            if stream and response.status_code < 300:
                return response
            raw_body = read_raw_body(response)
            self._context.check_response(response, raw_body, self.url_string)
            self._content = self._context.read_content(response, raw_body)
            return response
        except HttpException as e:
            self._failure = e
            raise
        except KeyboardInterrupt as e:
            # Hooks see a 499; the interrupt itself still reaches the caller
            self._failure = HttpException.transport_failure(self.url_string, e)
            raise
        finally:
            if self._sent:
                self._context.after_response(self)
            else:
                self._context.release_correlation_id()

    def _send(self) -> requests.Response:
        prepared = self._prepare()
        self._sent = True
        start = time.perf_counter()
        try:
            self._response = self._context.send(prepared, self._timeout)
        finally:
            self._duration_ms = (time.perf_counter() - start) * 1000
        return self._response

    def _prepare(self) -> requests.PreparedRequest:
        content = self._encode_body()
        if content is not None:
            content_type = content.content_type
            if self._content_type and not self._form:
                content_type = self._content_type
            if content_type:
                self._headers.setdefault("Content-Type", content_type)
        self._url_string = self._url.build()
        logger.debug("Prepared %s %s", self._method, self._url_string)
        return requests.Request(
            method=self._method,
            url=self._url_string,
            headers=dict(self._headers),
            data=content.content if content is not None else None,
        ).prepare()

    def _encode_body(self) -> Optional[BodyContent]:
        if self._form:
            if self._body is not None or self._bean is not _NO_BEAN:
                raise ConfigurationError("Request has both form parameters and a body")
            return form_body(self._form)
        if self._bean is not _NO_BEAN:
            return self._context.write(self._bean, self._content_type)
        return self._body
