"""Core модули: запрос, контекст, кодеки, конфигурация."""

from .config import (
    DEFAULT_CONTENT_TYPE,
    TimeoutConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    HttpClientConfig,
)
from .exceptions import (
    TRANSPORT_FAILURE_STATUS,
    HTTPClientException,
    HttpException,
    CodecError,
    ConfigurationError,
)
from .body import (
    BodyContent,
    BodyWriter,
    BodyReader,
    ListReader,
    BodyAdapter,
    CompositeBodyAdapter,
    form_body,
)
from .url_builder import UrlBuilder
from .auth import AuthToken, AuthTokenProvider, AuthTokenCache
from .transport import Transport, RequestsTransport
from .response import HttpResponse
from .stream import BeanStream
from .request import HttpClientRequest
from .context import HttpClientContext
from .settings import ClientSettings, ConfigValidationError, load_from_env, load_from_file

__all__ = [
    # Config
    "DEFAULT_CONTENT_TYPE",
    "TimeoutConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "HttpClientConfig",
    "ClientSettings",
    "ConfigValidationError",
    "load_from_env",
    "load_from_file",
    # Exceptions
    "TRANSPORT_FAILURE_STATUS",
    "HTTPClientException",
    "HttpException",
    "CodecError",
    "ConfigurationError",
    # Body
    "BodyContent",
    "BodyWriter",
    "BodyReader",
    "ListReader",
    "BodyAdapter",
    "CompositeBodyAdapter",
    "form_body",
    # Request pipeline
    "UrlBuilder",
    "AuthToken",
    "AuthTokenProvider",
    "AuthTokenCache",
    "Transport",
    "RequestsTransport",
    "HttpResponse",
    "BeanStream",
    "HttpClientRequest",
    "HttpClientContext",
]
