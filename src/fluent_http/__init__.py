"""fluent-http-client - fluent HTTP request builder with pluggable codecs and hooks."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.context import HttpClientContext
from .core.request import HttpClientRequest
from .core.response import HttpResponse
from .core.url_builder import UrlBuilder
from .core.stream import BeanStream
from .core.config import (
    HttpClientConfig,
    TimeoutConfig,
    ConnectionPoolConfig,
    SecurityConfig,
)
from .core.settings import load_from_env, load_from_file
from .core.exceptions import (
    TRANSPORT_FAILURE_STATUS,
    HTTPClientException,
    HttpException,
    CodecError,
    ConfigurationError,
)
from .core.body import (
    BodyContent,
    BodyAdapter,
    BodyReader,
    BodyWriter,
    ListReader,
    CompositeBodyAdapter,
)
from .core.auth import AuthToken, AuthTokenProvider, AuthTokenCache
from .core.transport import Transport, RequestsTransport
from .core.logging import LoggingConfig
from .adapters.json_adapter import JsonBodyAdapter
from .plugins.plugin import RequestEvent, RequestIntercept, RequestListener
from .plugins.metrics_plugin import MetricsListener

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('fluent_http')
logging.getLogger('fluent_http').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("fluent-http-client")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "HttpClientContext",
    "HttpClientRequest",
    "HttpResponse",
    "UrlBuilder",
    "BeanStream",

    # Config
    "HttpClientConfig",
    "TimeoutConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "LoggingConfig",
    "load_from_env",
    "load_from_file",

    # Exceptions
    "TRANSPORT_FAILURE_STATUS",
    "HTTPClientException",
    "HttpException",
    "CodecError",
    "ConfigurationError",

    # Codecs
    "BodyContent",
    "BodyAdapter",
    "BodyReader",
    "BodyWriter",
    "ListReader",
    "CompositeBodyAdapter",
    "JsonBodyAdapter",

    # Auth
    "AuthToken",
    "AuthTokenProvider",
    "AuthTokenCache",

    # Transport
    "Transport",
    "RequestsTransport",

    # Hooks
    "RequestEvent",
    "RequestIntercept",
    "RequestListener",
    "MetricsListener",

    # Version
    "__version__",
]
