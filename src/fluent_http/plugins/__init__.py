"""Request listeners and intercepts."""

from .plugin import RequestEvent, RequestIntercept, RequestListener
from .metrics_plugin import MetricsListener

__all__ = [
    "RequestEvent",
    "RequestIntercept",
    "RequestListener",
    "MetricsListener",
]
