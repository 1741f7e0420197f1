"""
URL composition: base URL + path segments + matrix params + query params.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

# RFC 3986 pchar minus ';' and '/', which carry structure here
_SEGMENT_SAFE = ":@!$&'()*+,=-._~"


def encode_segment(segment: str) -> str:
    """Percent-encode a single path segment."""
    return quote(segment, safe=_SEGMENT_SAFE)


class UrlBuilder:
    """
    Builds a URL from a base, path segments, matrix and query parameters.

    Matrix parameters attach to the most recently added segment. Query
    parameters with a ``None`` value are dropped rather than rendered as
    ``key=``. The URL is rebuilt on every ``build()`` call.

    Example:
        >>> UrlBuilder("http://h/api").path("p").path(2011) \\
        ...     .matrix_param("author", "rob").path("foo") \\
        ...     .query_param("extra", "banana").build()
        'http://h/api/p/2011;author=rob/foo?extra=banana'
    """

    def __init__(self, base_url: Optional[str] = None):
        self._base = base_url.rstrip("/") if base_url else ""
        self._segments: List[str] = []
        self._query: List[Tuple[str, str]] = []

    def url(self, url: str) -> "UrlBuilder":
        """Replace the base URL. Segments added so far are kept."""
        self._base = url.rstrip("/")
        return self

    def path(self, segment: Any) -> "UrlBuilder":
        """
        Append path segment(s).

        A value containing ``/`` is split and every non-empty part is added
        as its own encoded segment.
        """
        if segment is None:
            return self
        for part in str(segment).split("/"):
            if part:
                self._segments.append(encode_segment(part))
        return self

    def matrix_param(self, name: str, value: Any) -> "UrlBuilder":
        """Append ``;name=value`` to the last added segment."""
        if value is None:
            return self
        param = f";{encode_segment(name)}={encode_segment(str(value))}"
        if self._segments:
            self._segments[-1] += param
        else:
            self._segments.append(param)
        return self

    def query_param(self, name: str, value: Any) -> "UrlBuilder":
        """Add a query parameter. ``None`` is a no-op; lists add one pair per element."""
        if value is None:
            return self
        if isinstance(value, (list, tuple)):
            for item in value:
                self.query_param(name, item)
            return self
        self._query.append((name, _to_param(value)))
        return self

    def query_params(self, params: Mapping[str, Any]) -> "UrlBuilder":
        for name, value in params.items():
            self.query_param(name, value)
        return self

    @property
    def segments(self) -> Iterable[str]:
        return tuple(self._segments)

    def build(self) -> str:
        """Return the full URL."""
        url = self._base
        if self._segments:
            url += "/" + "/".join(self._segments)
        if self._query:
            url += "?" + urlencode(self._query)
        return url

    def __str__(self) -> str:
        return self.build()


def _to_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
