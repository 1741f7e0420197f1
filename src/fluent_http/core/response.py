"""Result of a terminal request operation."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from requests.structures import CaseInsensitiveDict

T = TypeVar("T")


@dataclass(frozen=True)
class HttpResponse(Generic[T]):
    """
    Status, headers and the body in the requested representation.

    ``body`` is ``None`` for ``as_discarding()``/``as_void()``.

    Example:
        >>> res = ctx.request().path("hello/message").get().as_string()
        >>> res.status_code, res.body
        (200, 'hello world')
    """
    status_code: int
    headers: CaseInsensitiveDict
    body: Optional[T]
    url: str

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    @property
    def ok(self) -> bool:
        return self.status_code < 300
