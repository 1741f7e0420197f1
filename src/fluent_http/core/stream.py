"""Lazy, single-pass decoding of newline-delimited response bodies."""

import zlib
from typing import Generic, Iterable, Iterator, Optional, TypeVar

import requests

from .body import BodyReader
from .transport import iter_raw_body

T = TypeVar("T")


def split_lines(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Re-chunk a byte stream into lines (without the line terminator)."""
    pending = b""
    for chunk in chunks:
        pending += chunk
        lines = pending.split(b"\n")
        pending = lines.pop()
        for line in lines:
            yield line.rstrip(b"\r")
    if pending:
        yield pending.rstrip(b"\r")


def gunzip_chunks(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Incrementally decompress gzip-encoded chunks."""
    decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)
    for chunk in chunks:
        data = decompressor.decompress(chunk)
        if data:
            yield data
    tail = decompressor.flush()
    if tail:
        yield tail


class BeanStream(Generic[T]):
    """
    Forward-only iterator of beans decoded from an open response.

    The stream owns the response: the connection is released when the last
    element has been read, when iteration fails, or on ``close()``. Use it
    as a context manager when it may be abandoned before exhaustion. It
    cannot be restarted.

    Example:
        >>> with ctx.request().path("hello/stream").get().stream(SimpleData) as items:
        ...     for item in items:
        ...         print(item.name)
    """

    def __init__(
        self,
        response: requests.Response,
        reader: BodyReader[T],
        content_encoding: Optional[str] = None,
    ):
        self._response = response
        self._closed = False
        chunks: Iterable[bytes] = iter_raw_body(response)
        if content_encoding == "gzip":
            chunks = gunzip_chunks(chunks)
        self._items = reader.read_lines(split_lines(chunks))

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> "BeanStream[T]":
        return self

    def __next__(self) -> T:
        if self._closed:
            raise StopIteration
        try:
            return next(self._items)
        except BaseException:
            self.close()
            raise

    def close(self) -> None:
        """Release the underlying connection. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._response.close()

    def __enter__(self) -> "BeanStream[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
