# src/fluent_http/core/transport.py
"""
Transport: sends a prepared request and returns the response with its body
still unread.

The default implementation keeps one ``requests.Session`` per thread, so a
single context can be shared across worker threads.
"""
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Set, Tuple, Union

import requests
from requests.adapters import HTTPAdapter

from .config import HttpClientConfig

Timeout = Union[float, Tuple[float, float]]

CHUNK_SIZE = 8192


class Transport(ABC):
    """
    Send capability consumed by HttpClientContext.

    ``send`` must return a response whose body has not been consumed;
    the pipeline reads it through ``read_raw_body``/``iter_raw_body`` so
    that content-encoding is left for the pipeline to decode. Failures
    surface as ``requests.RequestException`` or ``OSError``.
    """

    @abstractmethod
    def send(self, request: requests.PreparedRequest, timeout: Optional[Timeout]) -> requests.Response:
        pass

    def close(self) -> None:
        pass


class RequestsTransport(Transport):
    """
    Transport on top of thread-local ``requests.Session`` objects.

    Example:
        >>> transport = RequestsTransport(HttpClientConfig())
        >>> response = transport.send(prepared, timeout=(5, 30))
    """

    def __init__(self, config: Optional[HttpClientConfig] = None):
        self._config = config or HttpClientConfig()
        self._local = threading.local()

        # Weak references so sessions of finished threads can be collected
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=self._config.pool.pool_connections,
            pool_maxsize=self._config.pool.pool_maxsize,
            pool_block=self._config.pool.pool_block,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Session for the current thread, created lazily."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._discard_ref))
        return session

    def _discard_ref(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def send(self, request: requests.PreparedRequest, timeout: Optional[Timeout]) -> requests.Response:
        return self.session.send(
            request,
            stream=True,
            timeout=timeout,
            verify=self._config.security.verify_ssl,
            allow_redirects=self._config.security.allow_redirects,
        )

    def get_active_sessions_count(self) -> int:
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)

    def close(self) -> None:
        """Close sessions of all threads. Safe to call more than once."""
        self._local.session = None
        with self._sessions_lock:
            sessions = [ref() for ref in self._all_sessions]
            self._all_sessions.clear()
        for session in sessions:
            if session is not None:
                session.close()


def read_raw_body(response: requests.Response) -> bytes:
    """
    Read the whole body without content decoding and release the connection.

    Responses built without a raw stream (already materialized) return
    ``response.content``.
    """
    try:
        raw = response.raw
        if raw is not None and not response._content_consumed:
            return raw.read(decode_content=False) or b""
        return response.content or b""
    finally:
        response.close()


def iter_raw_body(response: requests.Response, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield undecoded body chunks. The caller closes the response."""
    raw = response.raw
    if raw is not None and not response._content_consumed:
        while True:
            chunk = raw.read(chunk_size, decode_content=False)
            if not chunk:
                return
            yield chunk
    elif response.content:
        yield response.content
