# src/fluent_http/core/auth.py
"""
Bearer token cache shared by all requests of one context.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .request import HttpClientRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthToken:
    """
    Токен и момент его истечения (epoch seconds).

    Токен пригоден, пока текущее время меньше expires_at.
    """
    token: str
    expires_at: float

    @classmethod
    def of(cls, token: str, valid_for_seconds: float) -> "AuthToken":
        """
        Example:
            >>> AuthToken.of("abc", valid_for_seconds=3600)
        """
        return cls(token, time.time() + valid_for_seconds)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return now >= self.expires_at


class AuthTokenProvider(ABC):
    """
    Получает новый токен.

    Provider получает запрос с уже выставленным skip_auth_token(), поэтому
    может вызвать endpoint выдачи токена через тот же контекст без
    рекурсивной подстановки Authorization.
    """

    @abstractmethod
    def obtain_token(self, request: "HttpClientRequest") -> AuthToken:
        pass


class AuthTokenCache:
    """
    Holds the most recently obtained token.

    Reads are lock-free. The lock only guards the swap itself, so a slow
    provider never serializes unrelated requests.

    Refresh is check-then-act without single-flight: concurrent callers that
    observe a missing or expired token each call the provider and store the
    result; the last store wins. Each caller uses the token its own provider
    call returned.
    """

    def __init__(self):
        self._token: Optional[AuthToken] = None
        self._swap_lock = threading.Lock()

    def get(self) -> Optional[AuthToken]:
        return self._token

    def set(self, token: Optional[AuthToken]) -> None:
        with self._swap_lock:
            self._token = token

    def compare_and_set(self, expected: Optional[AuthToken], new: Optional[AuthToken]) -> bool:
        """Store ``new`` only if the current token is still ``expected``."""
        with self._swap_lock:
            if self._token is not expected:
                return False
            self._token = new
            return True

    def invalidate(self, token: str) -> bool:
        """
        Drop the cached token if it is still ``token``.

        Used after the server rejected ``token``; a newer token stored by
        another thread is left alone.
        """
        current = self._token
        if current is None or current.token != token:
            return False
        return self.compare_and_set(current, None)

    def token(
        self,
        provider: AuthTokenProvider,
        request_factory: Callable[[], "HttpClientRequest"],
    ) -> str:
        """Return a valid token string, refreshing through ``provider`` if needed."""
        current = self._token
        if current is not None and not current.is_expired():
            return current.token

        logger.debug("Obtaining auth token", extra={"expired": current is not None})
        fresh = provider.obtain_token(request_factory().skip_auth_token())
        self.set(fresh)
        return fresh.token
