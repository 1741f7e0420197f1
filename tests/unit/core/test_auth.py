"""
Tests for AuthToken and AuthTokenCache.
"""

import threading
import time

import pytest

from fluent_http.core.auth import AuthToken, AuthTokenCache, AuthTokenProvider


class CountingProvider(AuthTokenProvider):
    """Выдаёт token-1, token-2... и запоминает полученные запросы."""

    def __init__(self, valid_for=3600.0):
        self.calls = 0
        self.requests = []
        self.valid_for = valid_for
        self._lock = threading.Lock()

    def obtain_token(self, request):
        with self._lock:
            self.calls += 1
            n = self.calls
        self.requests.append(request)
        return AuthToken.of(f"token-{n}", self.valid_for)


class FakeRequest:
    def __init__(self):
        self.skipped = False

    def skip_auth_token(self):
        self.skipped = True
        return self


class TestAuthToken:

    def test_not_expired_before_expiry(self):
        token = AuthToken("abc", expires_at=100.0)
        assert not token.is_expired(now=99.9)

    def test_expired_at_expiry(self):
        token = AuthToken("abc", expires_at=100.0)
        assert token.is_expired(now=100.0)
        assert token.is_expired(now=101.0)

    def test_of(self):
        token = AuthToken.of("abc", valid_for_seconds=60)
        assert token.expires_at > time.time()
        assert not token.is_expired()

    def test_immutable(self):
        token = AuthToken("abc", 1.0)
        with pytest.raises(AttributeError):
            token.token = "other"


class TestAuthTokenCache:

    def test_obtains_token_once_and_reuses(self):
        cache = AuthTokenCache()
        provider = CountingProvider()

        assert cache.token(provider, FakeRequest) == "token-1"
        assert cache.token(provider, FakeRequest) == "token-1"
        assert provider.calls == 1

    def test_provider_request_skips_auth(self):
        cache = AuthTokenCache()
        provider = CountingProvider()

        cache.token(provider, FakeRequest)

        assert provider.requests[0].skipped is True

    def test_expired_token_is_refreshed(self):
        cache = AuthTokenCache()
        provider = CountingProvider()
        cache.set(AuthToken("old", expires_at=time.time() - 1))

        assert cache.token(provider, FakeRequest) == "token-1"
        assert cache.get().token == "token-1"

    def test_token_expiring_immediately_is_refreshed_every_time(self):
        cache = AuthTokenCache()
        provider = CountingProvider(valid_for=0)

        assert cache.token(provider, FakeRequest) == "token-1"
        assert cache.token(provider, FakeRequest) == "token-2"

    def test_invalidate_matching_token(self):
        cache = AuthTokenCache()
        cache.set(AuthToken("abc", time.time() + 60))

        assert cache.invalidate("abc") is True
        assert cache.get() is None

    def test_invalidate_other_token_is_noop(self):
        cache = AuthTokenCache()
        cache.set(AuthToken("newer", time.time() + 60))

        assert cache.invalidate("stale") is False
        assert cache.get().token == "newer"

    def test_compare_and_set(self):
        cache = AuthTokenCache()
        first = AuthToken("a", 1.0)

        assert cache.compare_and_set(None, first) is True
        assert cache.compare_and_set(None, AuthToken("b", 1.0)) is False
        assert cache.get() is first

    def test_concurrent_refresh_no_corruption(self):
        """Параллельные вызовы получают валидный токен; в кеше один из выданных."""
        cache = AuthTokenCache()
        provider = CountingProvider()
        results = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            token = cache.token(provider, FakeRequest)
            with lock:
                results.append(token)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        issued = {f"token-{i}" for i in range(1, provider.calls + 1)}
        assert len(results) == 8
        assert set(results) <= issued
        assert cache.get().token in issued
        assert 1 <= provider.calls <= 8
