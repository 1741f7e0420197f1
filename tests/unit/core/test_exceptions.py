# tests/unit/core/test_exceptions.py

import gzip

import pytest
import responses

from fluent_http import HttpClientContext
from fluent_http.core.exceptions import (
    TRANSPORT_FAILURE_STATUS,
    CodecError,
    ConfigurationError,
    HTTPClientException,
    HttpException,
)


def test_hierarchy():
    assert issubclass(HttpException, HTTPClientException)
    assert issubclass(CodecError, HTTPClientException)
    assert issubclass(ConfigurationError, HTTPClientException)


def test_message_contains_status_and_url():
    e = HttpException(404, url="http://h/x")
    assert "404" in str(e)
    assert "http://h/x" in str(e)


def test_transport_failure():
    cause = OSError("boom")
    e = HttpException.transport_failure("http://h/x", cause)

    assert e.__cause__ is cause
    assert e.status_code == TRANSPORT_FAILURE_STATUS == 499
    assert e.is_transport_failure
    assert "OSError: boom" in str(e)
    assert len(e.headers) == 0
    assert e.body_as_bytes() == b""


def test_bean_without_context():
    with pytest.raises(ConfigurationError):
        HttpException(500, body=b"{}").bean(dict)


def test_codec_error_message():
    e = CodecError("No codec", target=dict, content_type="text/html")
    assert str(e) == "No codec (type: dict, content-type: text/html)"


class TestLazyBodyDecoding:
    """Тело ошибки декодируется по запросу тем же путём, что и успешный ответ."""

    @responses.activate
    def test_bean_of_error_body(self):
        responses.add(
            responses.POST,
            "http://h/hello",
            json={"errors": {"name": "must not be blank"}},
            status=422,
        )
        ctx = HttpClientContext(base_url="http://h")

        with pytest.raises(HttpException) as exc_info:
            ctx.request().path("hello").body({"name": ""}).post().as_void()

        e = exc_info.value
        assert e.status_code == 422
        assert not e.is_transport_failure
        assert e.bean(dict) == {"errors": {"name": "must not be blank"}}
        assert "must not be blank" in e.body_as_string()
        assert e.headers["Content-Type"] == "application/json"

    @responses.activate
    def test_gzip_error_body(self):
        payload = b'{"message":"nope"}'
        responses.add(
            responses.GET,
            "http://h/secure",
            body=gzip.compress(payload),
            status=403,
            content_type="application/json",
            headers={"Content-Encoding": "gzip"},
        )
        ctx = HttpClientContext(base_url="http://h")

        with pytest.raises(HttpException) as exc_info:
            ctx.request().path("secure").get().as_string()

        e = exc_info.value
        assert e.raw_body[:2] == b"\x1f\x8b"
        assert e.body_as_bytes() == payload
        assert e.bean(dict) == {"message": "nope"}

    @responses.activate
    def test_error_body_wrong_content_type(self):
        responses.add(responses.GET, "http://h/x", body="<html/>", status=500, content_type="text/html")
        ctx = HttpClientContext(base_url="http://h")

        with pytest.raises(HttpException) as exc_info:
            ctx.request().path("x").get().as_bytes()

        assert exc_info.value.body_as_string() == "<html/>"
        with pytest.raises(CodecError):
            exc_info.value.bean(dict)
