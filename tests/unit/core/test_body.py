"""
Tests for BodyContent, form encoding and CompositeBodyAdapter dispatch.
"""

from typing import List

import pytest

from fluent_http.adapters.json_adapter import JsonBodyAdapter
from fluent_http.core.body import (
    FORM_CONTENT_TYPE,
    BodyAdapter,
    BodyContent,
    BodyReader,
    BodyWriter,
    CompositeBodyAdapter,
    ListReader,
    charset_of,
    form_body,
)


class TestBodyContent:

    def test_text_uses_charset(self):
        content = BodyContent("text/plain; charset=ISO-8859-1", "café".encode("latin-1"))
        assert content.charset == "ISO-8859-1"
        assert content.text() == "café"

    def test_text_defaults_to_utf8(self):
        assert BodyContent.of("привет".encode("utf-8")).text() == "привет"

    def test_as_json(self):
        assert BodyContent.as_json(b"{}").content_type == "application/json"


def test_charset_of():
    assert charset_of(None) == "utf-8"
    assert charset_of("application/json") == "utf-8"
    assert charset_of('text/html; charset="UTF-16"') == "UTF-16"


def test_form_body():
    content = form_body([("name", "Bazz"), ("email", "a@b.c")])
    assert content.content_type == FORM_CONTENT_TYPE
    assert content.content == b"name=Bazz&email=a%40b.c"


class CsvAdapter(BodyAdapter):
    """Minimal text/csv adapter: one row of comma separated values."""

    class _Writer(BodyWriter):
        def write(self, bean, content_type=None):
            return BodyContent(content_type or "text/csv", ",".join(bean).encode())

    class _Reader(BodyReader):
        def read(self, content):
            return content.content.decode().split(",")

    class _ListReader(ListReader):
        def read(self, content):
            return [line.split(",") for line in content.content.decode().splitlines()]

    def bean_writer(self, cls):
        return self._Writer()

    def bean_reader(self, cls):
        return self._Reader()

    def list_reader(self, cls):
        return self._ListReader()


class TestCompositeBodyAdapter:

    @pytest.fixture
    def adapter(self):
        return CompositeBodyAdapter({
            "application/json": JsonBodyAdapter(),
            "text/csv": CsvAdapter(),
        })

    def test_requires_adapters(self):
        with pytest.raises(ValueError):
            CompositeBodyAdapter({})

    def test_reader_dispatches_by_content_type(self, adapter):
        reader = adapter.bean_reader(list)
        assert reader.read(BodyContent("text/csv; charset=utf-8", b"a,b")) == ["a", "b"]
        assert reader.read(BodyContent("application/json", b'["x"]')) == ["x"]

    def test_list_reader_dispatches_by_content_type(self, adapter):
        reader = adapter.list_reader(List[str])
        assert reader.read(BodyContent("text/csv", b"a,b\nc,d")) == [["a", "b"], ["c", "d"]]

    def test_unknown_content_type_uses_default(self, adapter):
        assert adapter.adapter_for("application/xml").__class__ is JsonBodyAdapter
        assert adapter.adapter_for(None).__class__ is JsonBodyAdapter

    def test_writer_is_default_adapter(self, adapter):
        content = adapter.bean_writer(dict).write({"a": 1})
        assert content.content_type == "application/json"
        assert content.content == b'{"a":1}'
