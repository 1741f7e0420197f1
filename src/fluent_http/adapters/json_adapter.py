"""
JSON codecs backed by pydantic ``TypeAdapter``.

Handles pydantic models, dataclasses, TypedDicts, dicts, lists and scalars.
``bytes`` and ``str`` targets are passed through without JSON parsing.
"""

from functools import lru_cache
from typing import Any, Iterable, Iterator, List, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from ..core.body import (
    JSON_CONTENT_TYPE,
    BodyAdapter,
    BodyContent,
    BodyReader,
    BodyWriter,
    ListReader,
)
from ..core.exceptions import CodecError

T = TypeVar("T")


@lru_cache(maxsize=512)
def _type_adapter(cls: Any) -> TypeAdapter:
    try:
        return TypeAdapter(cls)
    except PydanticSchemaGenerationError as e:
        raise CodecError(f"No JSON codec for type: {e}", target=cls) from e


def _check_json(content: BodyContent, cls: Any) -> None:
    content_type = content.content_type
    if content_type and "json" not in content_type.lower():
        raise CodecError("Cannot read non-JSON content as JSON", target=cls, content_type=content_type)


class JsonBodyWriter(BodyWriter):

    def __init__(self, cls: Type[Any], default_content_type: str):
        self._cls = cls
        self._default_content_type = default_content_type

    def write(self, bean: Any, content_type: Optional[str] = None) -> BodyContent:
        content_type = content_type or self._default_content_type
        if isinstance(bean, bytes):
            return BodyContent(content_type, bean)
        if isinstance(bean, str):
            return BodyContent(content_type, bean.encode("utf-8"))
        try:
            payload = _type_adapter(self._cls).dump_json(bean)
        except (ValueError, TypeError) as e:
            raise CodecError(f"Failed to write JSON: {e}", target=self._cls) from e
        return BodyContent(content_type, payload)


class JsonBodyReader(BodyReader[T]):

    def __init__(self, cls: Type[T]):
        self._cls = cls
        self._adapter = _type_adapter(cls)

    def read(self, content: BodyContent) -> T:
        _check_json(content, self._cls)
        try:
            return self._adapter.validate_json(content.content)
        except ValidationError as e:
            raise CodecError(f"Failed to read JSON: {e}", target=self._cls,
                             content_type=content.content_type) from e

    def read_lines(self, lines: Iterable[bytes]) -> Iterator[T]:
        for line in lines:
            line = line.strip()
            if line:
                try:
                    yield self._adapter.validate_json(line)
                except ValidationError as e:
                    raise CodecError(f"Failed to read JSON line: {e}", target=self._cls) from e


class JsonListReader(ListReader[T]):

    def __init__(self, cls: Type[T]):
        self._cls = cls
        self._adapter = _type_adapter(List[cls])  # type: ignore[valid-type]

    def read(self, content: BodyContent) -> List[T]:
        _check_json(content, self._cls)
        try:
            return self._adapter.validate_json(content.content)
        except ValidationError as e:
            raise CodecError(f"Failed to read JSON list: {e}", target=self._cls,
                             content_type=content.content_type) from e


class BytesBodyReader(BodyReader[bytes]):

    def read(self, content: BodyContent) -> bytes:
        return content.content


class StringBodyReader(BodyReader[str]):

    def read(self, content: BodyContent) -> str:
        return content.text()


class JsonBodyAdapter(BodyAdapter):
    """
    BodyAdapter for JSON.

    Example:
        >>> adapter = JsonBodyAdapter()
        >>> content = adapter.bean_writer(HelloDto).write(HelloDto(id=1, name="rob"))
        >>> adapter.bean_reader(HelloDto).read(content)
        HelloDto(id=1, name='rob')
    """

    def __init__(self, default_content_type: str = JSON_CONTENT_TYPE):
        self.default_content_type = default_content_type

    def bean_writer(self, cls: Type[Any]) -> BodyWriter:
        return JsonBodyWriter(cls, self.default_content_type)

    def bean_reader(self, cls: Type[T]) -> BodyReader[T]:
        if cls is bytes:
            return BytesBodyReader()  # type: ignore[return-value]
        if cls is str:
            return StringBodyReader()  # type: ignore[return-value]
        return JsonBodyReader(cls)

    def list_reader(self, cls: Type[T]) -> ListReader[T]:
        return JsonListReader(cls)
