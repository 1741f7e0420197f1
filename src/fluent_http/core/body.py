"""Request/response bodies and the codec contracts used to (de)serialize them."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar
from urllib.parse import urlencode

T = TypeVar("T")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class BodyContent:
    """
    Content-type plus payload bytes.

    Produced by a BodyWriter or read from a response; consumed by a
    BodyReader or returned raw.
    """
    content_type: Optional[str]
    content: bytes

    @classmethod
    def of(cls, content: bytes) -> "BodyContent":
        return cls(None, content)

    @classmethod
    def as_json(cls, content: bytes) -> "BodyContent":
        return cls(JSON_CONTENT_TYPE, content)

    @property
    def charset(self) -> str:
        return charset_of(self.content_type)

    def text(self) -> str:
        return self.content.decode(self.charset, errors="replace")


def charset_of(content_type: Optional[str], default: str = "utf-8") -> str:
    """
    Extract ``charset`` from a Content-Type value.

    Example:
        >>> charset_of("text/plain; charset=ISO-8859-1")
        'ISO-8859-1'
    """
    if not content_type:
        return default
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip('"')
    return default


def form_body(params: Sequence[Tuple[str, Any]]) -> BodyContent:
    """Encode form parameters as application/x-www-form-urlencoded."""
    return BodyContent(FORM_CONTENT_TYPE, urlencode(list(params)).encode("utf-8"))


class BodyWriter(ABC):
    """Writes a bean as BodyContent."""

    @abstractmethod
    def write(self, bean: Any, content_type: Optional[str] = None) -> BodyContent:
        pass


class BodyReader(ABC, Generic[T]):
    """Reads BodyContent into a bean."""

    @abstractmethod
    def read(self, content: BodyContent) -> T:
        pass

    def read_lines(self, lines: Iterable[bytes]) -> Iterator[T]:
        """
        Read one bean per line of a newline-delimited payload.

        Blank lines are skipped. Readers for formats that cannot be split
        by line keep this default, which reads each line as a full body.
        """
        for line in lines:
            if line.strip():
                yield self.read(BodyContent(None, line))


class ListReader(ABC, Generic[T]):
    """Reads BodyContent holding a list into a list of beans."""

    @abstractmethod
    def read(self, content: BodyContent) -> List[T]:
        pass


class BodyAdapter(ABC):
    """
    Registry of codecs.

    Resolves a writer by the runtime class of the bean being sent and a
    reader/list-reader by the requested target class. Implementations are
    populated once and read-only afterwards. Implementations raise
    ``CodecError`` when no codec matches.
    """

    @abstractmethod
    def bean_writer(self, cls: Type[Any]) -> BodyWriter:
        pass

    @abstractmethod
    def bean_reader(self, cls: Type[T]) -> BodyReader[T]:
        pass

    @abstractmethod
    def list_reader(self, cls: Type[T]) -> ListReader[T]:
        pass


class CompositeBodyAdapter(BodyAdapter):
    """
    Dispatches to several adapters by content type.

    The first adapter registered is the default and is used for outgoing
    beans. Incoming content is matched against each registered content type
    prefix; the returned readers do the dispatch per call, so one reader
    handles responses of any registered content type.
    """

    def __init__(self, adapters: Mapping[str, BodyAdapter]):
        if not adapters:
            raise ValueError("at least one adapter is required")
        self._adapters = dict(adapters)
        self._default = next(iter(self._adapters.values()))

    def adapter_for(self, content_type: Optional[str]) -> BodyAdapter:
        if content_type:
            media_type = content_type.split(";")[0].strip().lower()
            for prefix, adapter in self._adapters.items():
                if media_type.startswith(prefix):
                    return adapter
        return self._default

    def bean_writer(self, cls: Type[Any]) -> BodyWriter:
        return self._default.bean_writer(cls)

    def bean_reader(self, cls: Type[T]) -> BodyReader[T]:
        return _DispatchReader(self, cls)

    def list_reader(self, cls: Type[T]) -> ListReader[T]:
        return _DispatchListReader(self, cls)


class _DispatchReader(BodyReader[T]):

    def __init__(self, adapter: CompositeBodyAdapter, cls: Type[T]):
        self._adapter = adapter
        self._cls = cls

    def read(self, content: BodyContent) -> T:
        return self._adapter.adapter_for(content.content_type).bean_reader(self._cls).read(content)


class _DispatchListReader(ListReader[T]):

    def __init__(self, adapter: CompositeBodyAdapter, cls: Type[T]):
        self._adapter = adapter
        self._cls = cls

    def read(self, content: BodyContent) -> List[T]:
        return self._adapter.adapter_for(content.content_type).list_reader(self._cls).read(content)
