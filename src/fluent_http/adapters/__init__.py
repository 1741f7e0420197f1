"""Body codec implementations."""

from .json_adapter import JsonBodyAdapter, JsonBodyReader, JsonBodyWriter, JsonListReader

__all__ = [
    "JsonBodyAdapter",
    "JsonBodyReader",
    "JsonBodyWriter",
    "JsonListReader",
]
