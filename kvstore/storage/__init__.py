"""Storage module for KV-Store."""

from .engine import KVEngine
from .errors import DecodeError, EncodeError, KVStoreError, MalformedInputError, NotFoundError
from .normalizer import ValueNormalizer

__all__ = [
    "KVEngine",
    "ValueNormalizer",
    "KVStoreError",
    "NotFoundError",
    "MalformedInputError",
    "EncodeError",
    "DecodeError",
]
