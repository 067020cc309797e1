"""
Storage Engine Module

Thread-safe in-memory mapping from key to encoded value.

Values are stored as UTF-8 JSON documents so any canonical value
(None, bool, finite number, str, list, dict with str keys) can be
reconstructed on read without the caller supplying type information.
"""

import json
import logging
import threading
from typing import Any, Dict, List

from .errors import DecodeError, EncodeError, MalformedInputError, NotFoundError

logger = logging.getLogger(__name__)


class KVEngine:
    """
    In-memory key-value engine safe for concurrent use from many threads.

    Every operation runs in O(1) average time (list_keys is O(n)):
    - put: Insert or replace the encoded value for a key
    - get: Decode and return the value for a key
    - delete: Remove a key
    - list_keys: Snapshot of the current keys

    Internal Storage:
        A plain dict guarded by a single lock.
        Format: key -> encoded JSON bytes

        Encoding happens before the lock is taken and decoding after it is
        released. Stored bytes are immutable, so readers never see a
        partially written value.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._lock = threading.Lock()
        self._data: Dict[str, bytes] = {}

    def put(self, key: str, value: Any) -> None:
        """
        Store a value under key, replacing any existing entry.

        Args:
            key: Non-empty key
            value: Canonical value to encode

        Raises:
            MalformedInputError: key is empty or not a string
            EncodeError: value cannot be serialized; the store is unchanged
        """
        self._check_key(key)
        encoded = self._encode(value)

        with self._lock:
            self._data[key] = encoded

        logger.debug(f"Stored {key!r} ({len(encoded)} bytes)")

    def get(self, key: str) -> Any:
        """
        Retrieve the decoded value for key.

        Raises:
            NotFoundError: no entry exists for key
            DecodeError: the stored bytes cannot be deserialized
        """
        with self._lock:
            encoded = self._data.get(key)

        if encoded is None:
            raise NotFoundError(key)
        return self._decode(encoded)

    def delete(self, key: str) -> None:
        """
        Remove the entry for key.

        The existence check and the removal happen in one critical section,
        so of two concurrent deletes of the same key exactly one succeeds.

        Raises:
            NotFoundError: no entry exists for key
        """
        with self._lock:
            removed = self._data.pop(key, None)

        if removed is None:
            raise NotFoundError(key)
        logger.debug(f"Deleted {key!r}")

    def list_keys(self) -> List[str]:
        """Return a snapshot of all stored keys in no particular order."""
        with self._lock:
            return list(self._data)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_keys: Number of stored keys
            - total_bytes: Sum of encoded value sizes
        """
        with self._lock:
            total_keys = len(self._data)
            total_bytes = sum(len(v) for v in self._data.values())

        return {
            "total_keys": total_keys,
            "total_bytes": total_bytes,
        }

    @staticmethod
    def _check_key(key: str) -> None:
        if not isinstance(key, str) or not key:
            raise MalformedInputError("key must be a non-empty string")

    def _encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, allow_nan=False, ensure_ascii=False).encode(self.encoding)
        except (TypeError, ValueError, RecursionError) as exc:
            raise EncodeError(f"value of type {type(value).__name__} is not serializable: {exc}") from exc

    def _decode(self, encoded: bytes) -> Any:
        try:
            return json.loads(encoded.decode(self.encoding))
        except (ValueError, RecursionError) as exc:
            raise DecodeError(f"stored value could not be decoded: {exc}") from exc
