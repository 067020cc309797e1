"""
Storage Error Types

Every failure in the storage core is reported as one of these exceptions.
The transport layer is the only place they are translated into statuses.
"""


class KVStoreError(Exception):
    """Base class for all storage errors."""


class NotFoundError(KVStoreError):
    """Raised by get/delete when the key has no entry."""

    def __init__(self, key: str):
        super().__init__(f"key not found: {key!r}")
        self.key = key


class MalformedInputError(KVStoreError, ValueError):
    """Raised for an empty payload, an uninterpretable JSON payload or an invalid key."""


class EncodeError(KVStoreError):
    """Raised when a value cannot be serialized for storage."""


class DecodeError(KVStoreError):
    """Raised when stored bytes cannot be deserialized."""
