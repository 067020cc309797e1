"""
Store Facade

The narrow interface the transport layer talks to. KVService carries no
state of its own: it normalizes payloads on put and delegates everything
to the engine.
"""

from typing import Any, List, Optional, Protocol

from ..storage.engine import KVEngine
from ..storage.normalizer import ValueNormalizer


class KVServiceInterface(Protocol):
    """Operations the HTTP handlers depend on."""

    def put(self, key: str, raw: bytes) -> None: ...

    def get(self, key: str) -> Any: ...

    def delete(self, key: str) -> None: ...

    def list_keys(self) -> List[str]: ...


class KVService:
    """
    Pass-through from callers to the storage engine.

    Args:
        engine: Engine to delegate to (creates a new one if not provided)
        normalizer: Payload normalizer (creates a new one if not provided)
    """

    def __init__(
            self,
            engine: Optional[KVEngine] = None,
            normalizer: Optional[ValueNormalizer] = None,
    ):
        self.engine = engine if engine is not None else KVEngine()
        self.normalizer = normalizer if normalizer is not None else ValueNormalizer()

    def put(self, key: str, raw: bytes) -> None:
        """Normalize the raw payload and store it under key."""
        value = self.normalizer.normalize(raw)
        self.engine.put(key, value)

    def get(self, key: str) -> Any:
        return self.engine.get(key)

    def delete(self, key: str) -> None:
        self.engine.delete(key)

    def list_keys(self) -> List[str]:
        return self.engine.list_keys()
