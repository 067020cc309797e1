"""Service module for KV-Store."""

from .facade import KVService, KVServiceInterface

__all__ = ["KVService", "KVServiceInterface"]
