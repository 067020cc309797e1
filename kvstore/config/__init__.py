"""Configuration module for KV-Store."""

from .settings import Settings, normalize_api_path

__all__ = ["Settings", "normalize_api_path"]
