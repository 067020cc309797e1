"""Network module for KV-Store."""

from .app import create_app
from .handlers import router

__all__ = ["create_app", "router"]
