"""
KV-Store Configuration Settings

Settings are read from the environment once at process start into an
immutable Settings instance, which is then passed to every consumer.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def normalize_api_path(path: str) -> str:
    """Return path with exactly one leading and one trailing slash."""
    stripped = path.strip().strip("/")
    return f"/{stripped}/" if stripped else "/"


@dataclass(frozen=True)
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    API_PATH: str = "/"

    # Request settings
    MAX_BODY_SIZE: int = 1024 * 1024
    CONNECTION_TIMEOUT: int = 300  # Seconds before an idle keep-alive connection is closed

    # Logging settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    def __post_init__(self):
        if not 0 <= self.PORT <= 65535:
            raise ValueError(f"PORT out of range: {self.PORT}")
        if self.MAX_BODY_SIZE < 0:
            raise ValueError(f"MAX_BODY_SIZE must be non-negative: {self.MAX_BODY_SIZE}")
        if self.CONNECTION_TIMEOUT <= 0:
            raise ValueError(f"CONNECTION_TIMEOUT must be positive: {self.CONNECTION_TIMEOUT}")
        object.__setattr__(self, "API_PATH", normalize_api_path(self.API_PATH))
        object.__setattr__(self, "LOG_LEVEL", self.LOG_LEVEL.upper())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default os.environ)

        Raises:
            ValueError: a numeric variable is not an integer or out of range
        """
        env = os.environ if environ is None else environ
        return cls(
            HOST=env.get("KV_STORE_HOST", cls.HOST),
            PORT=int(env.get("PORT", cls.PORT)),
            API_PATH=env.get("API_PATH", cls.API_PATH),
            MAX_BODY_SIZE=int(env.get("KV_STORE_MAX_BODY_SIZE", cls.MAX_BODY_SIZE)),
            CONNECTION_TIMEOUT=int(env.get("KV_STORE_CONNECTION_TIMEOUT", cls.CONNECTION_TIMEOUT)),
            DEBUG=_env_bool(env.get("KV_STORE_DEBUG", "false")),
            LOG_LEVEL=env.get("KV_STORE_LOG_LEVEL", cls.LOG_LEVEL),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with the given non-None fields replaced."""
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes)
