"""
Tests for Configuration Settings

Run with: python -m pytest tests/test_settings.py -v
"""

import dataclasses

import pytest

from kvstore.config.settings import Settings, normalize_api_path
from kvstore.server import load_settings, parse_args


class TestFromEnv:

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.HOST == "0.0.0.0"
        assert settings.PORT == 8080
        assert settings.API_PATH == "/"
        assert settings.DEBUG is False
        assert settings.LOG_LEVEL == "INFO"

    def test_reads_variables(self):
        settings = Settings.from_env({
            "KV_STORE_HOST": "127.0.0.1",
            "PORT": "9090",
            "API_PATH": "api",
            "KV_STORE_MAX_BODY_SIZE": "10",
            "KV_STORE_CONNECTION_TIMEOUT": "7",
            "KV_STORE_DEBUG": "true",
            "KV_STORE_LOG_LEVEL": "warning",
        })

        assert settings.HOST == "127.0.0.1"
        assert settings.PORT == 9090
        assert settings.API_PATH == "/api/"
        assert settings.MAX_BODY_SIZE == 10
        assert settings.CONNECTION_TIMEOUT == 7
        assert settings.DEBUG is True
        assert settings.LOG_LEVEL == "WARNING"

    def test_invalid_port(self):
        with pytest.raises(ValueError):
            Settings.from_env({"PORT": "http"})
        with pytest.raises(ValueError):
            Settings.from_env({"PORT": "70000"})

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            Settings(CONNECTION_TIMEOUT=0)


class TestImmutability:

    def test_frozen(self):
        settings = Settings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.PORT = 1

    def test_with_overrides_skips_none(self):
        settings = Settings(PORT=1234)
        updated = settings.with_overrides(PORT=None, HOST="localhost")

        assert updated.PORT == 1234
        assert updated.HOST == "localhost"
        assert settings.HOST == "0.0.0.0"

    def test_with_overrides_normalizes_path(self):
        assert Settings().with_overrides(API_PATH="/kv").API_PATH == "/kv/"


class TestNormalizeApiPath:

    @pytest.mark.parametrize("raw, expected", [
        ("/", "/"),
        ("", "/"),
        ("api", "/api/"),
        ("/api", "/api/"),
        ("/api/v1/", "/api/v1/"),
        ("//api//", "/api/"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_api_path(raw) == expected


class TestCommandLine:

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("API_PATH", "/from-env")

        settings = load_settings(parse_args(["--port", "9100", "--debug"]))

        assert settings.PORT == 9100
        assert settings.API_PATH == "/from-env/"
        assert settings.DEBUG is True

    def test_unset_flags_keep_environment(self, monkeypatch):
        monkeypatch.setenv("KV_STORE_DEBUG", "true")
        monkeypatch.delenv("PORT", raising=False)

        settings = load_settings(parse_args([]))

        assert settings.DEBUG is True
        assert settings.PORT == 8080
