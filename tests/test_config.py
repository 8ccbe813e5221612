"""
tests/test_config.py

Settings from environment and the serve_api entry point.
"""
from __future__ import annotations

import prometheus_client
import pytest
from prometheus_client import CollectorRegistry

from src.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RAILFEED_API_ADDRESS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.api_address == "localhost:8080"
        assert settings.log_level == "INFO"
        assert settings.access_log is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RAILFEED_API_ADDRESS", ":9090")
        monkeypatch.setenv("RAILFEED_SHUTDOWN_TIMEOUT", "1.5")
        settings = Settings(_env_file=None)
        assert settings.api_address == ":9090"
        assert settings.shutdown_timeout == 1.5


class TestServeApiScript:

    @pytest.fixture(autouse=True)
    def _isolate(self, monkeypatch):
        monkeypatch.setattr(prometheus_client, "REGISTRY", CollectorRegistry())
        monkeypatch.setattr("signal.signal", lambda *args: None)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_bad_address_exits_with_error(self):
        """Un indirizzo non valido è fatale: exit code 1."""
        from scripts.serve_api import main

        assert main(address="not-an-address") == 1

    def test_port_in_use_exits_with_error(self):
        import socket

        from scripts.serve_api import main

        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen()
            port = blocker.getsockname()[1]
            assert main(address=f"127.0.0.1:{port}") == 1
