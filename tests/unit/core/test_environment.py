# tests/unit/core/test_environment.py
"""Tests for runtime environment detection."""

import pytest

from frontload.contracts.enums import Environment
from frontload.core.environment import detect_environment, detect_is_server, is_production


class TestDetectEnvironment:
    def test_defaults_to_server(self) -> None:
        assert detect_environment() is Environment.SERVER
        assert detect_is_server() is True

    @pytest.mark.parametrize("raw", ["client", "CLIENT", " client "])
    def test_client_declared(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("FRONTLOAD_RUNTIME", raw)

        assert detect_is_server() is False

    def test_rejects_unknown_runtime(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRONTLOAD_RUNTIME", "browser")

        with pytest.raises(ValueError, match="FRONTLOAD_RUNTIME"):
            detect_environment()


class TestIsProduction:
    def test_unset_is_not_production(self) -> None:
        assert is_production() is False

    def test_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRONTLOAD_ENV", "Production")

        assert is_production() is True
