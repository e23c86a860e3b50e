"""Unit tests for configuration loading and session settings.

WHY: A typo in an environment override should fail loudly at startup,
and a missing auth token must leave the engine usable offline.

HOW: monkeypatch sets and clears environment variables around direct
calls to the config helpers.
"""

import pytest
from pydantic import ValidationError

from learning_overlay.config import (
    ConfigError,
    DisplayMode,
    OverlayConfig,
    _env_float,
    load_auth_token,
)


class TestEnvFloat:

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("SOME_INTERVAL_S", raising=False)
        assert _env_float("SOME_INTERVAL_S", 0.5) == 0.5

    def test_default_when_blank(self, monkeypatch):
        monkeypatch.setenv("SOME_INTERVAL_S", "  ")
        assert _env_float("SOME_INTERVAL_S", 0.5) == 0.5

    def test_override(self, monkeypatch):
        monkeypatch.setenv("SOME_INTERVAL_S", "2.5")
        assert _env_float("SOME_INTERVAL_S", 0.5) == 2.5

    @pytest.mark.parametrize("raw", ["fast", "0", "-1"])
    def test_invalid_values(self, monkeypatch, raw):
        monkeypatch.setenv("SOME_INTERVAL_S", raw)
        with pytest.raises(ConfigError, match="SOME_INTERVAL_S"):
            _env_float("SOME_INTERVAL_S", 0.5)


class TestAuthToken:

    def test_missing_token_is_none(self):
        assert load_auth_token() is None

    def test_blank_token_is_none(self, monkeypatch):
        monkeypatch.setenv("LEARNING_OVERLAY_AUTH_TOKEN", "   ")
        assert load_auth_token() is None

    def test_token_is_stripped(self, monkeypatch):
        monkeypatch.setenv("LEARNING_OVERLAY_AUTH_TOKEN", " abc \n")
        assert load_auth_token() == "abc"


class TestOverlayConfig:

    def test_defaults(self):
        config = OverlayConfig()
        assert config.display_mode is DisplayMode.overlay
        assert config.show_word_status is True
        assert config.target_language is None
        assert config.native_language == "english"

    def test_display_mode_from_string(self):
        assert OverlayConfig(display_mode="transcript").display_mode is DisplayMode.transcript

    def test_unknown_display_mode_rejected(self):
        with pytest.raises(ValidationError):
            OverlayConfig(display_mode="sidebar")
