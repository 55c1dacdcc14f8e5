"""Tests for editor configuration."""

from __future__ import annotations

import pytest

from sitebuildr_py.config import EditorSettings
from sitebuildr_py.core.history import DEFAULT_MAX_HISTORY
from sitebuildr_py.services.editor import EditorSession


class TestEditorSettings:
    """Tests for EditorSettings."""

    def test_defaults(self) -> None:
        """Test the default editor settings."""
        settings = EditorSettings()
        assert settings.autosave_delay == 1.5
        assert settings.max_history == DEFAULT_MAX_HISTORY == 50
        assert settings.grid_size == 20
        assert settings.snap_to_grid is True
        assert settings.api_token is None

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading settings from the environment."""
        monkeypatch.setenv("SITEBUILDR_AUTOSAVE_DELAY", "0.5")
        monkeypatch.setenv("SITEBUILDR_MAX_HISTORY", "10")
        monkeypatch.setenv("SITEBUILDR_GRID_SIZE", "8")
        monkeypatch.setenv("SITEBUILDR_SNAP_TO_GRID", "False")
        monkeypatch.setenv("SITEBUILDR_API_URL", "https://cms.example.com")
        monkeypatch.setenv("SITEBUILDR_API_TOKEN", "secret")

        settings = EditorSettings.from_env()
        assert settings.autosave_delay == 0.5
        assert settings.max_history == 10
        assert settings.grid_size == 8
        assert settings.snap_to_grid is False
        assert settings.api_base_url == "https://cms.example.com"
        assert settings.api_token == "secret"

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that unset variables fall back to the defaults."""
        for name in ("SITEBUILDR_AUTOSAVE_DELAY", "SITEBUILDR_SNAP_TO_GRID", "SITEBUILDR_API_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        settings = EditorSettings.from_env()
        assert settings.autosave_delay == 1.5
        assert settings.snap_to_grid is True
        assert settings.api_token is None

    def test_session_uses_grid_settings(self) -> None:
        """Test that a new session's document follows the configured grid."""
        session = EditorSession(settings=EditorSettings(grid_size=8, snap_to_grid=False))
        assert session.document.settings.grid_size == 8
        assert session.document.settings.snap_to_grid is False
