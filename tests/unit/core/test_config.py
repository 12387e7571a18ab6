"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from dnd_tracker.core.config import (
    DEFAULT_CONTENT_BASE_URL,
    ContentSettings,
    ParserSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_tracker.core.exceptions import ConfigurationError


class TestContentSettings:
    """Tests for ContentSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default content source settings."""
        monkeypatch.chdir(tmp_path)

        settings = ContentSettings()

        assert settings.backend == "http"
        assert settings.base_url == DEFAULT_CONTENT_BASE_URL
        assert settings.parallel_fetch is False
        assert settings.max_retries == 2
        assert settings.max_subclass_candidates == 64

    def test_base_url_trailing_slash_stripped(self) -> None:
        """Test base URL normalization."""
        settings = ContentSettings(base_url="https://example.org/Classes///")

        assert settings.base_url == "https://example.org/Classes"

    def test_filesystem_requires_local_root(self) -> None:
        """Test the filesystem backend without a root directory."""
        with pytest.raises(ConfigurationError) as exc_info:
            ContentSettings(backend="filesystem")

        assert exc_info.value.details["config_key"] == "local_root"

    def test_filesystem_with_local_root(self, tmp_path: Path) -> None:
        """Test the filesystem backend with a root directory."""
        settings = ContentSettings(backend="filesystem", local_root=tmp_path)

        assert settings.local_root == tmp_path

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test settings read from prefixed environment variables."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DND_TRACKER_CONTENT_BACKEND", "memory")
        monkeypatch.setenv("DND_TRACKER_CONTENT_PARALLEL_FETCH", "true")

        settings = ContentSettings()

        assert settings.backend == "memory"
        assert settings.parallel_fetch is True


class TestParserSettings:
    """Tests for ParserSettings configuration."""

    def test_default_values(self) -> None:
        """Test default parser settings."""
        settings = ParserSettings()

        assert settings.heading_depths == (2, 3)
        assert settings.general_title == "General"

    def test_equal_depths_rejected(self) -> None:
        """Test that both heading depths must differ."""
        with pytest.raises(ConfigurationError) as exc_info:
            ParserSettings(heading_depths=(3, 3))

        assert "heading_depths" in str(exc_info.value)

    def test_depth_out_of_range_rejected(self) -> None:
        """Test that a top-level heading cannot open a section."""
        with pytest.raises(ConfigurationError):
            ParserSettings(heading_depths=(1, 2))


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "D&D 5E Character Tracker"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.content, ContentSettings)
        assert isinstance(settings.parser, ParserSettings)

    def test_debug_mode(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test debug mode setting."""
        monkeypatch.setenv("DND_TRACKER_DEBUG", "true")
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.is_production is False


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_caching(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings are cached."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_cache_clear(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that cache can be cleared."""
        monkeypatch.chdir(tmp_path)

        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_invalid_env_raises_configuration_error(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that a bad filesystem configuration surfaces as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DND_TRACKER_CONTENT_BACKEND", "filesystem")

        with pytest.raises(ConfigurationError):
            get_settings()
