"""Tests for config: data directory resolution, fallback settings and the client CDN URL."""

import os
from pathlib import Path
from unittest import mock

import pytest

import config


class TestGetDataDir:
    """Test get_data_dir() resolution priority."""

    def setup_method(self):
        """Reset cached value before each test."""
        config._reset_data_dir()

    def teardown_method(self):
        """Reset cached value after each test."""
        config._reset_data_dir()

    def test_default_is_home_maidr(self):
        """With no env var or config key, returns ~/.maidr."""
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MAIDR_DIR", None)
            with mock.patch("config.get", return_value=None):
                result = config.get_data_dir()
        assert result == Path.home() / ".maidr"

    def test_env_var_overrides_default(self, tmp_path):
        """MAIDR_DIR env var takes precedence over default."""
        target = tmp_path / "custom-dir"
        with mock.patch.dict(os.environ, {"MAIDR_DIR": str(target)}):
            result = config.get_data_dir()
        assert result == target.resolve()

    def test_config_key_overrides_default(self, tmp_path):
        """data_dir config key overrides the default."""
        target = tmp_path / "config-dir"
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MAIDR_DIR", None)
            with mock.patch("config.get", side_effect=lambda k, d=None: str(target) if k == "data_dir" else d):
                result = config.get_data_dir()
        assert result == target.resolve()

    def test_env_var_beats_config_key(self, tmp_path):
        """MAIDR_DIR env var has higher priority than config key."""
        env_dir = tmp_path / "env-dir"
        cfg_dir = tmp_path / "cfg-dir"
        with mock.patch.dict(os.environ, {"MAIDR_DIR": str(env_dir)}):
            with mock.patch("config.get", side_effect=lambda k, d=None: str(cfg_dir) if k == "data_dir" else d):
                result = config.get_data_dir()
        assert result == env_dir.resolve()

    def test_result_is_cached(self, tmp_path):
        """Second call returns cached value without re-reading env/config."""
        target = tmp_path / "cached-dir"
        with mock.patch.dict(os.environ, {"MAIDR_DIR": str(target)}):
            first = config.get_data_dir()
        # Even after removing the env var, cached value persists
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("MAIDR_DIR", None)
            second = config.get_data_dir()
        assert first == second == target.resolve()

    def test_tilde_expansion(self):
        """Tilde paths in env var are expanded."""
        with mock.patch.dict(os.environ, {"MAIDR_DIR": "~/my-maidr-data"}):
            result = config.get_data_dir()
        assert "~" not in str(result)
        assert result == (Path.home() / "my-maidr-data").resolve()

    def test_reset_clears_cache(self, tmp_path):
        """_reset_data_dir() allows re-resolution."""
        dir1 = tmp_path / "dir1"
        dir2 = tmp_path / "dir2"
        with mock.patch.dict(os.environ, {"MAIDR_DIR": str(dir1)}):
            first = config.get_data_dir()
        assert first == dir1.resolve()

        config._reset_data_dir()
        with mock.patch.dict(os.environ, {"MAIDR_DIR": str(dir2)}):
            second = config.get_data_dir()
        assert second == dir2.resolve()


class TestFallbackSettings:
    """set_fallback() validation and previous-settings return value."""

    def setup_method(self):
        self._saved = config.get_fallback()

    def teardown_method(self):
        config.set_fallback(**self._saved)

    def test_defaults(self):
        settings = config.get_fallback()
        assert set(settings) == {"enabled", "format", "warning"}
        assert settings["format"] in config.FALLBACK_FORMATS

    def test_returns_previous_settings(self):
        config.set_fallback(enabled=True, format="png", warning=True)
        previous = config.set_fallback(enabled=False, format="svg", warning=False)
        assert previous == {"enabled": True, "format": "png", "warning": True}
        assert config.get_fallback() == {"enabled": False, "format": "svg", "warning": False}

    def test_rejects_unknown_format(self):
        with pytest.raises(ValueError, match="'format' must be one of"):
            config.set_fallback(format="gif")

    def test_rejects_non_boolean(self):
        with pytest.raises(ValueError, match="single boolean"):
            config.set_fallback(enabled="yes")
        with pytest.raises(ValueError, match="single boolean"):
            config.set_fallback(warning=1)

    def test_rejected_call_leaves_settings(self):
        before = config.get_fallback()
        with pytest.raises(ValueError):
            config.set_fallback(format="bmp")
        assert config.get_fallback() == before


class TestCdnUrl:
    def test_version_substituted(self):
        assert "maidr@1.2.3" in config.get_cdn_url("1.2.3")

    def test_default_version(self):
        assert config.MAIDR_VERSION in config.get_cdn_url()
