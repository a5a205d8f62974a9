"""Tests for easier_requests.config: XDG paths, atomic writes, settings, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from easier_requests.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    parse_bool,
    resolve_config,
    save_global_config,
    set_config_value,
)
from easier_requests.exceptions import ConfigError
from easier_requests.models import GlobalConfig, RequestOptions, TransportConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def xdg_config(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated config that always resolves through XDG variables."""
    monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: True)
    return isolated_config


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "easier-requests"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "easier-requests"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "easier-requests"
        assert result.is_dir()


class TestXDGPathsFallback:
    """Non-XDG platforms keep everything under ~/.easier-requests."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".easier-requests"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("easier_requests.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".easier-requests" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("easier_requests.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config file
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, xdg_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.options.throw_on_failure is True

    def test_save_and_load_roundtrip(self, xdg_config: Path) -> None:
        config = GlobalConfig(
            options=RequestOptions(throw_on_failure=False),
            transport=TransportConfig(base_url="https://api.example.com", timeout=5.0),
        )
        save_global_config(config)

        loaded = load_global_config()
        assert loaded.options.throw_on_failure is False
        assert loaded.transport.base_url == "https://api.example.com"
        assert loaded.transport.timeout == 5.0

    def test_file_lives_under_xdg_config_home(self, xdg_config: Path) -> None:
        assert global_config_path() == xdg_config / "config" / "easier-requests" / "config.json"

    def test_camel_case_option_in_file_is_accepted(self, xdg_config: Path) -> None:
        _write_json(global_config_path(), {"options": {"throwOnFailure": False}})
        assert load_global_config().options.throw_on_failure is False

    def test_load_invalid_json_raises_config_error(self, xdg_config: Path) -> None:
        path = global_config_path()
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, xdg_config: Path) -> None:
        _write_json(global_config_path(), {"transport": {"timeout": "soon"}})
        with pytest.raises(ConfigError):
            load_global_config()


class TestSetConfigValue:
    def test_sets_boolean_option(self, xdg_config: Path) -> None:
        config = set_config_value("options.throw_on_failure", "false")
        assert config.options.throw_on_failure is False
        assert load_global_config().options.throw_on_failure is False

    def test_sets_base_url(self, xdg_config: Path) -> None:
        set_config_value("transport.base_url", "https://api.example.com")
        assert load_global_config().transport.base_url == "https://api.example.com"

    def test_empty_base_url_clears_it(self, xdg_config: Path) -> None:
        set_config_value("transport.base_url", "https://api.example.com")
        set_config_value("transport.base_url", "")
        assert load_global_config().transport.base_url is None

    def test_unknown_key_raises(self, xdg_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value("transport.proxy", "http://proxy")

    def test_invalid_value_raises_and_leaves_file(self, xdg_config: Path) -> None:
        set_config_value("transport.timeout", "12.5")
        with pytest.raises(ConfigError, match="transport.timeout"):
            set_config_value("transport.timeout", "later")
        assert load_global_config().transport.timeout == 12.5


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestParseBool:
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_true_spellings(self, value: str) -> None:
        assert parse_bool(value, "TEST") is True

    @pytest.mark.parametrize("value", ["0", "False", "no", "off"])
    def test_false_spellings(self, value: str) -> None:
        assert parse_bool(value, "TEST") is False

    def test_unknown_spelling_raises(self) -> None:
        with pytest.raises(ConfigError, match="TEST"):
            parse_bool("perhaps", "TEST")


class TestResolveConfig:
    def test_defaults(self, xdg_config: Path) -> None:
        config = resolve_config()
        assert config.options.throw_on_failure is True
        assert config.transport.base_url is None

    def test_file_values_are_used(self, xdg_config: Path) -> None:
        save_global_config(
            GlobalConfig(
                options=RequestOptions(throw_on_failure=False),
                transport=TransportConfig(base_url="https://file.example.com"),
            )
        )
        config = resolve_config()
        assert config.options.throw_on_failure is False
        assert config.transport.base_url == "https://file.example.com"

    def test_env_overrides_file(self, xdg_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig(options=RequestOptions(throw_on_failure=True)))
        monkeypatch.setenv("EASIER_REQUESTS_THROW_ON_FAILURE", "0")
        monkeypatch.setenv("EASIER_REQUESTS_BASE_URL", "https://env.example.com")

        config = resolve_config()
        assert config.options.throw_on_failure is False
        assert config.transport.base_url == "https://env.example.com"

    def test_cli_overrides_env(self, xdg_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EASIER_REQUESTS_THROW_ON_FAILURE", "0")
        monkeypatch.setenv("EASIER_REQUESTS_BASE_URL", "https://env.example.com")

        config = resolve_config(cli_throw_on_failure=True, cli_base_url="https://cli.example.com")
        assert config.options.throw_on_failure is True
        assert config.transport.base_url == "https://cli.example.com"

    def test_invalid_env_boolean_raises(
        self, xdg_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EASIER_REQUESTS_THROW_ON_FAILURE", "sometimes")
        with pytest.raises(ConfigError, match="EASIER_REQUESTS_THROW_ON_FAILURE"):
            resolve_config()

    def test_resolution_does_not_touch_file(
        self, xdg_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EASIER_REQUESTS_BASE_URL", "https://env.example.com")
        resolve_config()
        assert not global_config_path().exists()

    def test_extra_options_survive_resolution(self, xdg_config: Path) -> None:
        _write_json(global_config_path(), {"options": {"label": "nightly"}})
        config = resolve_config(cli_throw_on_failure=False)
        assert config.options.model_extra == {"label": "nightly"}
        assert config.options.throw_on_failure is False
