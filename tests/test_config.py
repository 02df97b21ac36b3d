"""Tests for AppConfig helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from mfprofiles import config as config_module
from mfprofiles.config import AppConfig, load_config, save_config


def test_extensions_are_enabled_when_unset() -> None:
    config = AppConfig()

    assert config.is_extension_enabled("zftp")


def test_true_flag_turns_extensions_into_allowlist() -> None:
    config = AppConfig(extensions={"zftp": True, "unused": False})

    assert config.is_extension_enabled("zftp")
    assert not config.is_extension_enabled("unused")
    assert not config.is_extension_enabled("other")


def test_false_flags_only_block_named_extensions() -> None:
    config = AppConfig(extensions={"zftp": False})

    assert not config.is_extension_enabled("zftp")
    assert config.is_extension_enabled("other")


def test_load_config_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_config()

    assert result == AppConfig()


def test_load_config_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
home_dir = "{tmp_path / 'home'}"
project_dir = "{tmp_path / 'project'}"
config_name = "team"
credential_manager = false
api_types = ["zosmf", "zftp", "zosmf"]

[extensions]
zftp = true
other = false
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.home_dir == tmp_path / "home"
    assert result.project_dir == tmp_path / "project"
    assert result.config_name == "team"
    assert result.credential_manager is False
    assert result.api_types == ["zosmf", "zftp"]
    assert result.extensions == {"zftp": True, "other": False}


def test_load_config_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("api_types = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result == AppConfig()


def test_with_extension_enabled_toggles_flags() -> None:
    config = AppConfig(extensions={})

    updated = config.with_extension_enabled("zftp", False)
    assert updated.extensions == {"zftp": False}
    restored = updated.with_extension_enabled("zftp", True)
    assert restored.extensions == {}
    assert restored.is_extension_enabled("zftp")


def test_enabling_under_allowlist_adds_flag() -> None:
    config = AppConfig(extensions={"other": True})

    updated = config.with_extension_enabled("zftp", True)

    assert updated.extensions == {"other": True, "zftp": True}
    assert updated.is_extension_enabled("zftp")
    assert config.extensions == {"other": True}


def test_save_config_persists_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "nested" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    save_config(
        AppConfig(
            home_dir=tmp_path / "home",
            config_name="team",
            credential_manager=None,
            api_types=["zosmf", "zftp"],
            extensions={"zftp": False},
        )
    )

    content = config_path.read_text()
    assert 'config_name = "team"' in content
    assert "credential_manager = false" in content
    assert 'api_types = ["zosmf", "zftp"]' in content
    assert "[extensions]" in content
    assert '"zftp" = false' in content
    assert "project_dir" not in content


def test_save_then_load_keeps_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")
    config = AppConfig(home_dir=tmp_path, project_dir=tmp_path / "project", api_types=["zosmf", "tso"])

    save_config(config)

    assert load_config() == config
