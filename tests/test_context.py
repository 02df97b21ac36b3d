"""Context-level tests for cache wiring and extension loading."""

from __future__ import annotations

import importlib.metadata as metadata
from pathlib import Path

import pytest

from examples.plugins.ftp_profile_type import FtpProfileTypeExtension
from mfprofiles import config as config_module
from mfprofiles.config import AppConfig
from mfprofiles.context import ExplorerContext
from mfprofiles.sources import StaticConfigSource, TomlConfigSource

ENTRY_POINT = metadata.EntryPoint(
    name="zftp",
    value="examples.plugins.ftp_profile_type:FtpProfileTypeExtension",
    group="mfprofiles.profile_types",
)

LAYER = {
    "profiles": {
        "lpar1": {"type": "zosmf", "properties": {"host": "lpar1.example.com", "port": 443}},
        "ftp1": {"type": "zftp", "properties": {"host": "ftp.example.com", "port": 21}},
        "base": {"type": "base", "properties": {"host": "gw.example.com", "port": 7554}},
    },
    "defaults": {"zosmf": "lpar1", "base": "base"},
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def fake_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    def _entry_points() -> metadata.EntryPoints:
        return metadata.EntryPoints((ENTRY_POINT,))

    monkeypatch.setattr(metadata, "entry_points", _entry_points)


@pytest.mark.anyio
async def test_context_registers_extension_types() -> None:
    context = ExplorerContext(AppConfig(), source=StaticConfigSource([LAYER], credential_manager=False))

    try:
        await context.refresh()
        assert context.extension_loader.loaded
        assert "zftp" in context.type_registry
        assert context.cache.get_all_types() == ["zosmf", "ssh", "zftp", "base"]
        assert [profile.name for profile in context.cache.get_profiles("zftp")] == ["ftp1"]
        assert "secureFtp" in context.cache.get_schema("zftp")
        assert context.available_extensions() == ("zftp",)
    finally:
        await context.shutdown()


@pytest.mark.anyio
async def test_context_shutdown_invokes_extension_hook() -> None:
    context = ExplorerContext(AppConfig(), source=StaticConfigSource([LAYER], credential_manager=False))
    descriptor = context.extension_loader.loaded[0].descriptor

    await context.shutdown()

    assert descriptor.shutdown_called


def test_context_skips_disabled_extensions() -> None:
    config = AppConfig(extensions={FtpProfileTypeExtension.name: False})

    context = ExplorerContext(config, source=StaticConfigSource([LAYER]))

    assert context.extension_loader.loaded == ()
    assert "zftp" not in context.type_registry
    assert context.cache.external_types == ()
    assert not context.is_extension_enabled("zftp")


@pytest.mark.anyio
async def test_context_builds_toml_source_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = AppConfig(home_dir=tmp_path / "home", project_dir=tmp_path / "project", config_name="team")
    monkeypatch.setattr("mfprofiles.context._load_app_config", lambda: config)

    context = ExplorerContext()

    source = await context.cache.get_profile_info()
    assert isinstance(source, TomlConfigSource)
    assert source.paths[0] == tmp_path / "project" / "team.config.user.toml"
    assert context.config is config


def test_toggle_extension_persists_flag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    context = ExplorerContext(AppConfig(), source=StaticConfigSource([LAYER]))

    context.toggle_extension("zftp", False)

    assert not context.is_extension_enabled("zftp")
    assert '"zftp" = false' in config_path.read_text()
