"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

CONFIG_FILE = Path.home() / ".config" / "mfprofiles" / "config.toml"
DEFAULT_HOME_DIR = Path.home() / ".mfprofiles"


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    home_dir: Path = Field(default_factory=lambda: DEFAULT_HOME_DIR)
    project_dir: Path | None = None
    config_name: str = "mfprofiles"
    credential_manager: str | bool | None = "@mfprofiles/secure"
    api_types: list[str] = Field(default_factory=lambda: ["zosmf"])
    extensions: dict[str, bool] = Field(default_factory=dict)

    def is_extension_enabled(self, name: str) -> bool:
        """Extensions are on by default; any ``true`` flag makes the flags an allowlist."""

        if any(self.extensions.values()):
            return self.extensions.get(name, False)
        return self.extensions.get(name, True)

    def with_extension_enabled(self, name: str, enabled: bool) -> AppConfig:
        extensions = {key: flag for key, flag in self.extensions.items() if key != name}
        if not enabled or any(extensions.values()):
            extensions[name] = enabled
        return self.model_copy(update={"extensions": extensions})

    def with_project_dir(self, project_dir: Path | None) -> AppConfig:
        return self.model_copy(update={"project_dir": project_dir})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    return AppConfig(**data)


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f'home_dir = "{_toml_path(config.home_dir)}"',
        f'config_name = "{config.config_name}"',
    ]
    if config.project_dir is not None:
        lines.append(f'project_dir = "{_toml_path(config.project_dir)}"')
    if isinstance(config.credential_manager, bool):
        lines.append(f"credential_manager = {str(config.credential_manager).lower()}")
    elif config.credential_manager is not None:
        lines.append(f'credential_manager = "{config.credential_manager}"')
    else:
        lines.append("credential_manager = false")
    types = ", ".join(f'"{name}"' for name in config.api_types)
    lines.append(f"api_types = [{types}]")
    if config.extensions:
        lines.append("")
        lines.append("[extensions]")
        for name in sorted(config.extensions):
            flag = "true" if config.extensions[name] else "false"
            lines.append(f'"{name}" = {flag}')
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if isinstance(raw, dict):
        for key in ("home_dir", "project_dir"):
            value = raw.get(key)
            if isinstance(value, str) and value:
                data[key] = Path(value).expanduser()
        config_name = raw.get("config_name")
        if isinstance(config_name, str) and config_name:
            data["config_name"] = config_name
        credential_manager = raw.get("credential_manager")
        if isinstance(credential_manager, (str, bool)):
            data["credential_manager"] = credential_manager
        api_types = raw.get("api_types")
        if isinstance(api_types, list):
            parsed_types = [str(name) for name in api_types if isinstance(name, str) and name]
            if parsed_types:
                data["api_types"] = list(dict.fromkeys(parsed_types))
        extensions = raw.get("extensions")
        if isinstance(extensions, dict):
            parsed_extensions: dict[str, bool] = {}
            for name, enabled in extensions.items():
                parsed_extensions[str(name)] = bool(enabled)
            data["extensions"] = parsed_extensions
    return data


def _toml_path(path: Path) -> str:
    return str(path).replace("\\", "\\\\")
