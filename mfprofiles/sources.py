"""Configuration sources the profile cache reads from."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import tomllib
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from pydantic import ValidationError

from .layers import (
    ConfigLayer,
    ConfigLayerData,
    ConfigSourceError,
    LayerStack,
    ResolvedNode,
    UnknownProfileError,
    secure_paths,
)
from .models import KnownArg, LayerRef, MergedArgs, ProfileAttributes
from .vault import CredentialSecurityCheck, CredentialVault, CredentialVaultError

LOG = logging.getLogger(__name__)

DEFAULT_CREDENTIAL_MANAGER = "@mfprofiles/secure"


@runtime_checkable
class ConfigSource(Protocol):
    """Protocol implemented by layered profile configuration stores."""

    async def read_profiles_from_disk(self) -> None:
        """(Re)load every layer and its secure values."""

    def get_all_profiles(self, profile_type: str | None = None) -> list[ProfileAttributes]:
        """Return attribute records for all profiles, optionally of one type."""

    def get_default_profile(self, profile_type: str) -> ProfileAttributes | None:
        """Return the default profile for a type, if one is set."""

    def merge_args_for_profile(self, attrs: ProfileAttributes, *, get_secure_vals: bool = False) -> MergedArgs:
        """Merge the profile's arguments across layers and ancestors."""

    def load_secure_arg(self, arg: KnownArg) -> Any:
        """Resolve a secure argument's value from secure storage."""

    def is_secured(self) -> bool:
        """Whether secure values are held by a credential vault."""


class LayeredConfigSource:
    """Shared lookup logic over a :class:`LayerStack`."""

    def __init__(
        self,
        *,
        vault: CredentialVault | None = None,
        credential_manager: str | bool | None = DEFAULT_CREDENTIAL_MANAGER,
    ) -> None:
        self._security = CredentialSecurityCheck(credential_manager, vault)
        self._stack = LayerStack((), secured=False)

    @property
    def layers(self) -> tuple[ConfigLayer, ...]:
        return self._stack.layers

    def get_all_profiles(self, profile_type: str | None = None) -> list[ProfileAttributes]:
        return [
            self._attributes(node, node.type)
            for node in self._stack.iter_profiles()
            if node.type and (profile_type is None or node.type == profile_type)
        ]

    def get_default_profile(self, profile_type: str) -> ProfileAttributes | None:
        name = self._stack.default_name(profile_type)
        if not name:
            return None
        node = self._stack.find(name)
        if node is None or node.type != profile_type:
            LOG.debug(
                "Default profile pointer does not match a profile",
                extra={"profile_type": profile_type, "profile_name": name},
            )
            return None
        return self._attributes(node, profile_type)

    def merge_args_for_profile(self, attrs: ProfileAttributes, *, get_secure_vals: bool = False) -> MergedArgs:
        node = self._stack.find(attrs.name)
        if node is None or node.type != attrs.type:
            raise UnknownProfileError(f"Profile '{attrs.name}' of type '{attrs.type}' does not exist.")
        return self._stack.merge_args(attrs.name, include_secure=get_secure_vals)

    def load_secure_arg(self, arg: KnownArg) -> Any:
        return self._stack.secure_value(arg.location)

    def is_secured(self) -> bool:
        return self._security.is_secured()

    def _attributes(self, node: ResolvedNode, profile_type: str) -> ProfileAttributes:
        return ProfileAttributes(
            name=node.path,
            type=profile_type,
            location=node.location,
            is_default=self._stack.default_name(profile_type) == node.path,
        )

    def _build_layers(self, parsed: Sequence[tuple[LayerRef, ConfigLayerData]]) -> LayerStack:
        secured = self._security.is_secured()
        layers = [self._with_secure_values(ref, data, secured) for ref, data in parsed]
        return LayerStack(layers, secured=secured)

    def _with_secure_values(self, ref: LayerRef, data: ConfigLayerData, secured: bool) -> ConfigLayer:
        paths = secure_paths(data)
        vault = self._security.vault
        if not secured or not paths or vault is None:
            return ConfigLayer(ref=ref, data=data)
        try:
            stored = vault.load(ref.path)
        except CredentialVaultError:
            raise
        except Exception as exc:
            raise CredentialVaultError(f"Failed to load secure values for '{ref.path}': {exc}") from exc
        return ConfigLayer(ref=ref, data=data, secure_values={path: stored[path] for path in paths if path in stored})


class StaticConfigSource(LayeredConfigSource):
    """Config source over in-memory layers, highest precedence first."""

    def __init__(
        self,
        layers: Sequence[ConfigLayerData | Mapping[str, Any]],
        *,
        vault: CredentialVault | None = None,
        credential_manager: str | bool | None = DEFAULT_CREDENTIAL_MANAGER,
    ) -> None:
        super().__init__(vault=vault, credential_manager=credential_manager)
        self._parsed: list[tuple[LayerRef, ConfigLayerData]] = []
        for index, layer in enumerate(layers):
            data = layer if isinstance(layer, ConfigLayerData) else _validate_layer(layer, f"memory://layer{index}")
            self._parsed.append((LayerRef(path=f"memory://layer{index}"), data))

    async def read_profiles_from_disk(self) -> None:
        self._stack = self._build_layers(self._parsed)


class TomlConfigSource(LayeredConfigSource):
    """Reads project and global TOML layers from disk."""

    def __init__(
        self,
        *,
        home_dir: Path,
        project_dir: Path | None = None,
        config_name: str = "mfprofiles",
        vault: CredentialVault | None = None,
        credential_manager: str | bool | None = DEFAULT_CREDENTIAL_MANAGER,
    ) -> None:
        super().__init__(vault=vault, credential_manager=credential_manager)
        self._home_dir = Path(home_dir)
        self._project_dir = Path(project_dir) if project_dir is not None else None
        self._config_name = config_name

    @property
    def config_file_name(self) -> str:
        return f"{self._config_name}.config.toml"

    @property
    def user_config_file_name(self) -> str:
        return f"{self._config_name}.config.user.toml"

    @property
    def paths(self) -> list[Path]:
        """Candidate layer files, highest precedence first."""

        return [path for path, _ in self._candidates()]

    async def read_profiles_from_disk(self) -> None:
        self._stack = await asyncio.to_thread(self._load)

    def _load(self) -> LayerStack:
        parsed: list[tuple[LayerRef, ConfigLayerData]] = []
        for path, ref in self._candidates():
            if not path.is_file():
                continue
            parsed.append((ref, read_layer_file(path)))
            LOG.debug("Loaded profile layer", extra={"layer": ref.label, "path": str(path)})
        return self._build_layers(parsed)

    def _candidates(self) -> list[tuple[Path, LayerRef]]:
        candidates: list[tuple[Path, LayerRef]] = []
        if self._project_dir is not None:
            for user, name in ((True, self.user_config_file_name), (False, self.config_file_name)):
                path = self._project_dir / name
                candidates.append((path, LayerRef(path=str(path), user=user, global_=False)))
        for user, name in ((True, self.user_config_file_name), (False, self.config_file_name)):
            path = self._home_dir / name
            candidates.append((path, LayerRef(path=str(path), user=user, global_=True)))
        return candidates


def read_layer_file(path: Path) -> ConfigLayerData:
    """Parse a single layer file, raising :class:`ConfigSourceError` on failure."""

    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigSourceError(f"Failed to read profile layer '{path}': {exc}") from exc
    return _validate_layer(raw, str(path))


def _validate_layer(raw: Mapping[str, Any], origin: str) -> ConfigLayerData:
    try:
        return ConfigLayerData.model_validate(raw)
    except ValidationError as exc:
        raise ConfigSourceError(f"Invalid profile layer '{origin}': {exc}") from exc


__all__ = [
    "ConfigSource",
    "ConfigSourceError",
    "DEFAULT_CREDENTIAL_MANAGER",
    "LayeredConfigSource",
    "StaticConfigSource",
    "TomlConfigSource",
    "UnknownProfileError",
    "read_layer_file",
]
