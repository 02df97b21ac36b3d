"""Application context wiring the profile cache and its collaborators."""

from __future__ import annotations

import logging
from typing import Iterable

from .cache import ProfileCache
from .config import AppConfig, load_config, save_config
from .plugins import (
    ExtensionContext,
    ExtensionLoader,
    ProfileTypeDescriptor,
    ProfileTypeRegistry,
)
from .refresh_queue import RefreshQueue
from .schemas import BUILTIN_SCHEMAS
from .sources import ConfigSource, TomlConfigSource
from .vault import CredentialVault, InMemoryCredentialVault

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class ExplorerContext:
    """Owns the one shared profile cache and hands it to consumers."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        vault: CredentialVault | None = None,
        source: ConfigSource | None = None,
        builtin_extensions: Iterable[ProfileTypeDescriptor | type[ProfileTypeDescriptor]] | None = None,
    ) -> None:
        self._config = config if config is not None else _load_app_config()
        self._vault = vault or InMemoryCredentialVault()
        self._source = source or TomlConfigSource(
            home_dir=self._config.home_dir,
            project_dir=self._config.project_dir,
            config_name=self._config.config_name,
            vault=self._vault,
            credential_manager=self._config.credential_manager,
        )
        self._type_registry = ProfileTypeRegistry(BUILTIN_SCHEMAS)
        self._cache = ProfileCache(self._source, type_registry=self._type_registry)
        self._refresh_queue = RefreshQueue(self._cache)
        self._extension_loader = ExtensionLoader(
            ExtensionContext(cache=self._cache, type_registry=self._type_registry, config=self._config),
            is_enabled=self._config.is_extension_enabled,
            builtin_extensions=builtin_extensions,
        )
        self._extension_loader.load()

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def cache(self) -> ProfileCache:
        """The shared profile cache consumers should read from."""

        return self._cache

    @property
    def type_registry(self) -> ProfileTypeRegistry:
        return self._type_registry

    @property
    def extension_loader(self) -> ExtensionLoader:
        return self._extension_loader

    @property
    def refresh_queue(self) -> RefreshQueue:
        return self._refresh_queue

    async def refresh(self) -> None:
        """Refresh the cache for the configured API types."""

        await self._refresh_queue.submit(self._config.api_types)

    async def shutdown(self) -> None:
        await self._refresh_queue.wait()
        await self._extension_loader.shutdown()

    def available_extensions(self) -> tuple[str, ...]:
        """Names of discovered extensions."""

        return tuple(extension.name for extension in self._extension_loader.discovered)

    def is_extension_enabled(self, name: str) -> bool:
        return self._config.is_extension_enabled(name)

    def toggle_extension(self, name: str, enabled: bool) -> None:
        """Persist an extension flag; takes effect on the next context."""

        self._config = self._config.with_extension_enabled(name, enabled)
        save_config(self._config)
        LOG.info("Extension flag updated", extra={"extension": name, "enabled": enabled})


__all__ = ["ExplorerContext"]
