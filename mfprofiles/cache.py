"""In-memory catalog of merged profiles and the operations consumers use."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .merger import ProfileMerger
from .models import (
    BASE_PROFILE_TYPE,
    BUILTIN_PROFILE_TYPES,
    DEFAULT_PROFILE_TYPE,
    MergedProfile,
    ProfileAttributes,
    UrlValidation,
    ValidationStatus,
)
from .plugins.registry import ProfileTypeRegistry
from .sources import ConfigSource
from .tokens import TokenInheritancePolicy
from .urls import validate_and_parse_url

LOG = logging.getLogger(__name__)


class ProfileNotFoundError(LookupError):
    """Raised when a catalog lookup by name finds nothing."""


@dataclass(frozen=True, slots=True)
class ProfileCatalog:
    """Immutable snapshot of every known profile.

    ``all_profiles`` is unique by ``(name, type)``; default pointers refer to
    the same objects held in the buckets.
    """

    all_profiles: tuple[MergedProfile, ...] = ()
    profiles_by_type: Mapping[str, tuple[MergedProfile, ...]] = field(default_factory=dict)
    default_profile_by_type: Mapping[str, MergedProfile] = field(default_factory=dict)
    all_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "all_profiles", tuple(self.all_profiles))
        object.__setattr__(
            self,
            "profiles_by_type",
            MappingProxyType({key: tuple(bucket) for key, bucket in self.profiles_by_type.items()}),
        )
        object.__setattr__(self, "default_profile_by_type", MappingProxyType(dict(self.default_profile_by_type)))
        object.__setattr__(self, "all_types", tuple(self.all_types))

    @classmethod
    def empty(cls) -> ProfileCatalog:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.all_profiles and not self.all_types

    def replace(self, **changes: Any) -> ProfileCatalog:
        return replace(self, **changes)

    def with_updated(self, updated: MergedProfile) -> ProfileCatalog:
        """Return a snapshot with the ``(name, type)`` entry swapped for ``updated``."""

        key = (updated.name, updated.type)
        changed = False
        all_profiles = list(self.all_profiles)
        for index, profile in enumerate(all_profiles):
            if (profile.name, profile.type) == key:
                all_profiles[index] = updated
                changed = True
                break
        profiles_by_type = dict(self.profiles_by_type)
        bucket = profiles_by_type.get(updated.type)
        if bucket is not None:
            profiles_by_type[updated.type] = tuple(
                updated if profile.name == updated.name else profile for profile in bucket
            )
        defaults = dict(self.default_profile_by_type)
        current_default = defaults.get(updated.type)
        if current_default is not None and current_default.name == updated.name:
            defaults[updated.type] = updated
            changed = True
        if not changed:
            return self
        return replace(
            self,
            all_profiles=tuple(all_profiles),
            profiles_by_type=profiles_by_type,
            default_profile_by_type=defaults,
        )


@dataclass(frozen=True, slots=True)
class CatalogBuilt:
    catalog: ProfileCatalog


@dataclass(frozen=True, slots=True)
class EnumerationFailure:
    error: Exception


RefreshResult = CatalogBuilt | EnumerationFailure


class ProfileCache:
    """Catalog of merged profiles built from a :class:`ConfigSource`.

    Reads are synchronous and always see one whole snapshot. ``refresh`` swaps
    the snapshot as a unit but does not serialize overlapping calls: whichever
    refresh finishes last wins. Callers that may overlap refreshes should go
    through :class:`mfprofiles.refresh_queue.RefreshQueue`.
    """

    def __init__(
        self,
        source: ConfigSource,
        *,
        log: logging.Logger | None = None,
        type_registry: ProfileTypeRegistry | None = None,
        merger: ProfileMerger | None = None,
        token_policy: TokenInheritancePolicy | None = None,
        builtin_types: Iterable[str] = BUILTIN_PROFILE_TYPES,
    ) -> None:
        self._source = source
        self._log = log or LOG
        self._type_registry = type_registry
        self._merger = merger or ProfileMerger()
        self._token_policy = token_policy or TokenInheritancePolicy()
        self._builtin_types = tuple(builtin_types)
        self._external_types: list[str] = []
        self._catalog = ProfileCatalog.empty()
        self._validation: dict[str, ValidationStatus] = {}

    @property
    def catalog(self) -> ProfileCatalog:
        """Current catalog snapshot."""

        return self._catalog

    @property
    def all_profiles(self) -> list[MergedProfile]:
        return list(self._catalog.all_profiles)

    @property
    def external_types(self) -> tuple[str, ...]:
        return tuple(self._external_types)

    async def get_profile_info(self) -> ConfigSource:
        """Re-read the config source from disk and return it."""

        await self._source.read_profiles_from_disk()
        return self._source

    def registered_types(self, known_types: Iterable[str] = ()) -> list[str]:
        """Types a refresh enumerates, in order and without duplicates."""

        return list(
            dict.fromkeys([*known_types, *self._builtin_types, *self._external_types, BASE_PROFILE_TYPE])
        )

    def register_custom_profiles_type(self, type_name: str) -> None:
        """Include ``type_name`` in subsequent refreshes."""

        if type_name not in self._external_types:
            self._external_types.append(type_name)

    async def refresh(self, known_types: Iterable[str] = (DEFAULT_PROFILE_TYPE,)) -> None:
        """Rebuild the catalog; on failure leave it empty and log, never raise."""

        result = await self._build_catalog(known_types)
        if isinstance(result, EnumerationFailure):
            self._catalog = ProfileCatalog.empty()
            self._log.error("Failed to refresh profile catalog: %s", result.error)
        else:
            self._catalog = result.catalog
        self._validation.clear()

    def load_named_profile(self, name: str, profile_type: str | None = None) -> MergedProfile:
        for profile in self._catalog.all_profiles:
            if profile.name == name and (profile_type is None or profile.type == profile_type):
                return profile
        raise ProfileNotFoundError(f"Could not find profile named: {name}.")

    def get_default_profile(self, profile_type: str = DEFAULT_PROFILE_TYPE) -> MergedProfile | None:
        return self._catalog.default_profile_by_type.get(profile_type)

    def get_default_config_profile(self, source: ConfigSource, profile_type: str) -> ProfileAttributes | None:
        return source.get_default_profile(profile_type)

    def get_profiles(self, profile_type: str = DEFAULT_PROFILE_TYPE) -> list[MergedProfile]:
        return list(self._catalog.profiles_by_type.get(profile_type, ()))

    def get_all_types(self) -> list[str]:
        return list(self._catalog.all_types)

    def get_base_profile(self) -> MergedProfile | None:
        return self._catalog.default_profile_by_type.get(BASE_PROFILE_TYPE)

    def update_profiles_arrays(self, updated: MergedProfile) -> None:
        """Reflect one edited profile without a full refresh."""

        catalog = self._catalog.with_updated(updated)
        if catalog is self._catalog:
            self._log.debug(
                "No catalog entry to update",
                extra={"profile_name": updated.name, "profile_type": updated.type},
            )
            return
        self._catalog = catalog

    async def fetch_all_profiles_by_type(self, profile_type: str) -> list[MergedProfile]:
        """Freshly merged profiles of one type; the catalog is left untouched."""

        source = await self.get_profile_info()
        return self._fetch_type(source, profile_type, self._merge_base(source))

    async def fetch_all_profiles(self) -> list[MergedProfile]:
        source = await self.get_profile_info()
        base = self._merge_base(source)
        profiles: list[MergedProfile] = []
        for profile_type in self._catalog.all_types or self.registered_types():
            profiles.extend(self._fetch_type(source, profile_type, base))
        return profiles

    async def direct_load(self, profile_type: str, name: str) -> MergedProfile | None:
        for profile in await self.fetch_all_profiles_by_type(profile_type):
            if profile.name == name:
                return profile
        return None

    async def get_profile_from_config(
        self, name: str, profile_type: str | None = None
    ) -> ProfileAttributes | None:
        source = await self.get_profile_info()
        return self._find_attributes(source, name, profile_type)

    async def get_loaded_prof_config(self, name: str, profile_type: str | None = None) -> MergedProfile | None:
        """Merged profile straight from config, without the token rule applied."""

        source = await self.get_profile_info()
        attrs = self._find_attributes(source, name, profile_type)
        if attrs is None:
            return None
        return MergedProfile(attrs.name, attrs.type, self._merger.merge_attributes(source, attrs))

    async def fetch_base_profile(self) -> MergedProfile | None:
        source = await self.get_profile_info()
        return self._merge_base(source)

    async def get_names_for_type(self, profile_type: str) -> list[str]:
        return [profile.name for profile in await self.fetch_all_profiles_by_type(profile_type)]

    async def is_credentials_secured(self) -> bool:
        """Whether credentials are vault-backed; assumes so if the check fails."""

        try:
            return self._source.is_secured()
        except Exception as exc:
            self._log.error("Failed to determine whether credentials are secured: %s", exc)
        return True

    def get_schema(self, profile_type: str) -> dict[str, Any]:
        if self._type_registry is None:
            return {}
        schema = self._type_registry.get_schema(profile_type)
        return dict(schema.properties) if schema is not None else {}

    def validate_and_parse_url(self, new_url: str) -> UrlValidation:
        return validate_and_parse_url(new_url)

    def record_validation(self, name: str, status: ValidationStatus) -> None:
        self._validation[name] = status

    def get_validation(self, name: str) -> ValidationStatus:
        return self._validation.get(name, ValidationStatus.UNVERIFIED)

    async def _build_catalog(self, known_types: Iterable[str]) -> RefreshResult:
        try:
            source = await self.get_profile_info()
            types = self.registered_types(known_types)
            all_profiles: list[MergedProfile] = []
            profiles_by_type: dict[str, tuple[MergedProfile, ...]] = {}
            defaults: dict[str, MergedProfile] = {}
            for profile_type in types:
                bucket: list[MergedProfile] = []
                seen: set[str] = set()
                for attrs in source.get_all_profiles(profile_type):
                    if attrs.type != profile_type or attrs.name in seen:
                        continue
                    properties = self._merger.resolve(source, attrs)
                    if properties is None:
                        self._log.warning(
                            "Skipping profile that could not be merged: %s",
                            attrs.name,
                            extra={"profile_type": profile_type},
                        )
                        continue
                    profile = MergedProfile(attrs.name, attrs.type, properties)
                    if attrs.is_default:
                        defaults[profile_type] = profile
                    seen.add(attrs.name)
                    bucket.append(profile)
                if bucket:
                    profiles_by_type[profile_type] = tuple(bucket)
                    all_profiles.extend(bucket)
            catalog = ProfileCatalog(
                all_profiles=tuple(all_profiles),
                profiles_by_type=profiles_by_type,
                default_profile_by_type=defaults,
                all_types=tuple(types),
            )
            return CatalogBuilt(self._token_policy.apply_to_catalog(catalog))
        except Exception as exc:
            return EnumerationFailure(exc)

    def _fetch_type(
        self, source: ConfigSource, profile_type: str, base: MergedProfile | None
    ) -> list[MergedProfile]:
        profiles: list[MergedProfile] = []
        for attrs in source.get_all_profiles(profile_type):
            properties = self._merger.resolve(source, attrs)
            if properties is None:
                continue
            profiles.append(self._token_policy.apply(MergedProfile(attrs.name, attrs.type, properties), base))
        return profiles

    def _merge_base(self, source: ConfigSource) -> MergedProfile | None:
        attrs = source.get_default_profile(BASE_PROFILE_TYPE)
        if attrs is None:
            return None
        return MergedProfile(attrs.name, attrs.type, self._merger.merge_attributes(source, attrs))

    @staticmethod
    def _find_attributes(
        source: ConfigSource, name: str, profile_type: str | None
    ) -> ProfileAttributes | None:
        for attrs in source.get_all_profiles():
            if attrs.name == name and (profile_type is None or attrs.type == profile_type):
                return attrs
        return None


__all__ = [
    "CatalogBuilt",
    "EnumerationFailure",
    "ProfileCache",
    "ProfileCatalog",
    "ProfileNotFoundError",
    "RefreshResult",
]
