"""Rule deciding whether a service profile keeps a gateway token."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from .models import APIML_TOKEN_TYPES, BASE_PROFILE_TYPE, MergedProfile

if TYPE_CHECKING:
    from .cache import ProfileCatalog

TOKEN_KEYS = ("tokenType", "tokenValue")


class TokenInheritancePolicy:
    """Strips gateway tokens from service profiles that point elsewhere.

    A token minted for the base profile's host/port must not travel to a
    service profile that talks to a different host or port.
    """

    def __init__(self, token_types: Iterable[str] = APIML_TOKEN_TYPES) -> None:
        self._token_types = frozenset(token_types)

    @property
    def token_types(self) -> frozenset[str]:
        """Token types that are only valid against the base profile's host."""

        return self._token_types

    def should_remove_token(self, profile: MergedProfile, base: MergedProfile | None) -> bool:
        if base is None or profile.type == BASE_PROFILE_TYPE:
            return False
        if not _has_address(profile) or not _has_address(base):
            return False
        if profile.host == base.host and profile.port == base.port:
            return False
        return profile.token_type in self._token_types

    def apply(self, profile: MergedProfile, base: MergedProfile | None) -> MergedProfile:
        """Return ``profile`` or a copy of it without token properties."""

        if self.should_remove_token(profile, base):
            return profile.without_properties(*TOKEN_KEYS)
        return profile

    def apply_to_catalog(self, catalog: ProfileCatalog) -> ProfileCatalog:
        """Apply the rule to every bucket, moving default pointers along."""

        base = catalog.default_profile_by_type.get(BASE_PROFILE_TYPE)
        if base is None:
            return catalog
        profiles_by_type: dict[str, tuple[MergedProfile, ...]] = {}
        defaults = dict(catalog.default_profile_by_type)
        replaced: dict[int, MergedProfile] = {}
        for profile_type, bucket in catalog.profiles_by_type.items():
            adjusted: list[MergedProfile] = []
            for profile in bucket:
                updated = self.apply(profile, base)
                if updated is not profile:
                    replaced[id(profile)] = updated
                    current_default = defaults.get(profile_type)
                    if current_default is not None and current_default.name == profile.name:
                        defaults[profile_type] = updated
                adjusted.append(updated)
            profiles_by_type[profile_type] = tuple(adjusted)
        if not replaced:
            return catalog
        all_profiles = tuple(replaced.get(id(profile), profile) for profile in catalog.all_profiles)
        return catalog.replace(
            all_profiles=all_profiles,
            profiles_by_type=profiles_by_type,
            default_profile_by_type=defaults,
        )


def _has_address(profile: MergedProfile) -> bool:
    return bool(profile.host) and profile.port is not None


__all__ = ["TOKEN_KEYS", "TokenInheritancePolicy"]
