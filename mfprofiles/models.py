"""Shared dataclasses used across the source, merge and cache modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping

BASE_PROFILE_TYPE = "base"
DEFAULT_PROFILE_TYPE = "zosmf"
TOKEN_TYPE_APIML = "apimlAuthenticationToken"
# Short tag some configs use for the same gateway token.
APIML_TOKEN_TYPES = frozenset({TOKEN_TYPE_APIML, "apiml"})
DEFAULT_PORT = 443
BUILTIN_PROFILE_TYPES: tuple[str, ...] = ("ssh",)


@dataclass(frozen=True, slots=True)
class LayerRef:
    """Identifies a configuration layer on disk (or in memory)."""

    path: str
    user: bool = False
    global_: bool = False

    @property
    def label(self) -> str:
        scope = "global" if self.global_ else "project"
        return f"{scope}-user" if self.user else scope


@dataclass(frozen=True, slots=True)
class ProfileLocation:
    """Where a profile or argument was found."""

    layer: LayerRef | None
    json_loc: str


@dataclass(frozen=True, slots=True)
class ProfileAttributes:
    """Attribute record produced by a config source for a single profile."""

    name: str
    type: str
    location: ProfileLocation
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class KnownArg:
    """A single merged argument together with its origin."""

    arg_name: str
    arg_value: Any
    secure: bool
    location: ProfileLocation


@dataclass(frozen=True, slots=True)
class MergedArgs:
    """Result of merging one profile's arguments across layers."""

    known_args: tuple[KnownArg, ...] = ()


@dataclass(frozen=True, slots=True)
class MergedProfile:
    """Read-only snapshot of a profile with its merged property bag.

    A key is known only when it is present; nothing is defaulted.
    """

    name: str
    type: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def known_keys(self) -> frozenset[str]:
        return frozenset(self.properties)

    def is_known(self, key: str) -> bool:
        return key in self.properties

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    @property
    def host(self) -> str | None:
        return self.properties.get("host")

    @property
    def port(self) -> int | None:
        return self.properties.get("port")

    @property
    def user(self) -> str | None:
        return self.properties.get("user")

    @property
    def password(self) -> str | None:
        return self.properties.get("password")

    @property
    def token_type(self) -> str | None:
        return self.properties.get("tokenType")

    @property
    def token_value(self) -> str | None:
        return self.properties.get("tokenValue")

    @property
    def reject_unauthorized(self) -> bool | None:
        return self.properties.get("rejectUnauthorized")

    @property
    def protocol(self) -> str | None:
        return self.properties.get("protocol")

    @property
    def base_path(self) -> str | None:
        return self.properties.get("basePath")

    def with_properties(self, **updates: Any) -> MergedProfile:
        """Return a copy with the given properties set."""

        properties = dict(self.properties)
        properties.update(updates)
        return MergedProfile(name=self.name, type=self.type, properties=properties)

    def without_properties(self, *keys: str) -> MergedProfile:
        """Return a copy with the given properties removed."""

        properties = {key: value for key, value in self.properties.items() if key not in keys}
        return MergedProfile(name=self.name, type=self.type, properties=properties)


@dataclass(frozen=True, slots=True)
class UrlValidation:
    """Outcome of parsing a host URL entered by the user."""

    valid: bool
    protocol: str | None
    host: str | None
    port: int | None


class ValidationStatus(IntEnum):
    """Last known result of validating a profile against its host."""

    UNVERIFIED = 1
    VALID = 0
    INVALID = -1


__all__ = [
    "APIML_TOKEN_TYPES",
    "BASE_PROFILE_TYPE",
    "BUILTIN_PROFILE_TYPES",
    "DEFAULT_PORT",
    "DEFAULT_PROFILE_TYPE",
    "KnownArg",
    "LayerRef",
    "MergedArgs",
    "MergedProfile",
    "ProfileAttributes",
    "ProfileLocation",
    "TOKEN_TYPE_APIML",
    "UrlValidation",
    "ValidationStatus",
]
