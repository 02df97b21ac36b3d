"""Layered profile configuration: schema, precedence merge and argument lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .models import BASE_PROFILE_TYPE, KnownArg, LayerRef, MergedArgs, ProfileLocation


class ConfigSourceError(RuntimeError):
    """Raised when profile configuration cannot be read or resolved."""


class UnknownProfileError(ConfigSourceError):
    """Raised when a profile name does not resolve to a configured profile."""


class ProfileNode(BaseModel):
    """One entry of a layer's ``profiles`` table; may nest child profiles."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    secure: list[str] = Field(default_factory=list)
    profiles: dict[str, ProfileNode] = Field(default_factory=dict)


class ConfigLayerData(BaseModel):
    """Shape of a single layer file."""

    model_config = ConfigDict(extra="ignore")

    profiles: dict[str, ProfileNode] = Field(default_factory=dict)
    defaults: dict[str, str] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ConfigLayer:
    """A parsed layer plus the secure values the vault holds for it."""

    ref: LayerRef
    data: ConfigLayerData
    secure_values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ResolvedProperty:
    value: Any
    secure: bool
    location: ProfileLocation


@dataclass(slots=True)
class ResolvedNode:
    """A profile node after merging every layer that mentions it."""

    path: str
    location: ProfileLocation
    type: str | None = None
    properties: dict[str, ResolvedProperty] = field(default_factory=dict)
    children: dict[str, ResolvedNode] = field(default_factory=dict)


class LayerStack:
    """Merged view over layers ordered from highest to lowest precedence.

    For each property the first layer that defines it wins, and the layer and
    JSON path it came from are kept so secure values can be looked up later.
    In secured mode a secure property is defined only when the vault holds a
    value for it; otherwise secure values are read from ``properties``.
    """

    def __init__(self, layers: Sequence[ConfigLayer], *, secured: bool) -> None:
        self._layers = tuple(layers)
        self._secured = secured
        self._tree: dict[str, ResolvedNode] = {}
        self._defaults: dict[str, str] = {}
        self._secure_index: dict[tuple[str, str], Any] = {}
        for layer in self._layers:
            for name, node in layer.data.profiles.items():
                self._merge_node(self._tree, name, node, layer, parent_path="", parent_json="profiles")
            for profile_type, profile_name in layer.data.defaults.items():
                self._defaults.setdefault(profile_type, profile_name)

    @property
    def layers(self) -> tuple[ConfigLayer, ...]:
        return self._layers

    @property
    def defaults(self) -> Mapping[str, str]:
        return dict(self._defaults)

    def find(self, path: str) -> ResolvedNode | None:
        """Return the node at dotted ``path``, if any."""

        if not path:
            return None
        nodes = self._tree
        node: ResolvedNode | None = None
        for segment in path.split("."):
            node = nodes.get(segment)
            if node is None:
                return None
            nodes = node.children
        return node

    def iter_profiles(self) -> Iterator[ResolvedNode]:
        """Yield every typed node in merged-tree order."""

        stack = list(reversed(self._tree.values()))
        while stack:
            node = stack.pop()
            if node.type:
                yield node
            stack.extend(reversed(node.children.values()))

    def default_name(self, profile_type: str) -> str | None:
        return self._defaults.get(profile_type)

    def secure_value(self, location: ProfileLocation) -> Any:
        if location.layer is None:
            return None
        return self._secure_index.get((location.layer.path, location.json_loc))

    def merge_args(self, path: str, *, include_secure: bool = False) -> MergedArgs:
        """Merge arguments for the profile at ``path``, most specific first.

        Order: the profile itself, each ancestor group nearest first, then the
        default base profile unless the profile is itself a base profile.
        """

        node = self.find(path)
        if node is None or not node.type:
            raise UnknownProfileError(f"Profile '{path}' does not exist in the loaded configuration.")
        chain = [node]
        segments = path.split(".")
        for depth in range(len(segments) - 1, 0, -1):
            ancestor = self.find(".".join(segments[:depth]))
            if ancestor is not None:
                chain.append(ancestor)
        if node.type != BASE_PROFILE_TYPE:
            base_name = self._defaults.get(BASE_PROFILE_TYPE)
            base = self.find(base_name) if base_name else None
            if base is not None and base.type == BASE_PROFILE_TYPE and all(base is not n for n in chain):
                chain.append(base)

        args: dict[str, KnownArg] = {}
        for current in chain:
            for name, prop in current.properties.items():
                if name in args:
                    continue
                value = prop.value if include_secure or not prop.secure else None
                args[name] = KnownArg(arg_name=name, arg_value=value, secure=prop.secure, location=prop.location)
        return MergedArgs(known_args=tuple(args.values()))

    def _merge_node(
        self,
        target: dict[str, ResolvedNode],
        key: str,
        node: ProfileNode,
        layer: ConfigLayer,
        *,
        parent_path: str,
        parent_json: str,
    ) -> None:
        path = f"{parent_path}.{key}" if parent_path else key
        json_loc = f"{parent_json}.{key}"
        resolved = target.get(key)
        if resolved is None:
            resolved = ResolvedNode(path=path, location=ProfileLocation(layer.ref, json_loc))
            target[key] = resolved
        if resolved.type is None and node.type:
            resolved.type = node.type

        secure_names = set(node.secure)
        for name in (*node.properties, *(n for n in node.secure if n not in node.properties)):
            prop_json = f"{json_loc}.properties.{name}"
            secure = name in secure_names
            if secure and self._secured:
                if prop_json not in layer.secure_values:
                    continue
                value = layer.secure_values[prop_json]
            elif name in node.properties:
                value = node.properties[name]
            else:
                continue
            if secure:
                self._secure_index[(layer.ref.path, prop_json)] = value
            if name not in resolved.properties:
                resolved.properties[name] = ResolvedProperty(
                    value=value,
                    secure=secure,
                    location=ProfileLocation(layer.ref, prop_json),
                )

        for child_key, child in node.profiles.items():
            self._merge_node(
                resolved.children,
                child_key,
                child,
                layer,
                parent_path=path,
                parent_json=f"{json_loc}.profiles",
            )


def secure_paths(data: ConfigLayerData) -> list[str]:
    """List JSON paths of every secure property declared in a layer."""

    paths: list[str] = []

    def _walk(nodes: Mapping[str, ProfileNode], prefix: str) -> None:
        for key, node in nodes.items():
            json_loc = f"{prefix}.{key}"
            paths.extend(f"{json_loc}.properties.{name}" for name in node.secure)
            _walk(node.profiles, f"{json_loc}.profiles")

    _walk(data.profiles, "profiles")
    return paths


__all__ = [
    "ConfigLayer",
    "ConfigLayerData",
    "ConfigSourceError",
    "LayerStack",
    "ProfileNode",
    "ResolvedNode",
    "ResolvedProperty",
    "UnknownProfileError",
    "secure_paths",
]
