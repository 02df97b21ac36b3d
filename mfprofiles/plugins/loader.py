"""Discovery and registration of profile-type extensions."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from mfprofiles import __version__ as CORE_VERSION
from mfprofiles.schemas import ProfileTypeSchema

from .types import (
    ExtensionCompatibilityError,
    ExtensionContext,
    ExtensionError,
    ProfileTypeDescriptor,
)

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "mfprofiles.profile_types"

DescriptorSource = ProfileTypeDescriptor | type[ProfileTypeDescriptor]


def version_key(value: str) -> tuple[int, int, int]:
    """Major, minor and patch of a dotted version; non-numeric parts count as 0."""

    numbers = [int(part) if part.isdigit() else 0 for part in value.split(".")[:3]]
    numbers.extend([0] * (3 - len(numbers)))
    return numbers[0], numbers[1], numbers[2]


@dataclass(frozen=True, slots=True)
class ExtensionRecord:
    """An extension descriptor and where it came from (``module:attr``)."""

    descriptor: ProfileTypeDescriptor
    origin: str

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def version(self) -> str:
        return self.descriptor.version

    @property
    def min_core(self) -> str:
        return getattr(self.descriptor, "min_core", "0.0.0")


@dataclass(frozen=True, slots=True)
class LoadedExtension:
    """An extension whose profile types have been registered."""

    record: ExtensionRecord
    schemas: tuple[ProfileTypeSchema, ...]

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def descriptor(self) -> ProfileTypeDescriptor:
        return self.record.descriptor

    @property
    def profile_types(self) -> tuple[str, ...]:
        return tuple(schema.type for schema in self.schemas)


class ExtensionLoader:
    """Finds profile-type extensions and registers the types they contribute.

    Extensions come from the ``mfprofiles.profile_types`` entry-point group and
    from descriptors handed in directly; an entry point shadows a built-in of
    the same name. Loading an extension registers each schema with the
    context's type registry and each type name with the context's cache.
    """

    def __init__(
        self,
        ctx: ExtensionContext,
        *,
        core_version: str = CORE_VERSION,
        entry_point_group: str = ENTRY_POINT_GROUP,
        is_enabled: Callable[[str], bool] | None = None,
        builtin_extensions: Iterable[DescriptorSource] | None = None,
    ) -> None:
        self._ctx = ctx
        self._core_version = core_version
        self._group = entry_point_group
        self._is_enabled = is_enabled or (lambda name: True)
        self._builtins = tuple(builtin_extensions or ())
        self._discovered: dict[str, ExtensionRecord] = {}
        self._loaded: dict[str, LoadedExtension] = {}

    @property
    def discovered(self) -> Sequence[ExtensionRecord]:
        return tuple(self._discovered.values())

    @property
    def loaded(self) -> Sequence[LoadedExtension]:
        return tuple(self._loaded.values())

    def discover(self) -> Sequence[ExtensionRecord]:
        records: dict[str, ExtensionRecord] = {}
        for record in self._iter_records():
            records.setdefault(record.name, record)
        self._discovered = records
        return self.discovered

    def load(self) -> Sequence[LoadedExtension]:
        """Register every enabled, compatible extension not yet loaded."""

        if not self._discovered:
            self.discover()
        newly_loaded: list[LoadedExtension] = []
        for record in self._discovered.values():
            if record.name in self._loaded:
                continue
            if not self._is_enabled(record.name):
                LOG.debug("Skipping disabled extension", extra={"extension": record.name})
                continue
            try:
                self._check_core_version(record)
            except ExtensionCompatibilityError as exc:
                LOG.warning(str(exc), extra={"extension": record.name, "min_core": record.min_core})
                continue
            extension = LoadedExtension(record, self._register(record))
            self._loaded[record.name] = extension
            newly_loaded.append(extension)
        return newly_loaded

    async def shutdown(self) -> None:
        for extension in self._loaded.values():
            try:
                await extension.descriptor.on_shutdown()
            except Exception:
                LOG.exception("Extension shutdown failed", extra={"extension": extension.name})

    def _iter_records(self) -> Iterator[ExtensionRecord]:
        entry_points = metadata.entry_points().select(group=self._group)
        for entry_point in sorted(entry_points, key=lambda ep: ep.name):
            yield ExtensionRecord(_instantiate(entry_point.load()), entry_point.value)
        for builtin in self._builtins:
            descriptor = _instantiate(builtin)
            origin = f"{type(descriptor).__module__}:{type(descriptor).__qualname__}"
            yield ExtensionRecord(descriptor, origin)

    def _check_core_version(self, record: ExtensionRecord) -> None:
        if version_key(self._core_version) < version_key(record.min_core):
            raise ExtensionCompatibilityError(
                f"Extension '{record.name}' needs core>={record.min_core}, running {self._core_version}"
            )

    def _register(self, record: ExtensionRecord) -> tuple[ProfileTypeSchema, ...]:
        try:
            schemas = tuple(record.descriptor.register(self._ctx))
            for schema in schemas:
                if self._ctx.type_registry is not None:
                    self._ctx.type_registry.register(schema)
                if self._ctx.cache is not None:
                    self._ctx.cache.register_custom_profiles_type(schema.type)
        except Exception as exc:
            raise ExtensionError(f"Failed to register extension '{record.name}'") from exc
        LOG.debug(
            "Registered extension profile types",
            extra={"extension": record.name, "profile_types": [schema.type for schema in schemas]},
        )
        return schemas


def _instantiate(obj: DescriptorSource) -> ProfileTypeDescriptor:
    return obj() if inspect.isclass(obj) else obj


__all__ = [
    "ENTRY_POINT_GROUP",
    "ExtensionLoader",
    "ExtensionRecord",
    "LoadedExtension",
    "version_key",
]
