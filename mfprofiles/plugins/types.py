"""Extension contract primitives shared between the loader and extensions."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Protocol, Sequence

from mfprofiles.config import AppConfig
from mfprofiles.schemas import ProfileTypeSchema

if TYPE_CHECKING:
    from mfprofiles.cache import ProfileCache

    from .registry import ProfileTypeRegistry


class ExtensionContext(NamedTuple):
    """Runtime dependencies exposed to profile-type extensions."""

    cache: ProfileCache | None = None
    type_registry: ProfileTypeRegistry | None = None
    config: AppConfig | None = None


class ProfileTypeDescriptor(Protocol):
    """Contract implemented by third-party profile-type extensions."""

    name: str
    version: str
    min_core: str

    def register(self, ctx: ExtensionContext) -> Sequence[ProfileTypeSchema]: ...

    async def on_shutdown(self) -> None: ...


class ExtensionError(RuntimeError):
    """Base error for extension loader failures."""


class ExtensionCompatibilityError(ExtensionError):
    """Raised when an extension does not satisfy the minimum core version."""


__all__ = [
    "ExtensionCompatibilityError",
    "ExtensionContext",
    "ExtensionError",
    "ProfileTypeDescriptor",
]
