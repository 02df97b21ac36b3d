"""Profile-type extension exports."""

from .loader import ExtensionLoader, ExtensionRecord, LoadedExtension
from .registry import ProfileTypeRegistry
from .types import (
    ExtensionCompatibilityError,
    ExtensionContext,
    ExtensionError,
    ProfileTypeDescriptor,
)

__all__ = [
    "ExtensionCompatibilityError",
    "ExtensionContext",
    "ExtensionError",
    "ExtensionLoader",
    "ExtensionRecord",
    "LoadedExtension",
    "ProfileTypeDescriptor",
    "ProfileTypeRegistry",
]
