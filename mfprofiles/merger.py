"""Turns a profile's layered arguments into one flat property bag."""

from __future__ import annotations

import logging
from typing import Any

from .layers import UnknownProfileError
from .models import ProfileAttributes
from .sources import ConfigSource

LOG = logging.getLogger(__name__)


class ProfileMerger:
    """Merges arguments for a single profile, resolving secure values.

    Properties defined nowhere in the profile's chain are left out; nothing is
    defaulted. The merge has no side effects.
    """

    def merge_attributes(self, source: ConfigSource, attrs: ProfileAttributes) -> dict[str, Any]:
        """Return merged properties, or an empty dict for an unknown profile."""

        return self.resolve(source, attrs) or {}

    def resolve(self, source: ConfigSource, attrs: ProfileAttributes) -> dict[str, Any] | None:
        """Like :meth:`merge_attributes`, but ``None`` when the profile cannot be resolved."""

        try:
            merged = source.merge_args_for_profile(attrs)
        except UnknownProfileError as exc:
            LOG.debug(str(exc), extra={"profile_name": attrs.name, "profile_type": attrs.type})
            return None
        properties: dict[str, Any] = {}
        for arg in merged.known_args:
            properties[arg.arg_name] = source.load_secure_arg(arg) if arg.secure else arg.arg_value
        return properties


__all__ = ["ProfileMerger"]
