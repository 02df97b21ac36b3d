"""Registry of profile-type schemas contributed by the core and extensions."""

from __future__ import annotations

from typing import Iterable

from mfprofiles.schemas import ProfileTypeSchema


class ProfileTypeRegistry:
    """Collects profile-type schemas keyed by type name."""

    def __init__(self, schemas: Iterable[ProfileTypeSchema] = ()) -> None:
        self._schemas: dict[str, ProfileTypeSchema] = {}
        self.register_many(schemas)

    def register(self, schema: ProfileTypeSchema) -> None:
        """Register (or replace) the schema for ``schema.type``."""

        if not schema.type:
            raise ValueError("Profile type schema is missing a type name")
        self._schemas[schema.type] = schema

    def register_many(self, schemas: Iterable[ProfileTypeSchema]) -> None:
        for schema in schemas:
            self.register(schema)

    def list_types(self) -> list[str]:
        """Return registered type names in registration order."""

        return list(self._schemas)

    def get_schema(self, profile_type: str) -> ProfileTypeSchema | None:
        return self._schemas.get(profile_type)

    def __contains__(self, profile_type: object) -> bool:
        return profile_type in self._schemas
