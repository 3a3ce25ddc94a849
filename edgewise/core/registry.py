"""Relationship registry — name → Relationship, built at bootstrap."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from edgewise.core.relationship import Relationship, RelationshipOptions
from edgewise.core.side import Side

if TYPE_CHECKING:
    from edgewise.config import Settings
    from edgewise.storage.base import EdgeStorage

logger = logging.getLogger(__name__)


class RelationshipRegistry:
    """Owns every relationship of an application, all sharing one storage."""

    def __init__(
        self,
        storage: EdgeStorage,
        defaults: RelationshipOptions | dict[str, Any] | None = None,
    ) -> None:
        self.storage = storage
        if isinstance(defaults, RelationshipOptions):
            self.defaults = defaults
        else:
            self.defaults = RelationshipOptions.model_validate(defaults or {})
        self._relationships: dict[str, Relationship] = {}

    def register(
        self,
        name: str,
        from_side: Side | str,
        to_side: Side | str,
        **options: Any,
    ) -> Relationship:
        """Build and store a relationship. Names are unique."""
        if name in self._relationships:
            msg = f"Relationship {name!r} is already registered"
            raise ValueError(msg)

        relationship = Relationship(
            name,
            from_side if isinstance(from_side, Side) else Side(from_side),
            to_side if isinstance(to_side, Side) else Side(to_side),
            self.storage,
            RelationshipOptions.model_validate({**self.defaults.model_dump(), **options}),
        )
        self._relationships[name] = relationship
        logger.debug("Registered relationship %s: %s", name, relationship.get_describe())
        return relationship

    def get(self, name: str) -> Relationship | None:
        return self._relationships.get(name)

    def all(self) -> list[Relationship]:
        return list(self._relationships.values())

    @property
    def names(self) -> list[str]:
        return list(self._relationships.keys())

    def by_object_type(self, object_type: str) -> list[Relationship]:
        return [r for r in self._relationships.values() if r.has_object_type(object_type)]

    def __contains__(self, name: object) -> bool:
        return name in self._relationships

    def __len__(self) -> int:
        return len(self._relationships)

    @classmethod
    def from_settings(cls, settings: Settings, storage: EdgeStorage) -> RelationshipRegistry:
        """Registry pre-populated with the relationships declared in config."""
        registry = cls(storage, settings.defaults.to_options())
        for entry in settings.relationships:
            registry.register(
                entry.name,
                Side(entry.from_type, entry.from_label),
                Side(entry.to_type, entry.to_label),
                **entry.options,
            )
        return registry
