"""Side — one endpoint role of a relationship."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from edgewise.core.identity import IdentityResolver, parse_object_id


class Cardinality(StrEnum):
    ONE = "one"
    MANY = "many"


class Side:
    """An object type bound to one end of a relationship.

    Items that announce their own ``object_type`` (attribute or mapping key)
    are only accepted when it matches this side; bare IDs are accepted by
    any side.
    """

    def __init__(
        self,
        object_type: str,
        label: str = "",
        resolver: IdentityResolver | None = None,
    ) -> None:
        self._object_type = object_type
        self._label = label or object_type
        self._resolver: IdentityResolver = resolver or parse_object_id
        self._cardinality: Cardinality | None = None

    @property
    def object_type(self) -> str:
        return self._object_type

    @property
    def label(self) -> str:
        return self._label

    @property
    def cardinality(self) -> Cardinality:
        return self._cardinality or Cardinality.MANY

    def get_object_type(self) -> str:
        return self._object_type

    def get_label(self) -> str:
        return self._label

    def get_cardinality(self) -> Cardinality:
        return self.cardinality

    def has_cardinality(self) -> bool:
        return self._cardinality is not None

    def set_cardinality(self, cardinality: str | Cardinality) -> None:
        """Set once by the owning relationship; later calls are rejected."""
        if self._cardinality is not None:
            msg = f"Cardinality of side {self._object_type!r} is already set"
            raise ValueError(msg)
        self._cardinality = Cardinality(str(cardinality).lower())

    def accepts(self, item: Any) -> bool:
        declared = _declared_type(item)
        return declared is None or declared == self._object_type

    def parse_object_id(self, item: Any) -> int:
        if not self.accepts(item):
            return 0
        return self._resolver(item)

    def __repr__(self) -> str:
        return f"Side({self._object_type!r}, cardinality={self.cardinality.value})"


def _declared_type(item: Any) -> str | None:
    if isinstance(item, Mapping):
        value = item.get("object_type")
    else:
        value = getattr(item, "object_type", None)
    return value if isinstance(value, str) else None
