"""Relationship — two sides, a direction strategy and connection rules."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from edgewise.core.direction import Direction, DirectionStrategy, make_strategy
from edgewise.models.result import ErrorCode, InvalidCardinalityError, RelationResult

if TYPE_CHECKING:
    from edgewise.core.directed import Directed
    from edgewise.core.side import Side
    from edgewise.storage.base import EdgeRecord, EdgeStorage, QueryArgs


CARDINALITY_RE = re.compile(r"^(one|many)-to-(one|many)$", re.IGNORECASE)

ONE_TO_ONE = "one-to-one"
ONE_TO_MANY = "one-to-many"
MANY_TO_ONE = "many-to-one"
MANY_TO_MANY = "many-to-many"


class RelationshipOptions(BaseModel, frozen=True):
    cardinality: str = MANY_TO_MANY
    reciprocal: bool = False
    self_connections: bool = False
    duplicate_connections: bool = False


class Relationship:
    """A named, typed many-to-many relationship between two sides.

    Immutable once built.  ``connect``/``disconnect`` resolve the direction
    from the first item; the read helpers use the default ``from`` view.
    """

    def __init__(
        self,
        name: str,
        from_side: Side,
        to_side: Side,
        storage: EdgeStorage,
        options: RelationshipOptions | dict[str, Any] | None = None,
        strategy: DirectionStrategy | None = None,
    ) -> None:
        if isinstance(options, RelationshipOptions):
            self._options = options
        else:
            self._options = RelationshipOptions.model_validate(options or {})
        self._name = name
        self._from = from_side
        self._to = to_side
        self._storage = storage
        self._strategy = strategy or make_strategy(self._options.reciprocal)
        self._parse_cardinality(self._options.cardinality)

    def _parse_cardinality(self, cardinality: str) -> None:
        match = CARDINALITY_RE.fullmatch(cardinality or "")
        if not match:
            msg = f"Invalid cardinality {cardinality!r} for relationship {self._name!r}"
            raise InvalidCardinalityError(msg)
        from_card, to_card = match.group(1).lower(), match.group(2).lower()

        # One Side object may serve both ends (e.g. post-to-post).
        if self._from is self._to and from_card != to_card:
            msg = f"Cardinality {cardinality!r} of {self._name!r} needs two distinct sides"
            raise InvalidCardinalityError(msg)
        for side in (self._from, self._to):
            if side.has_cardinality():
                msg = f"Side {side.object_type!r} already belongs to another relationship"
                raise ValueError(msg)

        self._from.set_cardinality(from_card)
        if self._to is not self._from:
            self._to.set_cardinality(to_card)

    # -- Accessors -----------------------------------------------------------

    def get_name(self) -> str:
        return self._name

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> RelationshipOptions:
        return self._options

    @property
    def strategy(self) -> DirectionStrategy:
        return self._strategy

    def get_storage(self) -> EdgeStorage:
        return self._storage

    def get_side(self, which: Direction | str) -> Side:
        return self._to if Direction.parse(which) is Direction.TO else self._from

    def allow_self_connections(self) -> bool:
        return self._options.self_connections

    def allow_duplicate_connections(self) -> bool:
        return self._options.duplicate_connections

    def get_object_type(self, side: Direction | str) -> str:
        return self.get_side(side).get_object_type()

    def has_object_type(self, object_type: str) -> bool:
        return object_type in (self._from.get_object_type(), self._to.get_object_type())

    def get_describe(self) -> str:
        return f"{self._from.get_label()} {self._strategy.get_arrow()} {self._to.get_label()}"

    # -- Directions ----------------------------------------------------------

    def find_direction(self, item: Any) -> Direction | None:
        """Direction claimed by the first side that resolves ``item``."""
        for side in (Direction.FROM, Direction.TO):
            if self.get_side(side).parse_object_id(item):
                return self._strategy.choose_direction(side)
        return None

    def get_direction(self, direction: Direction | str = Direction.FROM) -> Directed:
        """A fresh view of this relationship in ``direction``."""
        directed_class = self._strategy.get_directed_class()
        return directed_class(self, Direction.parse(direction))

    def inverse(self) -> Directed:
        return self.get_direction(Direction.TO)

    # -- Connections ---------------------------------------------------------

    async def has(self, from_item: Any, to_item: Any) -> bool:
        return await self.get_direction().has(from_item, to_item)

    async def connect(
        self, from_item: Any, to_item: Any, metadata: dict[str, Any] | None = None,
    ) -> RelationResult:
        direction = self.find_direction(from_item)
        if direction is None:
            return RelationResult.fail(self._name, ErrorCode.CARDINALITY_OPPOSITE)
        return await self.get_direction(direction).connect(from_item, to_item, metadata)

    async def disconnect(self, from_item: Any, to_item: Any) -> RelationResult:
        direction = self.find_direction(from_item)
        if direction is None:
            return RelationResult.fail(self._name, ErrorCode.CARDINALITY_OPPOSITE)
        return await self.get_direction(direction).disconnect(from_item, to_item)

    async def find(self, query: QueryArgs = None) -> list[EdgeRecord]:
        return await self.get_direction().find(query)

    async def first(self, query: QueryArgs = None) -> EdgeRecord | None:
        return await self.get_direction().first(query)

    async def count(self, query: QueryArgs = None) -> int:
        return await self.get_direction().count(query)

    async def get_connected(self, item: Any) -> list[int]:
        return await self.get_direction().get_connected(item)

    # -- Metadata (pass-through) ---------------------------------------------

    async def add_meta(
        self, edge_id: int, key: str, value: Any, unique: bool = False,
    ) -> int | None:
        return await self._storage.add_meta(edge_id, key, value, unique)

    async def get_meta(self, edge_id: int, key: str = "", single: bool = False) -> Any:
        return await self._storage.get_meta(edge_id, key, single)

    async def update_meta(self, edge_id: int, key: str, value: Any) -> bool:
        return await self._storage.update_meta(edge_id, key, value)

    async def delete_meta(
        self, edge_id: int, key: str, value: Any = None, delete_all: bool = False,
    ) -> bool:
        return await self._storage.delete_meta(edge_id, key, value, delete_all)

    def __repr__(self) -> str:
        return f"Relationship({self._name!r}, {self.get_describe()})"
