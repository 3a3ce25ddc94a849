"""Directed views — a relationship resolved to one direction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from edgewise.core.direction import Direction
from edgewise.core.identity import parse_object_id
from edgewise.models.result import ErrorCode, RelationResult
from edgewise.storage.query import ConnectionQuery

if TYPE_CHECKING:
    from edgewise.core.relationship import Relationship
    from edgewise.core.side import Side
    from edgewise.storage.base import EdgeRecord, EdgeStorage, QueryArgs

logger = logging.getLogger(__name__)

# (role, direction) -> side name
DIRECTION_MAPS: dict[str, dict[Direction, Direction]] = {
    "current": {
        Direction.TO: Direction.TO,
        Direction.FROM: Direction.FROM,
        Direction.ANY: Direction.FROM,
    },
    "opposite": {
        Direction.TO: Direction.FROM,
        Direction.FROM: Direction.TO,
        Direction.ANY: Direction.TO,
    },
}


class Directed:
    """A relationship bound to ``from``, ``to`` or ``any``.

    Views are cheap and stateless; build a new one whenever needed.
    Writes use the view's direction to orient the stored pair, reads use
    ``query_direction``.
    """

    def __init__(self, relationship: Relationship, direction: Direction | str) -> None:
        self._relationship = relationship
        self._direction = Direction.parse(direction)

    @property
    def relationship(self) -> Relationship:
        return self._relationship

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def query_direction(self) -> Direction:
        return self._direction

    @property
    def storage(self) -> EdgeStorage:
        return self._relationship.get_storage()

    def flip(self) -> Directed:
        return type(self)(self._relationship, self._direction.flip())

    def get_current(self) -> Side:
        return self._relationship.get_side(DIRECTION_MAPS["current"][self._direction])

    def get_opposite(self) -> Side:
        return self._relationship.get_side(DIRECTION_MAPS["opposite"][self._direction])

    # -- Reads ---------------------------------------------------------------

    def _scoped(self, query: QueryArgs, **overrides: Any) -> ConnectionQuery:
        """Default the query direction to this view's."""
        if isinstance(query, ConnectionQuery):
            if "direction" not in query.model_fields_set:
                overrides.setdefault("direction", self.query_direction)
            return ConnectionQuery.from_args(query, **overrides)
        data = dict(query or {})
        data.setdefault("direction", self.query_direction)
        return ConnectionQuery.from_args(data, **overrides)

    async def find(self, query: QueryArgs = None) -> list[EdgeRecord]:
        return await self.storage.find(self._relationship.get_name(), self._scoped(query))

    async def first(self, query: QueryArgs = None) -> EdgeRecord | None:
        return await self.storage.first(self._relationship.get_name(), self._scoped(query))

    async def count(self, query: QueryArgs = None) -> int:
        return await self.storage.count(self._relationship.get_name(), self._scoped(query))

    async def has(self, from_: Any, to: Any) -> bool:
        """True if any edge joins the two items.

        An item that does not resolve is left out of the filter; when
        neither resolves the answer is False.
        """
        from_id, to_id = parse_object_id(from_), parse_object_id(to)
        if not from_id and not to_id:
            return False

        count = await self.count({
            "from": from_id or "*",
            "to": to_id or "*",
            "limit": 1,
        })
        return count > 0

    async def get_connected(self, item: Any) -> list[int]:
        """IDs on the far end of every edge touching ``item`` in this view."""
        item_id = parse_object_id(item)
        if not item_id:
            return []
        edges = await self.find({"from": item_id})
        return [e.rel_to if e.rel_from == item_id else e.rel_from for e in edges]

    # -- Writes --------------------------------------------------------------

    async def connect(
        self, from_: Any, to: Any, metadata: dict[str, Any] | None = None,
    ) -> RelationResult:
        """Create an edge between two items."""
        relationship = self._relationship
        name = relationship.get_name()

        from_id = self.get_current().parse_object_id(from_)
        if not from_id:
            return RelationResult.fail(name, ErrorCode.FIRST_PARAMETER)

        to_id = self.get_opposite().parse_object_id(to)
        if not to_id:
            return RelationResult.fail(name, ErrorCode.SECOND_PARAMETER)

        if from_id == to_id and not relationship.allow_self_connections():
            return RelationResult.fail(name, ErrorCode.SELF_CONNECTION)

        try:
            if not relationship.allow_duplicate_connections() and await self.has(from_id, to_id):
                return RelationResult.fail(name, ErrorCode.DUPLICATE_CONNECTION)

            # Cardinality is descriptive only; one-side limits are not enforced.
            edge_id = await self.storage.create(name, from_id, to_id, self._direction)
        except aiosqlite.Error as e:
            logger.warning("Connect %s %d -> %d failed: %s", name, from_id, to_id, e)
            return RelationResult.fail(name, ErrorCode.STORAGE, str(e))

        if not edge_id:
            return RelationResult.fail(name, ErrorCode.STORAGE, "Edge was not created.")

        try:
            for key, value in (metadata or {}).items():
                await self.storage.add_meta(edge_id, key, value)
        except aiosqlite.Error as e:
            logger.warning("Metadata for %s edge %d failed, removing edge: %s", name, edge_id, e)
            await self._discard(edge_id)
            return RelationResult.fail(name, ErrorCode.STORAGE, str(e))

        logger.debug("Connected %s %d -> %d (%s) as edge %d",
                     name, from_id, to_id, self._direction, edge_id)
        return RelationResult.success(name, edge_id=edge_id)

    async def _discard(self, edge_id: int) -> None:
        try:
            await self.storage.delete(edge_id)
        except aiosqlite.Error as e:
            logger.warning("Could not remove edge %d: %s", edge_id, e)

    async def disconnect(self, from_: Any, to: Any) -> RelationResult:
        """Delete the first edge between two items."""
        name = self._relationship.get_name()

        from_id = self.get_current().parse_object_id(from_)
        if not from_id:
            return RelationResult.fail(name, ErrorCode.FIRST_PARAMETER)

        to_id = self.get_opposite().parse_object_id(to)
        if not to_id:
            return RelationResult.fail(name, ErrorCode.SECOND_PARAMETER)

        try:
            edge = await self.first({"from": from_id, "to": to_id})
            if edge is None:
                return RelationResult.fail(name, ErrorCode.NOT_FOUND)
            deleted = await self.storage.delete(edge.id)
        except aiosqlite.Error as e:
            logger.warning("Disconnect %s %d -> %d failed: %s", name, from_id, to_id, e)
            return RelationResult.fail(name, ErrorCode.STORAGE, str(e))

        logger.debug("Disconnected %s %d -> %d (edge %d)", name, from_id, to_id, edge.id)
        return RelationResult.success(name, edge_id=edge.id, deleted=deleted)

    async def disconnect_all(self, item: Any) -> int:
        """Delete every edge touching ``item`` in this view. Returns the count."""
        item_id = parse_object_id(item)
        if not item_id:
            return 0
        edges = await self.find({"from": item_id})
        if not edges:
            return 0
        return await self.storage.delete([e.id for e in edges])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Directed):
            return (
                type(self) is type(other)
                and self._relationship is other._relationship
                and self._direction is other._direction
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self), id(self._relationship), self._direction))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._relationship.get_name()!r}, {self._direction.value})"


class ReciprocalDirected(Directed):
    """View over a symmetric relationship: reads match both orientations."""

    @property
    def query_direction(self) -> Direction:
        return Direction.ANY
