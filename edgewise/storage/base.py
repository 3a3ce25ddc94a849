"""Storage contract the relationship core talks to."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from edgewise.core.direction import Direction
from edgewise.storage.query import ConnectionQuery

QueryArgs = ConnectionQuery | dict[str, Any] | None


class EdgeRecord(BaseModel):
    """One stored edge, always in physical from-pair order."""

    id: int
    type: str
    rel_from: int
    rel_to: int


@runtime_checkable
class EdgeStorage(Protocol):
    """Persistence for edges and their metadata.

    The core never interprets failures raised here.
    """

    async def create(
        self, type_: str, from_: Any, to: Any, direction: Direction = Direction.FROM,
    ) -> int | None: ...

    async def delete(self, ids: Any) -> int: ...

    async def get(self, edge_id: int) -> EdgeRecord | None: ...

    async def first(self, type_: str, query: QueryArgs = None) -> EdgeRecord | None: ...

    async def find(self, type_: str, query: QueryArgs = None) -> list[EdgeRecord]: ...

    async def count(self, type_: str, query: QueryArgs = None) -> int: ...

    async def pluck(self, type_: str, query: QueryArgs, column: str) -> list[Any]: ...

    async def add_meta(
        self, edge_id: int, key: str, value: Any, unique: bool = False,
    ) -> int | None: ...

    async def get_meta(self, edge_id: int, key: str = "", single: bool = False) -> Any: ...

    async def update_meta(self, edge_id: int, key: str, value: Any) -> bool: ...

    async def delete_meta(
        self, edge_id: int, key: str, value: Any = None, delete_all: bool = False,
    ) -> bool: ...
