"""EdgeRepository — SQLite implementation of EdgeStorage."""

from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime
from typing import Any

import aiosqlite

from edgewise.core.direction import Direction
from edgewise.core.identity import parse_id_list, parse_object_id
from edgewise.storage.base import EdgeRecord, QueryArgs
from edgewise.storage.query import (
    ConnectionPredicate,
    ConnectionQuery,
    build_connection_predicate,
)

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "edgewise_"

SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    type TEXT NOT NULL DEFAULT '',
    rel_from INTEGER NOT NULL,
    rel_to INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_{table}_type ON {table}(type);
CREATE INDEX IF NOT EXISTS idx_{table}_rel_from ON {table}(rel_from);
CREATE INDEX IF NOT EXISTS idx_{table}_rel_to ON {table}(rel_to);

CREATE TABLE IF NOT EXISTS {meta_table} (
    meta_id INTEGER PRIMARY KEY AUTOINCREMENT,
    {edge_column} INTEGER NOT NULL,
    meta_key TEXT DEFAULT NULL,
    meta_value TEXT
);
CREATE INDEX IF NOT EXISTS idx_{meta_table}_edge ON {meta_table}({edge_column});
CREATE INDEX IF NOT EXISTS idx_{meta_table}_key ON {meta_table}(meta_key);
"""

_PREFIX_RE = re.compile(r"^[A-Za-z0-9_]*$")


class _SafeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime and other non-serializable types."""

    def default(self, o: object) -> object:
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        return super().default(o)


def _encode(value: Any) -> str:
    return json.dumps(value, cls=_SafeEncoder)


def _decode(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


class EdgeRepository:
    """Async edge + metadata store over one aiosqlite connection."""

    def __init__(self, db: aiosqlite.Connection, prefix: str = DEFAULT_PREFIX) -> None:
        if not _PREFIX_RE.match(prefix):
            msg = f"Invalid table prefix {prefix!r}"
            raise ValueError(msg)
        self.db = db
        self.prefix = prefix

    # === Naming ===

    def get_prefix(self) -> str:
        return self.prefix

    def get_meta_type(self) -> str:
        return f"{self.prefix}relationship"

    def get_table_name(self) -> str:
        return f"{self.prefix}relationships"

    def get_meta_table_name(self) -> str:
        return f"{self.prefix}relationshipmeta"

    @property
    def _edge_column(self) -> str:
        return f"{self.get_meta_type()}_id"

    async def init_schema(self) -> None:
        """Create the edge and metadata tables if they don't exist."""
        await self.db.executescript(
            SCHEMA.format(
                table=self.get_table_name(),
                meta_table=self.get_meta_table_name(),
                edge_column=self._edge_column,
            )
        )
        await self.db.commit()

    # === Edges ===

    async def create(
        self, type_: str, from_: Any, to: Any, direction: Direction = Direction.FROM,
    ) -> int | None:
        """Insert an edge; a ``to`` direction stores the pair swapped."""
        pair = [parse_object_id(from_), parse_object_id(to)]
        if not all(pair):
            return None
        if Direction.parse(direction) is Direction.TO:
            pair.reverse()

        cursor = await self.db.execute(
            f"INSERT INTO {self.get_table_name()} (type, rel_from, rel_to) VALUES (?, ?, ?)",  # noqa: S608
            (type_, pair[0], pair[1]),
        )
        await self.db.commit()
        logger.debug("Created %s edge %d: %d -> %d", type_, cursor.lastrowid, *pair)
        return cursor.lastrowid

    async def delete(self, ids: Any) -> int:
        """Delete edges by ID (scalar, list, or "1,2,3"); metadata goes with them."""
        edge_ids = [i for i in parse_id_list(ids) if i > 0]
        if not edge_ids:
            return 0

        placeholders = ", ".join("?" * len(edge_ids))
        cursor = await self.db.execute(
            f"DELETE FROM {self.get_table_name()} WHERE id IN ({placeholders})",  # noqa: S608
            edge_ids,
        )
        deleted = cursor.rowcount
        await self.db.execute(
            f"DELETE FROM {self.get_meta_table_name()} "  # noqa: S608
            f"WHERE {self._edge_column} IN ({placeholders})",
            edge_ids,
        )
        await self.db.commit()
        logger.debug("Deleted %d edge(s) of %s", deleted, edge_ids)
        return deleted

    async def get(self, edge_id: int) -> EdgeRecord | None:
        cursor = await self.db.execute(
            f"SELECT * FROM {self.get_table_name()} WHERE id = ? LIMIT 1",  # noqa: S608
            (edge_id,),
        )
        row = await cursor.fetchone()
        return EdgeRecord.model_validate(dict(row)) if row else None

    async def first(self, type_: str, query: QueryArgs = None) -> EdgeRecord | None:
        predicate = _predicate(type_, query, limit=1, column="all")
        rows = await self._fetch(predicate)
        return EdgeRecord.model_validate(rows[0]) if rows else None

    async def find(self, type_: str, query: QueryArgs = None) -> list[EdgeRecord]:
        predicate = _predicate(type_, query, column="all")
        return [EdgeRecord.model_validate(row) for row in await self._fetch(predicate)]

    async def count(self, type_: str, query: QueryArgs = None) -> int:
        predicate = _predicate(type_, query, column="count", limit=-1)
        rows = await self._fetch(predicate)
        return int(rows[0]["count"]) if rows else 0

    async def pluck(self, type_: str, query: QueryArgs, column: str) -> list[Any]:
        """Values of a single column for every matching edge."""
        predicate = _predicate(type_, query, column=column)
        return [row[column] for row in await self._fetch(predicate)]

    async def _fetch(self, predicate: ConnectionPredicate) -> list[dict[str, Any]]:
        sql, params = predicate.to_sql(self.get_table_name())
        cursor = await self.db.execute(sql, params)
        return [dict(row) for row in await cursor.fetchall()]

    # === Metadata ===

    async def add_meta(
        self, edge_id: int, key: str, value: Any, unique: bool = False,
    ) -> int | None:
        """Attach a value to an edge. With ``unique`` an existing key blocks the add."""
        if unique and await self._meta_exists(edge_id, key):
            return None
        cursor = await self.db.execute(
            f"INSERT INTO {self.get_meta_table_name()} "  # noqa: S608
            f"({self._edge_column}, meta_key, meta_value) VALUES (?, ?, ?)",
            (edge_id, key, _encode(value)),
        )
        await self.db.commit()
        return cursor.lastrowid

    async def get_meta(self, edge_id: int, key: str = "", single: bool = False) -> Any:
        """All metadata as ``{key: [values]}`` when no key is given."""
        table = self.get_meta_table_name()
        if not key:
            cursor = await self.db.execute(
                f"SELECT meta_key, meta_value FROM {table} "  # noqa: S608
                f"WHERE {self._edge_column} = ? ORDER BY meta_id",
                (edge_id,),
            )
            grouped: dict[str, list[Any]] = {}
            for row in await cursor.fetchall():
                grouped.setdefault(row["meta_key"], []).append(_decode(row["meta_value"]))
            return grouped

        cursor = await self.db.execute(
            f"SELECT meta_value FROM {table} "  # noqa: S608
            f"WHERE {self._edge_column} = ? AND meta_key = ? ORDER BY meta_id",
            (edge_id, key),
        )
        values = [_decode(row["meta_value"]) for row in await cursor.fetchall()]
        if single:
            return values[0] if values else None
        return values

    async def update_meta(self, edge_id: int, key: str, value: Any) -> bool:
        """Overwrite every value under ``key``; adds the key when absent."""
        if not await self._meta_exists(edge_id, key):
            return await self.add_meta(edge_id, key, value) is not None
        cursor = await self.db.execute(
            f"UPDATE {self.get_meta_table_name()} SET meta_value = ? "  # noqa: S608
            f"WHERE {self._edge_column} = ? AND meta_key = ?",
            (_encode(value), edge_id, key),
        )
        await self.db.commit()
        return cursor.rowcount > 0

    async def delete_meta(
        self, edge_id: int, key: str, value: Any = None, delete_all: bool = False,
    ) -> bool:
        """Remove ``key`` from an edge, or from every edge with ``delete_all``."""
        conditions = ["meta_key = ?"]
        params: list[Any] = [key]
        if not delete_all:
            conditions.append(f"{self._edge_column} = ?")
            params.append(edge_id)
        if value is not None:
            conditions.append("meta_value = ?")
            params.append(_encode(value))

        cursor = await self.db.execute(
            f"DELETE FROM {self.get_meta_table_name()} "  # noqa: S608
            f"WHERE {' AND '.join(conditions)}",
            params,
        )
        await self.db.commit()
        return cursor.rowcount > 0

    async def _meta_exists(self, edge_id: int, key: str) -> bool:
        cursor = await self.db.execute(
            f"SELECT 1 FROM {self.get_meta_table_name()} "  # noqa: S608
            f"WHERE {self._edge_column} = ? AND meta_key = ? LIMIT 1",
            (edge_id, key),
        )
        return await cursor.fetchone() is not None


def _predicate(type_: str, query: QueryArgs, **overrides: Any) -> ConnectionPredicate:
    return build_connection_predicate(type_, ConnectionQuery.from_args(query, **overrides))
