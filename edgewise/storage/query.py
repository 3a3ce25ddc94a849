"""Connection query building — logical filter → edge table predicate.

A query names a relationship type, candidate IDs for both ends and a
direction.  Physical rows are always stored in "from-pair order", so a
``to``-oriented query swaps the candidates before matching them against
``rel_from`` / ``rel_to``.  ``any`` fans out to both orientations, OR-ed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edgewise.core.direction import Direction
from edgewise.core.identity import parse_id_list

WILDCARDS = frozenset({"*", "any", "all"})
EDGE_COLUMNS = ("id", "type", "rel_from", "rel_to")

IdFilter = tuple[int, ...] | None  # None = wildcard


def normalize_ids(value: Any) -> IdFilter:
    """Turn a caller filter into a tuple of IDs, or None for "match all"."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in WILDCARDS:
        return None
    if isinstance(value, (list, tuple, set, frozenset)) and not value:
        return None
    if isinstance(value, str) and value.strip() in ("", "0"):
        return None
    if isinstance(value, (int, float)) and not value:
        return None
    return parse_id_list(value)


class ConnectionQuery(BaseModel):
    """Logical connection filter.

    ``from`` / ``to`` accept ``"*"``, a single ID, an item, or a collection.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_: IdFilter = Field(default=None, alias="from")
    to: IdFilter = None
    direction: Direction = Direction.FROM
    limit: int = -1
    column: str | tuple[str, ...] = "all"

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _ids(cls, value: Any) -> IdFilter:
        return normalize_ids(value)

    @field_validator("direction", mode="before")
    @classmethod
    def _direction(cls, value: Any) -> Direction:
        return Direction.parse(value)

    @field_validator("column", mode="before")
    @classmethod
    def _column(cls, value: Any) -> str | tuple[str, ...]:
        if isinstance(value, str):
            value = value.strip()
            if value in ("count", "all", "*"):
                return "all" if value == "*" else value
            value = [part.strip() for part in value.split(",") if part.strip()]
        columns = tuple(value)
        unknown = [c for c in columns if c not in EDGE_COLUMNS]
        if unknown or not columns:
            msg = f"Unknown column(s) {unknown or columns!r}; expected one of {EDGE_COLUMNS}"
            raise ValueError(msg)
        return columns

    @classmethod
    def from_args(
        cls, args: ConnectionQuery | dict[str, Any] | None = None, **overrides: Any,
    ) -> ConnectionQuery:
        """Build from a plain dict (``{"from": 1, "to": [2, 3]}``), applying overrides."""
        if isinstance(args, ConnectionQuery):
            data = args.model_dump(by_alias=True)
        else:
            data = dict(args or {})
        data.update(overrides)
        return cls.model_validate(data)


class RelClause(BaseModel, frozen=True):
    """Conjunction over the physical columns for one orientation."""

    rel_from: IdFilter = None
    rel_to: IdFilter = None

    @property
    def is_empty(self) -> bool:
        return self.rel_from is None and self.rel_to is None

    def matches(self, rel_from: int, rel_to: int) -> bool:
        if self.rel_from is not None and rel_from not in self.rel_from:
            return False
        return self.rel_to is None or rel_to in self.rel_to

    def to_sql(self) -> tuple[str, list[Any]]:
        conditions: list[str] = []
        params: list[Any] = []
        for column, ids in (("rel_from", self.rel_from), ("rel_to", self.rel_to)):
            if ids is None:
                continue
            if len(ids) == 1:
                conditions.append(f"{column} = ?")
            else:
                conditions.append(f"{column} IN ({', '.join('?' * len(ids))})")
            params.extend(ids)
        return " AND ".join(conditions), params


class ConnectionPredicate(BaseModel, frozen=True):
    """``type = ? AND (clause OR clause ...)`` plus projection and limit."""

    type: str
    clauses: tuple[RelClause, ...] = ()
    limit: int | None = None
    column: str | tuple[str, ...] = "all"

    def matches(self, row: dict[str, Any]) -> bool:
        if row.get("type") != self.type:
            return False
        if not self.clauses:
            return True
        return any(c.matches(row["rel_from"], row["rel_to"]) for c in self.clauses)

    def select_clause(self) -> str:
        if self.column == "count":
            return "COUNT(*) AS count"
        if self.column == "all":
            return "*"
        return ", ".join(self.column)

    def to_sql(self, table: str) -> tuple[str, list[Any]]:
        where = "WHERE type = ?"
        params: list[Any] = [self.type]

        rel_where: list[str] = []
        for clause in self.clauses:
            sql, clause_params = clause.to_sql()
            rel_where.append(f"({sql})")
            params.extend(clause_params)
        if rel_where:
            where += f" AND ({' OR '.join(rel_where)})"

        sql = f"SELECT {self.select_clause()} FROM {table} {where}"  # noqa: S608
        if self.column != "count":
            sql += " ORDER BY id"
        if self.limit:
            sql += " LIMIT ?"
            params.append(self.limit)
        return sql, params


def build_connection_predicate(
    type_: str, query: ConnectionQuery | dict[str, Any] | None = None,
) -> ConnectionPredicate:
    """Expand a logical query into its direction-resolved predicate."""
    query = ConnectionQuery.from_args(query)

    clauses: list[RelClause] = []
    for direction in query.direction.expand():
        pair: Sequence[IdFilter] = (query.from_, query.to)
        if direction is Direction.TO:
            pair = pair[::-1]
        clause = RelClause(rel_from=pair[0], rel_to=pair[1])
        if not clause.is_empty:
            clauses.append(clause)

    return ConnectionPredicate(
        type=type_,
        clauses=tuple(clauses),
        limit=query.limit if query.limit > 0 else None,
        column=query.column,
    )
