"""Tests for connection query building."""

from __future__ import annotations

import itertools

import pytest

from edgewise.core.direction import Direction
from edgewise.storage.query import (
    ConnectionPredicate,
    ConnectionQuery,
    RelClause,
    build_connection_predicate,
    normalize_ids,
)


def _rows(ids=range(1, 7)):
    return [
        {"type": "demo", "rel_from": a, "rel_to": b}
        for a, b in itertools.product(ids, repeat=2)
    ]


class TestNormalizeIds:
    @pytest.mark.parametrize("value", [None, "*", "any", "", [], ()])
    def test_wildcards(self, value):
        assert normalize_ids(value) is None

    @pytest.mark.parametrize("value", [0, "0", 0.0, False])
    def test_empty_scalars_are_wildcards(self, value):
        assert normalize_ids(value) is None

    def test_zero_inside_a_list_is_kept(self):
        assert normalize_ids([0]) == (0,)

    def test_scalar_and_singleton_equal(self):
        assert normalize_ids(1) == normalize_ids([1]) == normalize_ids("1") == (1,)

    def test_collection(self):
        assert normalize_ids({3}) == (3,)
        assert normalize_ids([1, 2, 2]) == (1, 2)


class TestConnectionQuery:
    def test_defaults(self):
        q = ConnectionQuery()
        assert q.from_ is None
        assert q.to is None
        assert q.direction is Direction.FROM
        assert q.limit == -1
        assert q.column == "all"

    def test_alias_and_field_name(self):
        assert ConnectionQuery.model_validate({"from": [1, 2]}).from_ == (1, 2)
        assert ConnectionQuery(from_=3).from_ == (3,)

    def test_from_args_overrides(self):
        q = ConnectionQuery.from_args({"from": 1, "limit": 5}, limit=1, column="count")
        assert q.limit == 1
        assert q.column == "count"
        assert q.from_ == (1,)

    def test_from_args_copies_query(self):
        original = ConnectionQuery.from_args({"to": [4, 5], "direction": "to"})
        copy = ConnectionQuery.from_args(original, limit=2)
        assert copy.to == (4, 5)
        assert copy.direction is Direction.TO
        assert copy.limit == 2

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            ConnectionQuery.from_args({"direction": "diagonal"})

    def test_columns(self):
        assert ConnectionQuery(column="*").column == "all"
        assert ConnectionQuery(column="rel_to").column == ("rel_to",)
        assert ConnectionQuery(column="id, rel_from").column == ("id", "rel_from")

    def test_unknown_column(self):
        with pytest.raises(ValueError):
            ConnectionQuery(column="rel_to; DROP TABLE x")


class TestPredicateExpansion:
    def test_type_only(self):
        predicate = build_connection_predicate("demo")
        assert predicate.clauses == ()
        assert all(predicate.matches(row) for row in _rows())
        assert not predicate.matches({"type": "other", "rel_from": 1, "rel_to": 2})

    def test_from_direction(self):
        predicate = build_connection_predicate("demo", {"from": 1, "to": [2, 3]})
        assert predicate.clauses == (RelClause(rel_from=(1,), rel_to=(2, 3)),)

    def test_to_direction_swaps(self):
        predicate = build_connection_predicate(
            "demo", {"from": 1, "to": [2, 3], "direction": Direction.TO},
        )
        assert predicate.clauses == (RelClause(rel_from=(2, 3), rel_to=(1,)),)

    def test_any_fans_out(self):
        predicate = build_connection_predicate(
            "demo", {"from": [1, 2, 3], "to": [4, 5], "direction": "any"},
        )
        assert predicate.clauses == (
            RelClause(rel_from=(1, 2, 3), rel_to=(4, 5)),
            RelClause(rel_from=(4, 5), rel_to=(1, 2, 3)),
        )

    def test_any_fan_out_semantics(self):
        predicate = build_connection_predicate(
            "demo", {"from": [1, 2, 3], "to": [4, 5], "direction": "any"},
        )
        for row in _rows():
            a, b = row["rel_from"], row["rel_to"]
            expected = (a in {1, 2, 3} and b in {4, 5}) or (a in {4, 5} and b in {1, 2, 3})
            assert predicate.matches(row) is expected

    def test_any_with_one_side(self):
        predicate = build_connection_predicate("demo", {"from": 1, "direction": "any"})
        assert predicate.clauses == (RelClause(rel_from=(1,)), RelClause(rel_to=(1,)))

    def test_wildcards_omit_clause(self):
        predicate = build_connection_predicate(
            "demo", {"from": "*", "to": [], "direction": "any"},
        )
        assert predicate.clauses == ()

    def test_zero_id_omits_its_column(self):
        predicate = build_connection_predicate("demo", {"from": 0, "to": 5})
        assert predicate.clauses == (RelClause(rel_to=(5,)),)

    def test_scalar_equals_singleton(self):
        assert build_connection_predicate("demo", {"from": 1}) == build_connection_predicate(
            "demo", {"from": [1]},
        )

    def test_deterministic(self):
        args = {"from": [3, 1], "to": 2, "direction": "any", "limit": 4}
        assert build_connection_predicate("demo", args) == build_connection_predicate("demo", args)

    def test_limit_normalized(self):
        assert build_connection_predicate("demo", {"limit": -1}).limit is None
        assert build_connection_predicate("demo", {"limit": 0}).limit is None
        assert build_connection_predicate("demo", {"limit": 3}).limit == 3


class TestPredicateSql:
    def test_type_only(self):
        sql, params = build_connection_predicate("demo").to_sql("edges")
        assert sql == "SELECT * FROM edges WHERE type = ? ORDER BY id"
        assert params == ["demo"]

    def test_equality_for_single_id(self):
        sql, params = build_connection_predicate("demo", {"from": 7}).to_sql("edges")
        assert sql == "SELECT * FROM edges WHERE type = ? AND ((rel_from = ?)) ORDER BY id"
        assert params == ["demo", 7]

    def test_any_fan_out(self):
        sql, params = build_connection_predicate(
            "demo", {"from": [1, 2, 3], "to": [4, 5], "direction": "any"},
        ).to_sql("edges")
        assert sql == (
            "SELECT * FROM edges WHERE type = ? AND ("
            "(rel_from IN (?, ?, ?) AND rel_to IN (?, ?)) OR "
            "(rel_from IN (?, ?) AND rel_to IN (?, ?, ?))) ORDER BY id"
        )
        assert params == ["demo", 1, 2, 3, 4, 5, 4, 5, 1, 2, 3]

    def test_count_with_limit(self):
        sql, params = build_connection_predicate(
            "demo", {"to": 2, "column": "count", "limit": 1},
        ).to_sql("edges")
        assert sql == "SELECT COUNT(*) AS count FROM edges WHERE type = ? AND ((rel_to = ?)) LIMIT ?"
        assert params == ["demo", 2, 1]

    def test_projection(self):
        sql, _ = build_connection_predicate("demo", {"column": "rel_to"}).to_sql("edges")
        assert sql.startswith("SELECT rel_to FROM edges")

    def test_select_clause(self):
        assert ConnectionPredicate(type="x", column="count").select_clause() == "COUNT(*) AS count"
        assert ConnectionPredicate(type="x").select_clause() == "*"
        assert ConnectionPredicate(type="x", column=("id", "rel_to")).select_clause() == "id, rel_to"
