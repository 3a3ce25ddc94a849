"""Directions and the relationship-wide direction strategies."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from edgewise.models.result import InvalidDirectionError

if TYPE_CHECKING:
    from edgewise.core.directed import Directed


class Direction(StrEnum):
    FROM = "from"
    TO = "to"
    ANY = "any"  # query-time wildcard, never stored

    @classmethod
    def parse(cls, value: Any) -> Direction:
        """Coerce ``value`` into a Direction or raise InvalidDirectionError."""
        if isinstance(value, Direction):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            msg = f"Invalid direction {value!r}. The direction must be one of: {valid}."
            raise InvalidDirectionError(msg) from None

    def flip(self) -> Direction:
        if self is Direction.ANY:
            return self
        return Direction.FROM if self is Direction.TO else Direction.TO

    def expand(self) -> tuple[Direction, ...]:
        """ANY fans out to (FROM, TO); a concrete direction is itself."""
        if self is Direction.ANY:
            return (Direction.FROM, Direction.TO)
        return (self,)


class DirectionStrategy:
    """Decides the direction semantics of a whole relationship."""

    arrow = "->"
    reciprocal = False

    def choose_direction(self, side: Direction) -> Direction:
        return side

    def get_arrow(self) -> str:
        return self.arrow

    def get_directed_class(self) -> type[Directed]:
        from edgewise.core.directed import Directed

        return Directed


class DirectedStrategy(DirectionStrategy):
    """Plain directed edges: the matched side is the direction."""


class ReciprocalStrategy(DirectionStrategy):
    """Symmetric edges: whichever side matched, the direction is ANY."""

    arrow = "<->"
    reciprocal = True

    def choose_direction(self, side: Direction) -> Direction:
        return Direction.ANY

    def get_directed_class(self) -> type[Directed]:
        from edgewise.core.directed import ReciprocalDirected

        return ReciprocalDirected


def make_strategy(reciprocal: bool) -> DirectionStrategy:
    return ReciprocalStrategy() if reciprocal else DirectedStrategy()
