"""Relationship domain model — sides, directions, relationships, views."""

from __future__ import annotations

from edgewise.core.directed import Directed, ReciprocalDirected
from edgewise.core.direction import (
    DirectedStrategy,
    Direction,
    DirectionStrategy,
    ReciprocalStrategy,
)
from edgewise.core.identity import IdentityResolver, parse_object_id
from edgewise.core.registry import RelationshipRegistry
from edgewise.core.relationship import Relationship, RelationshipOptions
from edgewise.core.side import Cardinality, Side

__all__ = [
    "Cardinality",
    "Directed",
    "DirectedStrategy",
    "Direction",
    "DirectionStrategy",
    "IdentityResolver",
    "ReciprocalDirected",
    "ReciprocalStrategy",
    "Relationship",
    "RelationshipOptions",
    "RelationshipRegistry",
    "Side",
    "parse_object_id",
]
