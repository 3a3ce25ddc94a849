"""Edgewise — typed relationships between addressable entities over one edge table."""

from __future__ import annotations

__version__ = "0.3.0"

from edgewise.core import (  # noqa: E402
    Direction,
    Relationship,
    RelationshipOptions,
    RelationshipRegistry,
    Side,
)
from edgewise.models.result import ErrorCode, RelationResult  # noqa: E402
from edgewise.storage import EdgeRepository, close_db, open_db  # noqa: E402

__all__ = [
    "Direction",
    "EdgeRepository",
    "ErrorCode",
    "RelationResult",
    "Relationship",
    "RelationshipOptions",
    "RelationshipRegistry",
    "Side",
    "__version__",
    "close_db",
    "open_db",
]
