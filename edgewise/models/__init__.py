"""Result and error models."""

from __future__ import annotations

from edgewise.models.result import (
    ErrorCode,
    InvalidCardinalityError,
    InvalidDirectionError,
    RelationResult,
)

__all__ = [
    "ErrorCode",
    "InvalidCardinalityError",
    "InvalidDirectionError",
    "RelationResult",
]
