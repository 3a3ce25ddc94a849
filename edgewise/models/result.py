"""Result models — outcomes of connect / disconnect."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel


class InvalidDirectionError(ValueError):
    """Direction is not one of from / to / any."""


class InvalidCardinalityError(ValueError):
    """Cardinality string does not match ``(one|many)-to-(one|many)``."""


class ErrorCode(StrEnum):
    CARDINALITY_OPPOSITE = "cardinality_opposite"  # no side claims the item
    FIRST_PARAMETER = "first_parameter"
    SECOND_PARAMETER = "second_parameter"
    SELF_CONNECTION = "self_connection"
    DUPLICATE_CONNECTION = "duplicate_connection"
    NOT_FOUND = "not_found"
    STORAGE = "storage"

    @property
    def message(self) -> str:
        return {
            ErrorCode.CARDINALITY_OPPOSITE: "No side of the relationship accepts the first item.",
            ErrorCode.FIRST_PARAMETER: "Invalid first parameter.",
            ErrorCode.SECOND_PARAMETER: "Invalid second parameter.",
            ErrorCode.SELF_CONNECTION: (
                "Connection between an element and itself is not allowed."
            ),
            ErrorCode.DUPLICATE_CONNECTION: "Duplicate connections are not allowed.",
            ErrorCode.NOT_FOUND: "No matching connection.",
            ErrorCode.STORAGE: "Storage failure.",
        }[self]


ResultStatus = Literal["success", "error"]


class RelationResult(BaseModel):
    """Outcome of a write against a relationship."""

    relationship: str
    status: ResultStatus = "success"
    edge_id: int | None = None
    deleted: int = 0
    error: ErrorCode | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, relationship: str, **kwargs: Any) -> RelationResult:
        return cls(relationship=relationship, status="success", **kwargs)

    @classmethod
    def fail(
        cls, relationship: str, error: ErrorCode, message: str = "", **kwargs: Any,
    ) -> RelationResult:
        return cls(
            relationship=relationship,
            status="error",
            error=error,
            message=message or error.message,
            **kwargs,
        )
