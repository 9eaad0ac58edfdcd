"""Domain error codes for the scheduling core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lineup.domain.models import Conflict


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICTS_PRESENT = "CONFLICTS_PRESENT"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRequestError(DomainError):
    """Raised when a request is missing or carries an unusable parameter."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_REQUEST, message=message)


class NotFoundError(DomainError):
    """Raised when a performance, event or venue does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{kind.capitalize()} not found",
        )
        self.kind = kind
        self.entity_id = entity_id


class ConflictsPresentError(DomainError):
    """Raised by apply when a fresh re-check still finds overlaps."""

    def __init__(self, conflicts: list[Conflict]) -> None:
        super().__init__(
            code=ErrorCode.CONFLICTS_PRESENT,
            message=f"{len(conflicts)} scheduling conflict(s) found",
        )
        self.conflicts = conflicts


class PersistenceError(DomainError):
    """Raised when a batch write fails; the cause is chained for logging."""

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_FAILED, message=message)
