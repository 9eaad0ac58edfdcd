"""Domain events emitted when the schedule changes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from lineup.domain.models import BulkActionKind


class PerformanceCreated(BaseModel):
    """Fired after a single performance is stored."""

    performance_id: int
    conflicting_ids: list[int] = Field(default_factory=list)


class PerformanceUpdated(BaseModel):
    """Fired after a single-edit update lands."""

    performance_id: int
    fields: list[str]
    conflicting_ids: list[int] = Field(default_factory=list)


class PerformanceDeleted(BaseModel):
    performance_id: int
    name: str


class BulkActionApplied(BaseModel):
    """Fired once per committed bulk batch."""

    action: BulkActionKind
    performance_ids: list[int]
    updated_count: int
    params: dict = Field(default_factory=dict)
    ignored_conflicts: bool = False
