"""Domain models for events, venues and scheduled performances."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from lineup.services.timeutils import (
    calculate_end_time,
    derive_duration_minutes,
    is_valid_time_format,
)


class EventStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class BulkActionKind(StrEnum):
    MOVE_VENUE = "move_venue"
    CHANGE_TIME = "change_time"
    DELETE = "delete"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _check_time(value: str) -> str:
    if not is_valid_time_format(value):
        raise ValueError("Invalid time format. Use HH:MM (24-hour format)")
    return value


ClockTime = Annotated[str, AfterValidator(_check_time)]


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    id: int
    name: str
    status: EventStatus = EventStatus.DRAFT
    date: str | None = None


class Venue(BaseModel):
    id: int
    name: str
    address: str | None = None


class Performance(BaseModel):
    """A band playing one venue within one event.

    Times are wall-clock ``HH:MM`` strings; an end at or before the start
    means the set runs past midnight. Stored times are not re-validated here
    so that legacy rows with malformed values can still be loaded.
    """

    id: int
    name: str
    event_id: int | None = None
    venue_id: int | None = None
    start_time: str | None = None
    end_time: str | None = None
    url: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_minutes(self) -> int | None:
        return derive_duration_minutes(self.start_time, self.end_time)


class Conflict(BaseModel):
    performance_id: int
    conflicting_id: int
    conflicting_name: str
    message: str
    severity: Literal["error"] = "error"


class FieldChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str
    from_value: Any = Field(default=None, alias="from")
    to_value: Any = Field(default=None, alias="to")


class BulkChange(BaseModel):
    performance_id: int
    performance_name: str
    changes: list[FieldChange] = Field(default_factory=list)
    action: Literal["delete"] | None = None


class PreviewResult(BaseModel):
    changes: list[BulkChange] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class BulkApplyResult(BaseModel):
    success: bool = True
    updated_count: int
    action: BulkActionKind


class AuditEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    action: str
    performance_ids: list[int] = Field(default_factory=list)
    payload: dict = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Bulk actions (closed tagged union, discriminated on ``kind``)
# ---------------------------------------------------------------------------


class MoveVenue(BaseModel):
    kind: Literal["move_venue"] = "move_venue"
    venue_id: int


class ChangeTime(BaseModel):
    kind: Literal["change_time"] = "change_time"
    start_time: ClockTime


class Delete(BaseModel):
    kind: Literal["delete"] = "delete"


BulkAction = Annotated[MoveVenue | ChangeTime | Delete, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class EventCreate(BaseModel):
    name: str = Field(min_length=1)
    status: EventStatus = EventStatus.DRAFT
    date: str | None = None


class VenueCreate(BaseModel):
    name: str = Field(min_length=1)
    address: str | None = None


class PerformanceCreate(BaseModel):
    name: str = Field(min_length=1)
    event_id: int | None = None
    venue_id: int | None = None
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    url: str | None = None

    @model_validator(mode="after")
    def _fill_end_from_duration(self) -> PerformanceCreate:
        if self.end_time is None and self.start_time and self.duration_minutes:
            self.end_time = calculate_end_time(self.start_time, self.duration_minutes)
        return self


class PerformanceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    event_id: int | None = None
    venue_id: int | None = None
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    url: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_cleared(cls, value: str | None) -> str:
        # omit the field to keep the current name; null is not a rename
        if value is None:
            raise ValueError("Band name is required")
        return value


class PerformanceWriteResponse(BaseModel):
    performance: Performance
    conflicts: list[Conflict] = Field(default_factory=list)
    warning: str | None = None


class BulkPreviewRequest(BaseModel):
    performance_ids: list[int]
    action: BulkAction


class BulkApplyRequest(BulkPreviewRequest):
    ignore_conflicts: bool = False
