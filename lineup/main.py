"""FastAPI application — entry point for the lineup scheduling service."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException

from lineup.config import Settings, configure_logging, get_settings, settings
from lineup.domain.bus import EventBus
from lineup.domain.errors import (
    ConflictsPresentError,
    DomainError,
    InvalidRequestError,
    NotFoundError,
    PersistenceError,
)
from lineup.domain.handlers import AuditRecorder
from lineup.domain.models import (
    AuditEntry,
    BulkApplyRequest,
    BulkApplyResult,
    BulkPreviewRequest,
    Event,
    EventCreate,
    MoveVenue,
    Performance,
    PerformanceCreate,
    PerformanceUpdate,
    PerformanceWriteResponse,
    PreviewResult,
    Venue,
    VenueCreate,
)
from lineup.repos.memory import (
    AuditRepository,
    EventRepository,
    PerformanceRepository,
    VenueRepository,
    seed_demo_data,
)
from lineup.services.executor import BulkMutationExecutor
from lineup.services.performances import PerformanceService
from lineup.services.planner import check_target_ids, plan_bulk_action

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Lineup Scheduling Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = EventRepository()
venue_repo = VenueRepository()
performance_repo = PerformanceRepository()
audit_repo = AuditRepository()

audit_recorder = AuditRecorder(bus=event_bus, audit_repo=audit_repo)
performance_service = PerformanceService(
    store=performance_repo,
    event_repo=event_repo,
    venue_repo=venue_repo,
    bus=event_bus,
)

if settings.seed_demo_data:
    seed_demo_data(event_repo, venue_repo, performance_repo)


def _http_error(err: DomainError) -> HTTPException:
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=404, detail=err.message)
    if isinstance(err, ConflictsPresentError):
        return HTTPException(
            status_code=409,
            detail={
                "message": err.message,
                "conflicts": [c.model_dump() for c in err.conflicts],
            },
        )
    if isinstance(err, PersistenceError):
        return HTTPException(status_code=500, detail=err.message)
    return HTTPException(status_code=400, detail=err.message)


def _validated_bulk_ids(body: BulkPreviewRequest, config: Settings) -> list[int]:
    ids = check_target_ids(body.performance_ids, config.max_bulk_ids)
    if isinstance(body.action, MoveVenue) and venue_repo.get(body.action.venue_id) is None:
        raise InvalidRequestError("Target venue not found")
    return ids


# ── Routes: events & venues ───────────────────────────────────────────


@app.get("/events", response_model=list[Event])
def list_events() -> list[Event]:
    return event_repo.list_all()


@app.post("/events", response_model=Event, status_code=201)
def create_event(payload: EventCreate) -> Event:
    return event_repo.add(payload)


@app.get("/venues", response_model=list[Venue])
def list_venues() -> list[Venue]:
    return venue_repo.list_all()


@app.post("/venues", response_model=Venue, status_code=201)
def create_venue(payload: VenueCreate) -> Venue:
    return venue_repo.add(payload)


# ── Routes: single performances ───────────────────────────────────────


@app.get("/events/{event_id}/performances", response_model=list[Performance])
def list_event_performances(event_id: int) -> list[Performance]:
    """Return an event's performances ordered by start time."""
    try:
        return performance_service.list_for_event(event_id)
    except DomainError as err:
        raise _http_error(err) from err


@app.post("/performances", response_model=PerformanceWriteResponse, status_code=201)
def create_performance(payload: PerformanceCreate) -> PerformanceWriteResponse:
    """Create a performance; overlaps come back as a warning, not a failure."""
    try:
        return performance_service.create(payload)
    except DomainError as err:
        raise _http_error(err) from err


@app.patch("/performances/{performance_id}", response_model=PerformanceWriteResponse)
def update_performance(performance_id: int, payload: PerformanceUpdate) -> PerformanceWriteResponse:
    try:
        return performance_service.update(performance_id, payload)
    except DomainError as err:
        raise _http_error(err) from err


@app.delete("/performances/{performance_id}", status_code=200)
def delete_performance(performance_id: int) -> dict:
    try:
        performance_service.delete(performance_id)
    except DomainError as err:
        raise _http_error(err) from err
    return {"status": "deleted"}


# ── Routes: bulk preview / apply ──────────────────────────────────────


@app.post("/performances/bulk-preview", response_model=PreviewResult)
def bulk_preview(
    body: BulkPreviewRequest, config: Settings = Depends(get_settings)
) -> PreviewResult:
    """Show what a bulk action would change and which sets it would clash with."""
    try:
        ids = _validated_bulk_ids(body, config)
    except DomainError as err:
        raise _http_error(err) from err
    return plan_bulk_action(ids, body.action, performance_repo.list_all_performances())


@app.post("/performances/bulk-apply", response_model=BulkApplyResult)
def bulk_apply(
    body: BulkApplyRequest, config: Settings = Depends(get_settings)
) -> BulkApplyResult:
    """Commit a bulk action as one batch.

    Without ``ignore_conflicts`` the action is re-checked against the
    current schedule and refused with 409 if it still clashes.
    """
    executor = BulkMutationExecutor(
        performance_repo,
        event_bus,
        recheck_conflicts=config.recheck_conflicts_on_apply,
    )
    try:
        ids = _validated_bulk_ids(body, config)
        return executor.apply(ids, body.action, ignore_conflicts=body.ignore_conflicts)
    except DomainError as err:
        raise _http_error(err) from err


@app.get("/audit", response_model=list[AuditEntry])
def list_audit_entries() -> list[AuditEntry]:
    return audit_repo.list_all()
