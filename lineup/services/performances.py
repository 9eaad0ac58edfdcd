"""Single-performance create/update/delete with conflict warnings.

Overlaps found here are reported back to the caller but do not block the
write; only the bulk apply step refuses on conflicts.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from lineup.domain.bus import EventBus
from lineup.domain.errors import InvalidRequestError, NotFoundError
from lineup.domain.events import PerformanceCreated, PerformanceDeleted, PerformanceUpdated
from lineup.domain.models import (
    Conflict,
    Performance,
    PerformanceCreate,
    PerformanceUpdate,
    PerformanceWriteResponse,
)
from lineup.repos.interfaces import PerformanceStore
from lineup.repos.memory import EventRepository, VenueRepository
from lineup.services.conflicts import find_conflicts_for
from lineup.services.timeutils import sort_by_start

logger = logging.getLogger(__name__)


def _warning(conflicts: list[Conflict]) -> str | None:
    if not conflicts:
        return None
    return f"This performance overlaps with {len(conflicts)} other performance(s) at the same venue"


class PerformanceService:
    def __init__(
        self,
        store: PerformanceStore,
        event_repo: EventRepository,
        venue_repo: VenueRepository,
        bus: EventBus | None = None,
    ) -> None:
        self._store = store
        self._event_repo = event_repo
        self._venue_repo = venue_repo
        self._bus = bus

    def list_for_event(self, event_id: int) -> list[Performance]:
        if self._event_repo.get(event_id) is None:
            raise NotFoundError("event", event_id)
        return sort_by_start(self._store.list_performances(event_id))

    def get(self, performance_id: int) -> Performance:
        performance = self._store.get_performance(performance_id)
        if performance is None:
            raise NotFoundError("performance", performance_id)
        return performance

    def create(self, data: PerformanceCreate) -> PerformanceWriteResponse:
        """Store a new performance and report any clashes it causes.

        Raises:
            InvalidRequestError: If an event performance lacks venue or times.
            NotFoundError: If the event or venue does not exist.
        """
        self._check_complete(data)
        self._check_times(data.start_time, data.end_time)
        self._check_references(data.event_id, data.venue_id)

        performance = self._store.add_performance(data)
        conflicts = self._conflicts_for(performance)
        logger.info("created performance %s with %d conflict(s)", performance.id, len(conflicts))

        if self._bus is not None:
            self._bus.publish(
                PerformanceCreated(
                    performance_id=performance.id,
                    conflicting_ids=[c.conflicting_id for c in conflicts],
                )
            )
        return PerformanceWriteResponse(
            performance=performance, conflicts=conflicts, warning=_warning(conflicts)
        )

    def update(self, performance_id: int, data: PerformanceUpdate) -> PerformanceWriteResponse:
        existing = self.get(performance_id)
        fields = data.model_dump(exclude_unset=True)
        try:
            candidate = Performance.model_validate(
                {**existing.model_dump(exclude={"duration_minutes"}), **fields}
            )
        except ValidationError as err:
            raise InvalidRequestError(err.errors()[0]["msg"]) from err

        self._check_complete(candidate)
        self._check_times(candidate.start_time, candidate.end_time)
        self._check_references(fields.get("event_id"), fields.get("venue_id"))

        conflicts = self._conflicts_for(candidate)
        updated = self._store.update_performance(performance_id, fields)
        if updated is None:
            raise NotFoundError("performance", performance_id)

        if self._bus is not None:
            self._bus.publish(
                PerformanceUpdated(
                    performance_id=performance_id,
                    fields=sorted(fields),
                    conflicting_ids=[c.conflicting_id for c in conflicts],
                )
            )
        return PerformanceWriteResponse(
            performance=updated, conflicts=conflicts, warning=_warning(conflicts)
        )

    def delete(self, performance_id: int) -> None:
        existing = self.get(performance_id)
        self._store.delete_performance(performance_id)
        if self._bus is not None:
            self._bus.publish(PerformanceDeleted(performance_id=performance_id, name=existing.name))

    # ------------------------------------------------------------------

    def _conflicts_for(self, performance: Performance) -> list[Conflict]:
        if performance.event_id is None:
            return []
        return find_conflicts_for(performance, self._store.list_performances(performance.event_id))

    @staticmethod
    def _check_complete(performance: Performance | PerformanceCreate) -> None:
        if performance.event_id is None:
            return
        if not (performance.venue_id and performance.start_time and performance.end_time):
            raise InvalidRequestError(
                "For event performances, venue_id, start_time, and end_time are required"
            )

    @staticmethod
    def _check_times(start_time: str | None, end_time: str | None) -> None:
        # an end before the start is a set running past midnight
        if start_time and end_time and start_time == end_time:
            raise InvalidRequestError("End time must differ from start time")

    def _check_references(self, event_id: int | None, venue_id: int | None) -> None:
        if event_id is not None and self._event_repo.get(event_id) is None:
            raise NotFoundError("event", event_id)
        if venue_id is not None and self._venue_repo.get(venue_id) is None:
            raise NotFoundError("venue", venue_id)
