"""In-memory repositories for events, venues, performances and the audit log."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Iterable

from lineup.domain.models import (
    AuditEntry,
    Event,
    EventCreate,
    EventStatus,
    Performance,
    PerformanceCreate,
    Venue,
    VenueCreate,
)
from lineup.repos.interfaces import PerformanceStore


class EventRepository:
    """Dict-backed store for Event instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[int, Event] = {}
        self._ids = itertools.count(1)

    def add(self, data: EventCreate) -> Event:
        event = Event(id=next(self._ids), **data.model_dump())
        self._store[event.id] = event
        return event

    def get(self, event_id: int) -> Event | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        return list(self._store.values())


class VenueRepository:
    """Dict-backed store for Venue instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[int, Venue] = {}
        self._ids = itertools.count(1)

    def add(self, data: VenueCreate) -> Venue:
        venue = Venue(id=next(self._ids), **data.model_dump())
        self._store[venue.id] = venue
        return venue

    def get(self, venue_id: int) -> Venue | None:
        return self._store.get(venue_id)

    def list_all(self) -> list[Venue]:
        return list(self._store.values())


class PerformanceRepository(PerformanceStore):
    """Dict-backed performance store with all-or-nothing batch writes.

    Batches are staged on a copy of the store and swapped in only once every
    row has been written, so a failure part way leaves the store untouched.
    """

    def __init__(self) -> None:
        self._store: dict[int, Performance] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def list_performances(self, event_id: int) -> list[Performance]:
        return [p for p in self._store.values() if p.event_id == event_id]

    def list_all_performances(self) -> list[Performance]:
        return list(self._store.values())

    def get_performance(self, performance_id: int) -> Performance | None:
        return self._store.get(performance_id)

    def add_performance(self, data: PerformanceCreate) -> Performance:
        with self._lock:
            performance = Performance(
                id=next(self._ids),
                **data.model_dump(exclude={"duration_minutes"}),
            )
            self._store[performance.id] = performance
        return performance

    def update_performance(self, performance_id: int, fields: dict[str, Any]) -> Performance | None:
        with self._lock:
            current = self._store.get(performance_id)
            if current is None:
                return None
            updated = current.model_copy(update=fields)
            self._store[performance_id] = updated
        return updated

    def delete_performance(self, performance_id: int) -> bool:
        with self._lock:
            return self._store.pop(performance_id, None) is not None

    def apply_batch(self, updates: dict[int, dict[str, Any]]) -> int:
        with self._lock:
            staged = dict(self._store)
            changed = 0
            for performance_id, fields in updates.items():
                current = staged.get(performance_id)
                if current is None:
                    continue
                self._write(staged, current.model_copy(update=fields))
                changed += 1
            self._store = staged
        return changed

    def delete_batch(self, performance_ids: Iterable[int]) -> int:
        with self._lock:
            staged = dict(self._store)
            removed = 0
            for performance_id in performance_ids:
                if staged.pop(performance_id, None) is not None:
                    removed += 1
            self._store = staged
        return removed

    def _write(self, staged: dict[int, Performance], performance: Performance) -> None:
        staged[performance.id] = performance

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class AuditRepository:
    """List-backed store for AuditEntry instances."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def add(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def list_all(self) -> list[AuditEntry]:
        return sorted(self._entries, key=lambda e: e.timestamp)


# ---------------------------------------------------------------------------
# Seed data – a small festival night useful for conflict testing
# ---------------------------------------------------------------------------


def seed_demo_data(
    event_repo: EventRepository,
    venue_repo: VenueRepository,
    performance_repo: PerformanceRepository,
) -> None:
    event = event_repo.add(EventCreate(name="Summer Block Party", status=EventStatus.PUBLISHED))
    main = venue_repo.add(VenueCreate(name="Main Stage"))
    side = venue_repo.add(VenueCreate(name="Side Room"))

    lineup = [
        ("The Openers", main.id, "19:00", "20:00"),
        ("Midnight Static", main.id, "23:30", "00:30"),
        ("Late Bloomers", main.id, "00:15", "01:00"),
        ("Acoustic Hour", side.id, "20:00", "21:00"),
        ("Side Project", side.id, "20:30", "21:30"),
    ]
    for name, venue_id, start, end in lineup:
        performance_repo.add_performance(
            PerformanceCreate(
                name=name,
                event_id=event.id,
                venue_id=venue_id,
                start_time=start,
                end_time=end,
            )
        )
