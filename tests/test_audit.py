"""Tests for the event bus and audit handlers."""

from __future__ import annotations

import pytest

from lineup.domain.bus import EventBus
from lineup.domain.events import (
    BulkActionApplied,
    PerformanceCreated,
    PerformanceDeleted,
    PerformanceUpdated,
)
from lineup.domain.handlers import AuditRecorder
from lineup.domain.models import BulkActionKind
from lineup.repos.memory import AuditRepository


@pytest.fixture()
def env():
    """Fresh bus + audit repo + recorder for each test."""
    bus = EventBus()
    audit_repo = AuditRepository()
    recorder = AuditRecorder(bus=bus, audit_repo=audit_repo)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.audit_repo = audit_repo
    e.recorder = recorder
    return e


def test_bus_calls_handlers_in_registration_order():
    bus = EventBus()
    calls: list[str] = []
    bus.subscribe(PerformanceDeleted, lambda e: calls.append("first"))
    bus.subscribe(PerformanceDeleted, lambda e: calls.append("second"))

    assert bus.publish(PerformanceDeleted(performance_id=1, name="Openers")) == 2
    assert bus.publish(PerformanceCreated(performance_id=2)) == 0

    assert calls == ["first", "second"]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    seen: list[int] = []
    unsubscribe = bus.subscribe(PerformanceCreated, lambda e: seen.append(e.performance_id))

    bus.publish(PerformanceCreated(performance_id=1))
    unsubscribe()
    unsubscribe()
    bus.publish(PerformanceCreated(performance_id=2))

    assert seen == [1]


def test_handler_can_unsubscribe_itself_during_dispatch():
    bus = EventBus()
    calls: list[str] = []

    def once(event):
        calls.append("once")
        remove_once()

    remove_once = bus.subscribe(PerformanceCreated, once)
    bus.subscribe(PerformanceCreated, lambda e: calls.append("always"))

    bus.publish(PerformanceCreated(performance_id=1))
    bus.publish(PerformanceCreated(performance_id=2))

    assert calls == ["once", "always", "always"]


def test_failing_handler_reaches_publisher():
    bus = EventBus()

    def broken(event):
        raise RuntimeError("audit store down")

    bus.subscribe(PerformanceDeleted, broken)
    with pytest.raises(RuntimeError, match="audit store down"):
        bus.publish(PerformanceDeleted(performance_id=1, name="Openers"))


def test_single_edit_events_are_recorded(env):
    env.bus.publish(PerformanceCreated(performance_id=1, conflicting_ids=[2]))
    env.bus.publish(PerformanceUpdated(performance_id=1, fields=["start_time"]))
    env.bus.publish(PerformanceDeleted(performance_id=1, name="Openers"))

    entries = env.audit_repo.list_all()
    assert [e.action for e in entries] == [
        "performance.created",
        "performance.updated",
        "performance.deleted",
    ]
    assert entries[0].payload == {"conflicting_ids": [2]}
    assert entries[1].payload["fields"] == ["start_time"]


def test_bulk_action_is_recorded_with_override_flag(env):
    env.bus.publish(
        BulkActionApplied(
            action=BulkActionKind.CHANGE_TIME,
            performance_ids=[3, 4],
            updated_count=2,
            params={"start_time": "19:00"},
            ignored_conflicts=True,
        )
    )

    (entry,) = env.audit_repo.list_all()
    assert entry.action == "performance.bulk_change_time"
    assert entry.performance_ids == [3, 4]
    assert entry.payload["ignore_conflicts"] is True
    assert entry.payload["params"] == {"start_time": "19:00"}
