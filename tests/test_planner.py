"""Tests for the bulk preview planner."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from lineup.domain.errors import InvalidRequestError
from lineup.domain.models import BulkAction, ChangeTime, Delete, MoveVenue, Performance
from lineup.services.planner import check_target_ids, plan_bulk_action


def _make_performance(id: int, start: str | None, end: str | None, *, venue_id: int = 1, event_id: int = 1) -> Performance:
    return Performance(
        id=id,
        name=f"Band {id}",
        event_id=event_id,
        venue_id=venue_id,
        start_time=start,
        end_time=end,
    )


@pytest.fixture()
def schedule() -> list[Performance]:
    return [
        _make_performance(1, "17:00", "17:30", venue_id=1),
        _make_performance(2, "17:00", "17:30", venue_id=2),
        _make_performance(3, "17:00", "17:30", venue_id=3),
        _make_performance(4, "19:15", "20:00", venue_id=1),
        _make_performance(5, "21:00", "22:00", venue_id=2),
        _make_performance(6, "19:00", "20:00", venue_id=2, event_id=2),
    ]


# ---------------------------------------------------------------------------
# ChangeTime
# ---------------------------------------------------------------------------


def test_change_time_reports_single_collision(schedule):
    """Scenario C: three targets to 19:00, only one lands on a non-target."""
    preview = plan_bulk_action([1, 2, 3], ChangeTime(start_time="19:00"), schedule)

    assert len(preview.changes) == 3
    assert len(preview.conflicts) == 1
    conflict = preview.conflicts[0]
    assert conflict.performance_id == 1
    assert conflict.conflicting_id == 4
    assert "19:00-19:30" in conflict.message
    assert "19:15-20:00" in conflict.message


def test_change_time_preserves_duration(schedule):
    preview = plan_bulk_action([5], ChangeTime(start_time="23:30"), schedule)
    change = preview.changes[0]
    fields = {c.field: (c.from_value, c.to_value) for c in change.changes}
    assert fields == {"start_time": ("21:00", "23:30"), "end_time": ("22:00", "00:30")}


def test_change_time_ignores_other_events(schedule):
    preview = plan_bulk_action([2], ChangeTime(start_time="19:00"), schedule)
    assert preview.conflicts == []


# ---------------------------------------------------------------------------
# MoveVenue
# ---------------------------------------------------------------------------


def test_move_venue_checks_the_new_venue(schedule):
    schedule.append(_make_performance(7, "17:15", "18:00", venue_id=4))
    preview = plan_bulk_action([1], MoveVenue(venue_id=4), schedule)

    assert preview.changes[0].changes[0].field == "venue_id"
    assert preview.changes[0].changes[0].from_value == 1
    assert preview.changes[0].changes[0].to_value == 4
    assert [c.conflicting_id for c in preview.conflicts] == [7]
    assert "at new venue" in preview.conflicts[0].message


def test_targets_are_not_checked_against_each_other(schedule):
    """Two selected sets moved into the same slot produce no warning."""
    preview = plan_bulk_action([1, 2, 3], MoveVenue(venue_id=9), schedule)
    assert len(preview.changes) == 3
    assert preview.conflicts == []


# ---------------------------------------------------------------------------
# Delete and general behaviour
# ---------------------------------------------------------------------------


def test_delete_never_conflicts(schedule):
    """Scenario D."""
    preview = plan_bulk_action([1, 2, 3, 4], Delete(), schedule)
    assert len(preview.changes) == 4
    assert all(c.action == "delete" for c in preview.changes)
    assert preview.conflicts == []


def test_unknown_and_duplicate_ids_are_collapsed(schedule):
    preview = plan_bulk_action([4, 99, 4, 1], Delete(), schedule)
    assert [c.performance_id for c in preview.changes] == [4, 1]


def test_planning_does_not_mutate_snapshot(schedule):
    before = [p.model_copy() for p in schedule]
    plan_bulk_action([1, 2], ChangeTime(start_time="19:00"), schedule)
    plan_bulk_action([1, 2], MoveVenue(venue_id=3), schedule)
    assert schedule == before


def test_unreadable_target_times_become_warnings(schedule):
    schedule.append(_make_performance(8, "soon", "later", venue_id=1))
    preview = plan_bulk_action([8], MoveVenue(venue_id=2), schedule)
    assert preview.conflicts == []
    assert len(preview.warnings) == 1
    assert "Band 8" in preview.warnings[0]


def test_serialized_changes_use_from_and_to(schedule):
    preview = plan_bulk_action([1], MoveVenue(venue_id=2), schedule)
    dumped = preview.model_dump(by_alias=True)
    assert dumped["changes"][0]["changes"][0] == {"field": "venue_id", "from": 1, "to": 2}


# ---------------------------------------------------------------------------
# Action validation
# ---------------------------------------------------------------------------


def test_action_union_parses_by_kind():
    adapter = TypeAdapter(BulkAction)
    assert adapter.validate_python({"kind": "move_venue", "venue_id": 3}) == MoveVenue(venue_id=3)
    assert adapter.validate_python({"kind": "delete"}) == Delete()


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "move_venue"},
        {"kind": "change_time"},
        {"kind": "change_time", "start_time": "7pm"},
        {"kind": "rename"},
    ],
)
def test_action_union_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError):
        TypeAdapter(BulkAction).validate_python(payload)


def test_check_target_ids():
    assert check_target_ids([3, 1, 3]) == [3, 1]
    with pytest.raises(InvalidRequestError):
        check_target_ids([])
    with pytest.raises(InvalidRequestError):
        check_target_ids([1, 2, 3], limit=2)
