"""Preview phase of bulk edits: proposed changes plus the clashes they cause.

Nothing here writes. The caller fetches a fresh snapshot of performances,
asks for a plan, shows it to the operator and may throw it away.
"""

from __future__ import annotations

import logging
from typing import Iterable

from lineup.domain.errors import InvalidRequestError
from lineup.domain.models import (
    BulkAction,
    BulkChange,
    ChangeTime,
    Delete,
    FieldChange,
    MoveVenue,
    Performance,
    PreviewResult,
)
from lineup.services.conflicts import find_conflicts_for
from lineup.services.intervals import build_intervals
from lineup.services.timeutils import calculate_end_time

logger = logging.getLogger(__name__)


def unique_ids(ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(ids))


def check_target_ids(target_ids: Iterable[int], limit: int | None = None) -> list[int]:
    """Deduplicate the selection and reject empty or oversized ones."""
    ids = unique_ids(target_ids)
    if not ids:
        raise InvalidRequestError("No performance IDs provided")
    if limit is not None and len(ids) > limit:
        raise InvalidRequestError(f"Maximum {limit} performance IDs allowed per request")
    return ids


def select_targets(target_ids: Iterable[int], performances: Iterable[Performance]) -> list[Performance]:
    """Targets in request order; ids missing from the snapshot are dropped."""
    by_id = {p.id: p for p in performances}
    return [by_id[pid] for pid in unique_ids(target_ids) if pid in by_id]


def shifted_window(performance: Performance, start_time: str) -> tuple[str, str | None]:
    """New (start, end) for a set moved to *start_time*, keeping its length.

    When the stored times cannot be read the end is left as it was.
    """
    end = calculate_end_time(start_time, performance.duration_minutes)
    return start_time, end if end is not None else performance.end_time


def proposed_performance(performance: Performance, action: BulkAction) -> Performance | None:
    """What *performance* would look like after *action*; None for deletes."""
    match action:
        case MoveVenue(venue_id=venue_id):
            return performance.model_copy(update={"venue_id": venue_id})
        case ChangeTime(start_time=start_time):
            start, end = shifted_window(performance, start_time)
            return performance.model_copy(update={"start_time": start, "end_time": end})
        case Delete():
            return None


_CHANGED_FIELDS = {
    MoveVenue: ("venue_id",),
    ChangeTime: ("start_time", "end_time"),
}


def _change_for(performance: Performance, proposed: Performance | None, action: BulkAction) -> BulkChange:
    change = BulkChange(performance_id=performance.id, performance_name=performance.name)
    if proposed is None:
        change.action = "delete"
        return change
    for field in _CHANGED_FIELDS[type(action)]:
        change.changes.append(
            FieldChange(
                field=field,
                from_value=getattr(performance, field),
                to_value=getattr(proposed, field),
            )
        )
    return change


def plan_bulk_action(
    target_ids: Iterable[int],
    action: BulkAction,
    performances: list[Performance],
) -> PreviewResult:
    """Build the preview for applying *action* to *target_ids*.

    Each target is checked only against performances outside the selection,
    so two selected sets moved into the same slot are not reported against
    each other.
    """
    targets = select_targets(target_ids, performances)
    target_set = {p.id for p in targets}
    pool = [p for p in performances if p.id not in target_set]
    where = "at new venue" if isinstance(action, MoveVenue) else "at venue"

    result = PreviewResult()
    proposals: list[Performance] = []
    for performance in targets:
        proposed = proposed_performance(performance, action)
        result.changes.append(_change_for(performance, proposed, action))
        if proposed is not None:
            proposals.append(proposed)

    for proposed in proposals:
        if not build_intervals(proposed.start_time, proposed.end_time):
            result.warnings.append(
                f'"{proposed.name}" has no readable time range '
                f"({proposed.start_time}-{proposed.end_time}); it was not checked for conflicts"
            )
            continue
        result.conflicts.extend(find_conflicts_for(proposed, pool, where=where))

    logger.info(
        "planned %s for %d performance(s): %d change(s), %d conflict(s)",
        action.kind,
        len(targets),
        len(result.changes),
        len(result.conflicts),
    )
    return result
