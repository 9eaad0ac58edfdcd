"""Service for detecting scheduling conflicts between performances.

This is the only place overlap rules live; the single-edit path, the bulk
planner and the apply re-check all call into it.
"""

from __future__ import annotations

import logging
from typing import Iterable

from lineup.domain.models import Conflict, Performance
from lineup.services.intervals import build_intervals, intervals_overlap

logger = logging.getLogger(__name__)


def _shares_slot(candidate: Performance, other: Performance) -> bool:
    if other.id == candidate.id:
        return False
    if other.event_id is None or other.venue_id is None:
        return False
    return other.event_id == candidate.event_id and other.venue_id == candidate.venue_id


def detect_conflicts(candidate: Performance, pool: Iterable[Performance]) -> list[Performance]:
    """Return the members of *pool* that overlap *candidate*.

    Overlap rule: same event, same venue, and the half-open time ranges meet
    (a set ending at 21:00 does not clash with one starting at 21:00).
    Performances missing an event, venue or either time never conflict.
    Results keep the pool's order.
    """
    if (
        candidate.event_id is None
        or candidate.venue_id is None
        or not candidate.start_time
        or not candidate.end_time
    ):
        return []

    own = build_intervals(candidate.start_time, candidate.end_time)
    if not own:
        logger.debug("performance %s has unreadable times, skipping", candidate.id)
        return []

    found: list[Performance] = []
    for other in pool:
        if not _shares_slot(candidate, other):
            continue
        theirs = build_intervals(other.start_time, other.end_time)
        if not theirs:
            logger.debug("performance %s has unreadable times, skipping", other.id)
            continue
        if intervals_overlap(own, theirs):
            found.append(other)
    return found


def describe_conflict(performance: Performance, other: Performance, *, where: str = "at venue") -> Conflict:
    return Conflict(
        performance_id=performance.id,
        conflicting_id=other.id,
        conflicting_name=other.name,
        message=(
            f'"{performance.name}" ({performance.start_time}-{performance.end_time}) '
            f'overlaps with "{other.name}" {where} ({other.start_time}-{other.end_time})'
        ),
    )


def find_conflicts_for(
    performance: Performance,
    pool: Iterable[Performance],
    *,
    where: str = "at venue",
) -> list[Conflict]:
    """Detect and describe every clash for one performance."""
    return [
        describe_conflict(performance, other, where=where)
        for other in detect_conflicts(performance, pool)
    ]
