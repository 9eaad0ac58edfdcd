"""Half-open minute intervals that survive the midnight wrap."""

from __future__ import annotations

from lineup.services.timeutils import (
    MINUTES_PER_DAY,
    normalize_end_minutes,
    parse_time_to_minutes,
)

Interval = tuple[int, int]


def build_intervals(start_time: str | None, end_time: str | None) -> list[Interval]:
    """Return the set's interval plus a copy shifted one day later.

    A 23:30-00:30 set becomes ``(1410, 1470)``; the shifted copy lets an
    00:15 start on the other side (``15 + 1440``) still meet it. Unparseable
    times give an empty list, which overlaps nothing.
    """
    start = parse_time_to_minutes(start_time)
    end = normalize_end_minutes(start, parse_time_to_minutes(end_time))
    if end is None:
        return []
    return [(start, end), (start + MINUTES_PER_DAY, end + MINUTES_PER_DAY)]


def overlaps(a: Interval, b: Interval) -> bool:
    # touching boundaries are not an overlap
    return a[0] < b[1] and b[0] < a[1]


def intervals_overlap(first: list[Interval], second: list[Interval]) -> bool:
    return any(overlaps(a, b) for a in first for b in second)
