"""Wall-clock ``HH:MM`` helpers.

Parsing is deliberately soft: anything that cannot be read as two numbers
becomes ``None`` so a single bad row drops out of conflict checks instead of
aborting them.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable

MINUTES_PER_DAY = 24 * 60

_TIME_FORMAT = re.compile(r"(\d{2}):(\d{2})", re.ASCII)


def _to_number(part: str) -> float | None:
    part = part.strip()
    if not part:
        return None
    try:
        value = float(part)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_time_to_minutes(time: str | None) -> int | None:
    """Return ``hours * 60 + minutes`` for an ``HH:MM`` value, else ``None``."""
    if not time:
        return None
    parts = time.split(":")
    if len(parts) < 2:
        return None
    hours, minutes = _to_number(parts[0]), _to_number(parts[1])
    if hours is None or minutes is None:
        return None
    return int(hours * 60 + minutes)


def normalize_end_minutes(start: int | None, end: int | None) -> int | None:
    """Push *end* into the next day when it does not come after *start*."""
    if start is None or end is None:
        return None
    return end + MINUTES_PER_DAY if end <= start else end


def derive_duration_minutes(start_time: str | None, end_time: str | None) -> int | None:
    start = parse_time_to_minutes(start_time)
    end = normalize_end_minutes(start, parse_time_to_minutes(end_time))
    if end is None:
        return None
    return end - start


def format_minutes(total: int) -> str:
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def calculate_end_time(start_time: str | None, duration_minutes: int | None) -> str | None:
    """Return the ``HH:MM`` end of a set, wrapping past midnight."""
    if duration_minutes is None or duration_minutes <= 0:
        return None
    start = parse_time_to_minutes(start_time)
    if start is None:
        return None
    return format_minutes(start + duration_minutes)


def is_valid_time_format(value: str) -> bool:
    match = _TIME_FORMAT.fullmatch(value)
    if match is None:
        return False
    return int(match.group(1)) < 24 and int(match.group(2)) < 60


def sort_by_start(performances: Iterable[Any]) -> list[Any]:
    """Order by start time; unparseable starts go last, ties break on name."""

    def key(p: Any) -> tuple[int, int, str]:
        minutes = parse_time_to_minutes(p.start_time)
        return (minutes is None, minutes or 0, p.name or "")

    return sorted(performances, key=key)
