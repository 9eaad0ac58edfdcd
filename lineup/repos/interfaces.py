"""Store interfaces (repository pattern).

The scheduling core only sees these; swap the in-memory stores for a real
database by implementing the same methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable

from lineup.domain.models import Performance, PerformanceCreate


class PerformanceStore(ABC):
    """Interface for performance persistence operations."""

    @abstractmethod
    def list_performances(self, event_id: int) -> list[Performance]:
        """Return every performance in an event, in insertion order."""
        ...

    @abstractmethod
    def list_all_performances(self) -> list[Performance]:
        ...

    @abstractmethod
    def get_performance(self, performance_id: int) -> Performance | None:
        """Return a performance by ID, or None if not found."""
        ...

    @abstractmethod
    def add_performance(self, data: PerformanceCreate) -> Performance:
        ...

    @abstractmethod
    def update_performance(self, performance_id: int, fields: dict[str, Any]) -> Performance | None:
        ...

    @abstractmethod
    def delete_performance(self, performance_id: int) -> bool:
        ...

    @abstractmethod
    def apply_batch(self, updates: dict[int, dict[str, Any]]) -> int:
        """Apply field updates keyed by performance ID, all or nothing.

        Unknown IDs are skipped. Returns the number of rows changed. Raises
        on failure with no update visible afterwards.
        """
        ...

    @abstractmethod
    def delete_batch(self, performance_ids: Iterable[int]) -> int:
        """Delete the given performances, all or nothing; returns the count."""
        ...
