"""Apply phase of bulk edits.

The executor commits one bulk action as a single batch through the
performance store. With ``ignore_conflicts`` unset it re-plans against a
fresh snapshot first and refuses to write if anything still clashes; with it
set, the operator's override from the preview stands and no re-check runs.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from lineup.domain.bus import EventBus
from lineup.domain.errors import ConflictsPresentError, PersistenceError
from lineup.domain.events import BulkActionApplied
from lineup.domain.models import (
    BulkAction,
    BulkApplyResult,
    ChangeTime,
    Delete,
    MoveVenue,
)
from lineup.repos.interfaces import PerformanceStore
from lineup.services.planner import (
    check_target_ids,
    plan_bulk_action,
    proposed_performance,
    select_targets,
)

logger = logging.getLogger(__name__)


class BulkMutationExecutor:
    def __init__(
        self,
        store: PerformanceStore,
        bus: EventBus | None = None,
        *,
        recheck_conflicts: bool = True,
    ) -> None:
        self._store = store
        self._bus = bus
        self._recheck_conflicts = recheck_conflicts

    def apply(
        self,
        target_ids: Iterable[int],
        action: BulkAction,
        *,
        ignore_conflicts: bool = False,
    ) -> BulkApplyResult:
        """Commit *action* for *target_ids*.

        Raises:
            InvalidRequestError: If no target IDs were given.
            ConflictsPresentError: If the re-check finds overlaps.
            PersistenceError: If the batch write fails; nothing was applied.
        """
        ids = check_target_ids(target_ids)

        if self._recheck_conflicts and not ignore_conflicts:
            preview = plan_bulk_action(ids, action, self._store.list_all_performances())
            if preview.conflicts:
                logger.info(
                    "refusing bulk %s: %d conflict(s) on re-check",
                    action.kind,
                    len(preview.conflicts),
                )
                raise ConflictsPresentError(preview.conflicts)

        try:
            updated = self._write(ids, action)
        except Exception as exc:
            logger.error("bulk %s failed for %d performance(s)", action.kind, len(ids), exc_info=True)
            raise PersistenceError() from exc

        logger.info("bulk %s applied: %d row(s) changed", action.kind, updated)
        if self._bus is not None:
            self._bus.publish(
                BulkActionApplied(
                    action=action.kind,
                    performance_ids=ids,
                    updated_count=updated,
                    params=action.model_dump(exclude={"kind"}),
                    ignored_conflicts=ignore_conflicts,
                )
            )
        return BulkApplyResult(updated_count=updated, action=action.kind)

    def _write(self, ids: list[int], action: BulkAction) -> int:
        match action:
            case MoveVenue(venue_id=venue_id):
                return self._store.apply_batch({pid: {"venue_id": venue_id} for pid in ids})
            case ChangeTime():
                updates: dict[int, dict[str, Any]] = {}
                for performance in select_targets(ids, self._store.list_all_performances()):
                    moved = proposed_performance(performance, action)
                    updates[performance.id] = {
                        "start_time": moved.start_time,
                        "end_time": moved.end_time,
                    }
                return self._store.apply_batch(updates)
            case Delete():
                return self._store.delete_batch(ids)
