"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from lineup.domain.bus import EventBus
from lineup.domain.events import (
    BulkActionApplied,
    PerformanceCreated,
    PerformanceDeleted,
    PerformanceUpdated,
)
from lineup.domain.models import AuditEntry
from lineup.repos.memory import AuditRepository

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Turns schedule-change events into audit log entries."""

    def __init__(self, bus: EventBus, audit_repo: AuditRepository) -> None:
        self.bus = bus
        self.audit_repo = audit_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(PerformanceCreated, self.on_performance_created)
        self.bus.subscribe(PerformanceUpdated, self.on_performance_updated)
        self.bus.subscribe(PerformanceDeleted, self.on_performance_deleted)
        self.bus.subscribe(BulkActionApplied, self.on_bulk_action_applied)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_performance_created(self, event: PerformanceCreated) -> None:
        self.audit_repo.add(
            AuditEntry(
                action="performance.created",
                performance_ids=[event.performance_id],
                payload={"conflicting_ids": event.conflicting_ids},
            )
        )

    def on_performance_updated(self, event: PerformanceUpdated) -> None:
        self.audit_repo.add(
            AuditEntry(
                action="performance.updated",
                performance_ids=[event.performance_id],
                payload={"fields": event.fields, "conflicting_ids": event.conflicting_ids},
            )
        )

    def on_performance_deleted(self, event: PerformanceDeleted) -> None:
        self.audit_repo.add(
            AuditEntry(
                action="performance.deleted",
                performance_ids=[event.performance_id],
                payload={"name": event.name},
            )
        )

    def on_bulk_action_applied(self, event: BulkActionApplied) -> None:
        if event.ignored_conflicts:
            logger.warning(
                "bulk %s applied to %d performance(s) with conflicts overridden",
                event.action,
                event.updated_count,
            )
        self.audit_repo.add(
            AuditEntry(
                action=f"performance.bulk_{event.action}",
                performance_ids=event.performance_ids,
                payload={
                    "count": len(event.performance_ids),
                    "updated": event.updated_count,
                    "params": event.params,
                    "ignore_conflicts": event.ignored_conflicts,
                },
            )
        )
