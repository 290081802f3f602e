"""ActivatePendingAssignmentsUseCase — promote due ScheduledAssignments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.application.use_cases.binding import AssignmentBinder
from knockwise.application.use_cases.notify import AssignmentNotifier
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.notification import Notification
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.errors import NotFoundError
from knockwise.domain.value_objects.clock import NowFn, utcnow
from knockwise.domain.value_objects.enums import ScheduledStatus

logger = logging.getLogger(__name__)


@dataclass
class ActivationReport:
    """Summary of one activation sweep."""

    found: int = 0
    activated: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    # Sent by the caller once the sweep has committed
    notifications: list[Notification] = field(default_factory=list)


class ActivatePendingAssignmentsUseCase:
    """Turns every due PENDING ScheduledAssignment into an operative assignment.

    Each record is processed in its own savepoint: a failure rolls back that
    record only and the sweep moves on. Activation is idempotent per
    scheduled record (an assignment already carrying its id is reused).
    """

    def __init__(
        self,
        zone_repo: ZoneRepository,
        assignment_repo: AssignmentRepository,
        scheduled_repo: ScheduledAssignmentRepository,
        binder: AssignmentBinder,
        notifier: AssignmentNotifier,
        uow: UnitOfWork,
        now: NowFn = utcnow,
    ):
        self._zones = zone_repo
        self._assignments = assignment_repo
        self._scheduled = scheduled_repo
        self._binder = binder
        self._notifier = notifier
        self._uow = uow
        self._now = now

    async def execute(self) -> ActivationReport:
        now = self._now()
        due = await self._scheduled.claim_due(now)
        report = ActivationReport(found=len(due))
        if not due:
            logger.debug("No scheduled assignments due at %s", now.isoformat())
            return report

        logger.info("Found %d scheduled assignment(s) to activate", len(due))

        for scheduled in due:
            try:
                async with self._uow.savepoint():
                    assignment = await self._activate(scheduled)
            except Exception:
                logger.exception("Error activating scheduled assignment %s", scheduled.id)
                report.failed.append(scheduled.id)
                continue

            report.activated.append(scheduled.id)
            if assignment is not None:
                notification = await self._notifier.build_activated(assignment)
                if notification is not None:
                    report.notifications.append(notification)

        logger.info(
            "Activation sweep done: %d activated, %d failed",
            len(report.activated), len(report.failed),
        )
        return report

    async def _activate(self, scheduled: ScheduledAssignment) -> AgentZoneAssignment | None:
        """Promote one record. Returns the new assignment, or None if it already existed."""
        zone = await self._zones.get_by_id(scheduled.zone_id)
        if zone is None:
            raise NotFoundError("Zone", scheduled.zone_id)

        existing = await self._assignments.get_by_scheduled_id(scheduled.id)
        if existing is not None:
            logger.warning(
                "Scheduled assignment %s already promoted to assignment %s",
                scheduled.id, existing.id,
            )
            await self._mark_activated(scheduled)
            return None

        now = self._now()
        deactivated = await self._assignments.deactivate_open_for_zone(zone.id, now)
        if deactivated:
            await self._binder.release(deactivated)

        assignment = await self._assignments.save(
            AgentZoneAssignment(
                id=None,
                agent_id=scheduled.agent_id,
                team_id=scheduled.team_id,
                zone_id=scheduled.zone_id,
                effective_from=scheduled.effective_from,
                assigned_by=scheduled.assigned_by,
                scheduled_assignment_id=scheduled.id,
            )
        )
        await self._binder.bind(assignment, zone)
        await self._mark_activated(scheduled)

        logger.info(
            "Activated scheduled assignment %s as assignment %s for zone %s",
            scheduled.id, assignment.id, zone.name,
        )
        return assignment

    async def _mark_activated(self, scheduled: ScheduledAssignment) -> None:
        scheduled.status = ScheduledStatus.ACTIVATED
        scheduled.notification_sent = True
        await self._scheduled.update(scheduled)
