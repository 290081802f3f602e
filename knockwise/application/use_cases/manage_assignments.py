"""Ending, deleting and cancelling assignments."""

from __future__ import annotations

import logging

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.use_cases.binding import AssignmentBinder
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.errors import NotFoundError, ValidationError
from knockwise.domain.value_objects.clock import NowFn, utcnow
from knockwise.domain.value_objects.enums import ScheduledStatus

logger = logging.getLogger(__name__)


class EndAssignmentUseCase:
    """Closes an assignment and releases everyone it bound."""

    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        binder: AssignmentBinder,
        now: NowFn = utcnow,
    ):
        self._assignments = assignment_repo
        self._binder = binder
        self._now = now

    async def execute(self, assignment_id: int) -> AgentZoneAssignment:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment", assignment_id)

        if assignment.is_open():
            assignment.close(self._now())
            await self._assignments.update(assignment)
            logger.info("Assignment %s ended", assignment.id)
        else:
            logger.info("Assignment %s already closed", assignment.id)

        await self._binder.release([assignment])
        await self._binder.settle_zone(assignment.zone_id)
        return assignment


class DeleteAssignmentUseCase:
    """Ends an assignment, then removes the record."""

    def __init__(self, assignment_repo: AssignmentRepository, end_use_case: EndAssignmentUseCase):
        self._assignments = assignment_repo
        self._end = end_use_case

    async def execute(self, assignment_id: int) -> None:
        assignment = await self._end.execute(assignment_id)
        await self._assignments.delete(assignment.id)
        logger.info("Assignment %s deleted", assignment.id)


class CancelScheduledAssignmentUseCase:
    def __init__(
        self,
        scheduled_repo: ScheduledAssignmentRepository,
        binder: AssignmentBinder,
    ):
        self._scheduled = scheduled_repo
        self._binder = binder

    async def execute(self, scheduled_id: int) -> ScheduledAssignment:
        """PENDING → CANCELLED.

        Raises:
            NotFoundError: no such scheduled assignment.
            ValidationError: the record is not PENDING any more.
        """
        scheduled = await self._scheduled.get_by_id(scheduled_id)
        if scheduled is None:
            raise NotFoundError("Scheduled assignment", scheduled_id)
        if not scheduled.is_pending():
            raise ValidationError(
                f"Scheduled assignment {scheduled_id} is {scheduled.status.value}, not PENDING"
            )

        scheduled.status = ScheduledStatus.CANCELLED
        await self._scheduled.update(scheduled)
        logger.info("Scheduled assignment %s cancelled", scheduled.id)

        await self._binder.refresh_statuses([scheduled])
        await self._binder.settle_zone(scheduled.zone_id)
        return scheduled
