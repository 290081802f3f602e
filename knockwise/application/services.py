"""Composition of the assignment use cases over one set of ports."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.application.use_cases.activate_scheduled import (
    ActivatePendingAssignmentsUseCase,
)
from knockwise.application.use_cases.binding import AssignmentBinder
from knockwise.application.use_cases.create_assignment import CreateAssignmentUseCase
from knockwise.application.use_cases.manage_assignments import (
    CancelScheduledAssignmentUseCase,
    DeleteAssignmentUseCase,
    EndAssignmentUseCase,
)
from knockwise.application.use_cases.notify import AssignmentNotifier
from knockwise.application.use_cases.refresh_statuses import RefreshStatusesUseCase
from knockwise.application.use_cases.status_deriver import StatusDeriver
from knockwise.application.use_cases.team_membership import UpdateTeamMembersUseCase
from knockwise.application.use_cases.zone_sync import ZoneIdSynchronizer
from knockwise.domain.entities.notification import Notification
from knockwise.domain.value_objects.clock import NowFn, utcnow


async def _no_commit() -> None:
    return None


@dataclass
class AssignmentServices:
    """Everything one request (or one activation sweep) needs, bound to one transaction."""

    users: UserRepository
    teams: TeamRepository
    zones: ZoneRepository
    assignments: AssignmentRepository
    scheduled: ScheduledAssignmentRepository
    deriver: StatusDeriver
    synchronizer: ZoneIdSynchronizer
    create_assignment: CreateAssignmentUseCase
    end_assignment: EndAssignmentUseCase
    delete_assignment: DeleteAssignmentUseCase
    cancel_scheduled: CancelScheduledAssignmentUseCase
    activate_pending: ActivatePendingAssignmentsUseCase
    update_team_members: UpdateTeamMembersUseCase
    refresh_statuses: RefreshStatusesUseCase
    notifier: AssignmentNotifier
    commit: Callable[[], Awaitable[None]] = _no_commit

    async def commit_and_notify(self, notifications: list[Notification]) -> None:
        """Commit, then deliver *notifications*. Nothing is sent if the commit fails."""
        await self.commit()
        if notifications:
            await self.notifier.deliver(notifications)


def wire_services(
    *,
    users: UserRepository,
    teams: TeamRepository,
    zones: ZoneRepository,
    assignments: AssignmentRepository,
    scheduled: ScheduledAssignmentRepository,
    notifier: NotifierPort,
    uow: UnitOfWork,
    commit: Callable[[], Awaitable[None]] = _no_commit,
    now: NowFn = utcnow,
) -> AssignmentServices:
    deriver = StatusDeriver(users, teams, assignments, scheduled, uow)
    synchronizer = ZoneIdSynchronizer(users, assignments, uow)
    binder = AssignmentBinder(
        users, teams, zones, assignments, scheduled, synchronizer, deriver, uow
    )
    assignment_notifier = AssignmentNotifier(notifier, zones, teams)
    end_assignment = EndAssignmentUseCase(assignments, binder, now=now)

    return AssignmentServices(
        users=users,
        teams=teams,
        zones=zones,
        assignments=assignments,
        scheduled=scheduled,
        deriver=deriver,
        synchronizer=synchronizer,
        create_assignment=CreateAssignmentUseCase(
            users, teams, zones, assignments, scheduled, binder, assignment_notifier, now=now
        ),
        end_assignment=end_assignment,
        delete_assignment=DeleteAssignmentUseCase(assignments, end_assignment),
        cancel_scheduled=CancelScheduledAssignmentUseCase(scheduled, binder),
        activate_pending=ActivatePendingAssignmentsUseCase(
            zones, assignments, scheduled, binder, assignment_notifier, uow, now=now
        ),
        update_team_members=UpdateTeamMembersUseCase(users, teams, synchronizer, deriver),
        refresh_statuses=RefreshStatusesUseCase(users, teams, deriver),
        notifier=assignment_notifier,
        commit=commit,
    )
