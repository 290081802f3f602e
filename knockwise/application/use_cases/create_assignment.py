"""CreateAssignmentUseCase — bind an agent or a team to a zone, now or later."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.application.use_cases.binding import AssignmentBinder
from knockwise.application.use_cases.notify import AssignmentNotifier
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.notification import Notification
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.zone import Zone
from knockwise.domain.errors import NotFoundError
from knockwise.domain.policies.assignment_rules import (
    ensure_single_target,
    should_schedule,
)
from knockwise.domain.value_objects.clock import NowFn, ensure_aware, utcnow
from knockwise.domain.value_objects.enums import ZoneStatus

logger = logging.getLogger(__name__)


@dataclass
class CreateAssignmentCommand:
    zone_id: int
    assigned_by: int
    agent_id: int | None = None
    team_id: int | None = None
    effective_from: datetime | None = None


@dataclass
class AssignmentResult:
    """Outcome of one creation: exactly one of the two records is set."""

    scheduled: bool
    assignment: AgentZoneAssignment | None = None
    scheduled_assignment: ScheduledAssignment | None = None
    deactivated_ids: list[int] = field(default_factory=list)
    cancelled_scheduled_ids: list[int] = field(default_factory=list)
    # Sent by the caller once the transaction has committed
    notifications: list[Notification] = field(default_factory=list)


class CreateAssignmentUseCase:
    """Creates immediate or scheduled assignments and refreshes derived state.

    The caller owns the transaction. Records are written first; cache and
    status refreshes run best-effort so a refresh failure never loses the
    assignment.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        zone_repo: ZoneRepository,
        assignment_repo: AssignmentRepository,
        scheduled_repo: ScheduledAssignmentRepository,
        binder: AssignmentBinder,
        notifier: AssignmentNotifier,
        now: NowFn = utcnow,
    ):
        self._users = user_repo
        self._teams = team_repo
        self._zones = zone_repo
        self._assignments = assignment_repo
        self._scheduled = scheduled_repo
        self._binder = binder
        self._notifier = notifier
        self._now = now

    async def execute(self, command: CreateAssignmentCommand) -> AssignmentResult:
        """Create the assignment.

        Steps:
        1. Validate target exclusivity and that zone/agent/team exist
        2. Close open assignments and cancel pending ones for the zone
        3. Future start → ScheduledAssignment, otherwise AgentZoneAssignment
        4. Refresh zone, caches, statuses; queue a notice on scheduling

        Raises:
            ValidationError: both or neither of agent/team given.
            NotFoundError: zone, assigning user, agent or team does not exist.
        """
        ensure_single_target(command.agent_id, command.team_id)
        zone = await self._require_zone(command.zone_id)
        await self._require_user(command.assigned_by)
        await self._require_target(command.agent_id, command.team_id)

        now = self._now()
        effective_from = ensure_aware(command.effective_from) if command.effective_from else None

        deactivated = await self._assignments.deactivate_open_for_zone(zone.id, now)
        cancelled = await self._scheduled.cancel_pending_for_zone(zone.id)
        if deactivated:
            logger.info(
                "Deactivated %d existing assignment(s) for zone %s",
                len(deactivated), zone.name,
            )
            await self._binder.release(deactivated)
        if cancelled:
            logger.info(
                "Cancelled %d pending scheduled assignment(s) for zone %s",
                len(cancelled), zone.name,
            )

        result = AssignmentResult(
            scheduled=False,
            deactivated_ids=[a.id for a in deactivated],
            cancelled_scheduled_ids=[s.id for s in cancelled],
        )

        if should_schedule(effective_from, now):
            result.scheduled = True
            result.scheduled_assignment = await self._schedule(
                command, zone, effective_from, released=bool(deactivated)
            )
            await self._binder.refresh_statuses([result.scheduled_assignment, *cancelled])
            notification = await self._notifier.build_scheduled(result.scheduled_assignment)
            if notification is not None:
                result.notifications.append(notification)
            return result

        assignment = await self._assignments.save(
            AgentZoneAssignment(
                id=None,
                agent_id=command.agent_id,
                team_id=command.team_id,
                zone_id=zone.id,
                effective_from=now,
                assigned_by=command.assigned_by,
            )
        )
        result.assignment = assignment
        logger.info("Assignment %s created for zone %s", assignment.id, zone.name)

        await self._binder.bind(assignment, zone)
        if cancelled:
            await self._binder.refresh_statuses(cancelled)
        return result

    async def _schedule(
        self,
        command: CreateAssignmentCommand,
        zone: Zone,
        effective_from: datetime,
        released: bool,
    ) -> ScheduledAssignment:
        scheduled = await self._scheduled.save(
            ScheduledAssignment(
                id=None,
                agent_id=command.agent_id,
                team_id=command.team_id,
                zone_id=zone.id,
                scheduled_date=effective_from,
                effective_from=effective_from,
                assigned_by=command.assigned_by,
            )
        )

        changed = False
        if zone.status == ZoneStatus.DRAFT or (released and zone.status == ZoneStatus.ACTIVE):
            zone.status = ZoneStatus.SCHEDULED
            changed = True
        if released:
            # The previous binding is gone; nobody works the zone until activation
            zone.assigned_agent_id = None
            zone.team_id = None
            changed = True
        if changed:
            await self._zones.update(zone)

        logger.info(
            "Scheduled assignment %s for zone %s on %s",
            scheduled.id, zone.name, effective_from.isoformat(),
        )
        return scheduled

    async def _require_zone(self, zone_id: int) -> Zone:
        zone = await self._zones.get_by_id(zone_id)
        if zone is None:
            raise NotFoundError("Zone", zone_id)
        return zone

    async def _require_user(self, user_id: int) -> None:
        if await self._users.get_by_id(user_id) is None:
            raise NotFoundError("User", user_id)

    async def _require_target(self, agent_id: int | None, team_id: int | None) -> None:
        if agent_id is not None:
            agent = await self._users.get_by_id(agent_id)
            if agent is None or not agent.is_agent():
                raise NotFoundError("Agent", agent_id)
            return

        team = await self._teams.get_by_id(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)
