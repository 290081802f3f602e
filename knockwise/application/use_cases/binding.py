"""AssignmentBinder — cache and zone side effects shared by every assignment mutation."""

from __future__ import annotations

import logging

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.application.use_cases.best_effort import best_effort
from knockwise.application.use_cases.status_deriver import StatusDeriver
from knockwise.application.use_cases.zone_sync import ZoneIdSynchronizer
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.zone import Zone
from knockwise.domain.value_objects.enums import ZoneStatus

logger = logging.getLogger(__name__)


class AssignmentBinder:
    """Keeps zones, User caches and derived statuses in line with assignment records.

    The assignment records are the source of truth; everything written here
    is a projection of them and is refreshed best-effort.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        zone_repo: ZoneRepository,
        assignment_repo: AssignmentRepository,
        scheduled_repo: ScheduledAssignmentRepository,
        synchronizer: ZoneIdSynchronizer,
        deriver: StatusDeriver,
        uow: UnitOfWork,
    ):
        self._users = user_repo
        self._teams = team_repo
        self._zones = zone_repo
        self._assignments = assignment_repo
        self._scheduled = scheduled_repo
        self._sync = synchronizer
        self._deriver = deriver
        self._uow = uow

    async def bind(self, assignment: AgentZoneAssignment, zone: Zone) -> list[int]:
        """Apply a freshly created operative assignment.

        Stamps the zone, makes the zone every target agent's primary zone
        (newest assignment always wins), syncs zone_ids and recomputes
        statuses. Returns the affected agent ids.
        """
        if zone.status in (ZoneStatus.DRAFT, ZoneStatus.SCHEDULED):
            zone.status = ZoneStatus.ACTIVE
        if assignment.is_team_assignment():
            zone.team_id = assignment.team_id
            zone.assigned_agent_id = None
        else:
            zone.assigned_agent_id = assignment.agent_id
            zone.team_id = None
        await self._zones.update(zone)

        members = await self.members_of(assignment.agent_id, assignment.team_id)
        for agent_id in members:
            await best_effort(
                self._uow,
                f"Primary zone update for agent {agent_id}",
                lambda agent_id=agent_id: self._users.update_zone_cache(
                    agent_id, primary_zone_id=zone.id
                ),
            )
            await self._sync.sync_agent_zone_ids(agent_id)
            await self._deriver.recompute_agent_status(agent_id)

        if assignment.team_id is not None:
            await self._deriver.recompute_team_status(assignment.team_id)

        logger.info(
            "Zone %s bound to %s (%d agents)",
            zone.name, _target_label(assignment), len(members),
        )
        return members

    async def release(self, closed: list[AgentZoneAssignment]) -> list[int]:
        """Refresh caches of everyone who lost a binding through *closed*."""
        affected: dict[int, None] = {}
        team_ids: dict[int, None] = {}
        for assignment in closed:
            for agent_id in await self.members_of(assignment.agent_id, assignment.team_id):
                affected.setdefault(agent_id, None)
            if assignment.team_id is not None:
                team_ids.setdefault(assignment.team_id, None)

        for agent_id in affected:
            await self._sync.resync_agent(agent_id)
            await self._deriver.recompute_agent_status(agent_id)
        for team_id in team_ids:
            await self._deriver.recompute_team_status(team_id)
        return list(affected)

    async def refresh_statuses(
        self, records: list[AgentZoneAssignment | ScheduledAssignment]
    ) -> None:
        """Recompute statuses of the targets of *records* (scheduling, cancellation)."""
        seen_agents: set[int] = set()
        seen_teams: set[int] = set()
        for record in records:
            for agent_id in await self.members_of(record.agent_id, record.team_id):
                if agent_id not in seen_agents:
                    seen_agents.add(agent_id)
                    await self._deriver.recompute_agent_status(agent_id)
            if record.team_id is not None and record.team_id not in seen_teams:
                seen_teams.add(record.team_id)
                await self._deriver.recompute_team_status(record.team_id)

    async def settle_zone(self, zone_id: int) -> Zone | None:
        """Reset a zone to DRAFT once nothing is open or pending for it."""
        zone = await self._zones.get_by_id(zone_id)
        if zone is None:
            return None
        if await self._assignments.get_open_for_zone(zone_id):
            return zone
        if await self._scheduled.get_pending_for_zone(zone_id):
            return zone

        if zone.status in (ZoneStatus.ACTIVE, ZoneStatus.SCHEDULED):
            zone.status = ZoneStatus.DRAFT
        zone.assigned_agent_id = None
        zone.team_id = None
        await self._zones.update(zone)
        logger.info("Zone %s has no bindings left, status %s", zone.name, zone.status.value)
        return zone

    async def members_of(self, agent_id: int | None, team_id: int | None) -> list[int]:
        if team_id is None:
            return [agent_id] if agent_id is not None else []
        team = await self._teams.get_by_id(team_id)
        return list(team.agent_ids) if team else []


def _target_label(record: AgentZoneAssignment | ScheduledAssignment) -> str:
    if record.team_id is not None:
        return f"team {record.team_id}"
    return f"agent {record.agent_id}"
