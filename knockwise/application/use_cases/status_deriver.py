"""StatusDeriver — ACTIVE/INACTIVE for agents and teams from assignment records."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.use_cases.best_effort import best_effort
from knockwise.domain.policies.status_derivation import agent_status, team_status
from knockwise.domain.value_objects.enums import ActivityStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusChange:
    """A cached status that was rewritten by a recompute."""

    entity_id: int
    name: str
    old_status: ActivityStatus
    new_status: ActivityStatus


class StatusDeriver:
    """Single implementation of the agent/team status rules.

    ``derive_*`` are pure reads. ``recompute_*`` persist the cached status
    when it differs and never raise.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        assignment_repo: AssignmentRepository,
        scheduled_repo: ScheduledAssignmentRepository,
        uow: UnitOfWork,
    ):
        self._users = user_repo
        self._teams = team_repo
        self._assignments = assignment_repo
        self._scheduled = scheduled_repo
        self._uow = uow

    async def derive_agent_status(self, agent_id: int) -> ActivityStatus:
        agent = await self._users.get_by_id(agent_id)
        if agent is None or not agent.is_agent():
            return ActivityStatus.INACTIVE

        # Cheap cache signals first; the record queries only run when needed
        if agent.zone_ids or agent.primary_zone_id is not None:
            return ActivityStatus.ACTIVE

        open_assignments = await self._assignments.get_open_for_agent(agent.id, agent.team_ids)
        if open_assignments:
            return agent_status(agent, open_assignments, [])

        pending = await self._scheduled.get_pending_for_agent(agent.id, agent.team_ids)
        return agent_status(agent, [], pending)

    async def derive_team_status(self, team_id: int) -> ActivityStatus:
        open_assignments = await self._assignments.get_open_for_team(team_id)
        return team_status(team_id, open_assignments)

    async def recompute_agent_status(self, agent_id: int) -> StatusChange | None:
        return await best_effort(
            self._uow,
            f"Status recompute for agent {agent_id}",
            lambda: self._recompute_agent(agent_id),
        )

    async def recompute_team_status(self, team_id: int) -> StatusChange | None:
        return await best_effort(
            self._uow,
            f"Status recompute for team {team_id}",
            lambda: self._recompute_team(team_id),
        )

    async def _recompute_agent(self, agent_id: int) -> StatusChange | None:
        agent = await self._users.get_by_id(agent_id)
        if agent is None or not agent.is_agent():
            return None

        new_status = await self.derive_agent_status(agent_id)
        if new_status == agent.status:
            return None

        await self._users.set_status(agent_id, new_status)
        logger.info(
            "Agent %s (%d) status updated %s -> %s",
            agent.name, agent_id, agent.status.value, new_status.value,
        )
        return StatusChange(agent_id, agent.name, agent.status, new_status)

    async def _recompute_team(self, team_id: int) -> StatusChange | None:
        team = await self._teams.get_by_id(team_id)
        if team is None:
            return None

        new_status = await self.derive_team_status(team_id)
        if new_status == team.status:
            return None

        await self._teams.set_status(team_id, new_status)
        logger.info(
            "Team %s (%d) status updated %s -> %s",
            team.name, team_id, team.status.value, new_status.value,
        )
        return StatusChange(team_id, team.name, team.status, new_status)
