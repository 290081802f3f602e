"""UpdateTeamMembersUseCase — replace a team's agents and keep their caches in line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.use_cases.status_deriver import StatusDeriver
from knockwise.application.use_cases.zone_sync import ZoneIdSynchronizer
from knockwise.domain.entities.team import Team
from knockwise.domain.entities.user import User
from knockwise.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class MembershipChange:
    team: Team
    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)


class UpdateTeamMembersUseCase:
    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        synchronizer: ZoneIdSynchronizer,
        deriver: StatusDeriver,
    ):
        self._users = user_repo
        self._teams = team_repo
        self._sync = synchronizer
        self._deriver = deriver

    async def execute(self, team_id: int, agent_ids: list[int]) -> MembershipChange:
        """Replace the member set of *team_id* with *agent_ids*.

        Added agents pick up the team's zones, removed agents lose them.

        Raises:
            NotFoundError: unknown team.
            ValidationError: an id is missing or not an agent.
        """
        team = await self._teams.get_by_id(team_id)
        if team is None:
            raise NotFoundError("Team", team_id)

        wanted = list(dict.fromkeys(agent_ids))
        agents = {u.id: u for u in await self._users.get_many(wanted)}
        invalid = [i for i in wanted if i not in agents or not agents[i].is_agent()]
        if invalid:
            raise ValidationError(f"Not agents: {invalid}")

        current = set(team.agent_ids)
        added = [i for i in wanted if i not in current]
        removed = [i for i in team.agent_ids if i not in set(wanted)]

        await self._teams.set_members(team_id, wanted)
        team.agent_ids = wanted

        for agent_id in added:
            await self._join(agents[agent_id], team_id)
        if removed:
            for agent in await self._users.get_many(removed):
                await self._leave(agent, team_id)

        for agent_id in (*added, *removed):
            await self._sync.resync_agent(agent_id)
            await self._deriver.recompute_agent_status(agent_id)
        await self._deriver.recompute_team_status(team_id)

        logger.info(
            "Team %s members updated: +%d -%d",
            team.name, len(added), len(removed),
        )
        return MembershipChange(team=team, added=added, removed=removed)

    async def _join(self, agent: User, team_id: int) -> None:
        team_ids = agent.team_ids if team_id in agent.team_ids else [*agent.team_ids, team_id]
        primary = agent.primary_team_id if agent.primary_team_id is not None else team_id
        await self._users.update_teams(agent.id, team_ids, primary)

    async def _leave(self, agent: User, team_id: int) -> None:
        team_ids = [t for t in agent.team_ids if t != team_id]
        primary = agent.primary_team_id
        if primary == team_id:
            primary = team_ids[0] if team_ids else None
        await self._users.update_teams(agent.id, team_ids, primary)
