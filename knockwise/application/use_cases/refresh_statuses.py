"""RefreshStatusesUseCase — recompute cached statuses for one admin's agents and teams."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.use_cases.status_deriver import StatusChange, StatusDeriver

logger = logging.getLogger(__name__)


@dataclass
class RefreshReport:
    agents_checked: int = 0
    teams_checked: int = 0
    agent_changes: list[StatusChange] = field(default_factory=list)
    team_changes: list[StatusChange] = field(default_factory=list)


class RefreshStatusesUseCase:
    def __init__(
        self,
        user_repo: UserRepository,
        team_repo: TeamRepository,
        deriver: StatusDeriver,
    ):
        self._users = user_repo
        self._teams = team_repo
        self._deriver = deriver

    async def execute(self, admin_id: int) -> RefreshReport:
        """Recompute every agent created by *admin_id* and every team holding one of them."""
        agents = await self._users.get_agents_created_by(admin_id)
        agent_ids = {a.id for a in agents}

        report = RefreshReport(agents_checked=len(agents))
        for agent in agents:
            change = await self._deriver.recompute_agent_status(agent.id)
            if change is not None:
                report.agent_changes.append(change)

        team_ids: dict[int, None] = {}
        for team in await self._teams.get_created_by(admin_id):
            team_ids.setdefault(team.id, None)
        for agent in agents:
            for team_id in agent.team_ids:
                team_ids.setdefault(team_id, None)

        for team_id in team_ids:
            team = await self._teams.get_by_id(team_id)
            if team is None or not agent_ids.intersection(team.agent_ids):
                continue
            report.teams_checked += 1
            change = await self._deriver.recompute_team_status(team_id)
            if change is not None:
                report.team_changes.append(change)

        logger.info(
            "Status refresh for admin %d: %d/%d agents, %d/%d teams changed",
            admin_id,
            len(report.agent_changes), report.agents_checked,
            len(report.team_changes), report.teams_checked,
        )
        return report
