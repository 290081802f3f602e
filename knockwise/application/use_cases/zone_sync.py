"""ZoneIdSynchronizer — rebuild User.zone_ids from the open assignments."""

from __future__ import annotations

import logging

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.use_cases.best_effort import best_effort
from knockwise.domain.policies.zone_ids import collect_zone_ids, pick_primary_zone

logger = logging.getLogger(__name__)


class ZoneIdSynchronizer:
    def __init__(
        self,
        user_repo: UserRepository,
        assignment_repo: AssignmentRepository,
        uow: UnitOfWork,
    ):
        self._users = user_repo
        self._assignments = assignment_repo
        self._uow = uow

    async def sync_agent_zone_ids(self, agent_id: int) -> list[int] | None:
        """Overwrite zone_ids with the zones the agent is bound to, directly or via a team.

        Idempotent. Returns the new list, or None when the agent is missing
        or the sync failed (failures are logged, never raised).
        """
        return await best_effort(
            self._uow,
            f"Zone sync for agent {agent_id}",
            lambda: self._sync(agent_id),
        )

    async def resync_agent(self, agent_id: int) -> list[int] | None:
        """Sync zone_ids, then repoint primary_zone_id if its zone is no longer bound."""
        return await best_effort(
            self._uow,
            f"Zone resync for agent {agent_id}",
            lambda: self._resync(agent_id),
        )

    async def _sync(self, agent_id: int) -> list[int] | None:
        agent = await self._users.get_by_id(agent_id)
        if agent is None:
            logger.warning("Agent %d not found during zone sync", agent_id)
            return None

        open_assignments = await self._assignments.get_open_for_agent(agent_id, agent.team_ids)
        zone_ids = collect_zone_ids(open_assignments)

        if zone_ids != agent.zone_ids:
            await self._users.update_zone_cache(agent_id, zone_ids=zone_ids)
            logger.info("Synced zone_ids for agent %s: %d zones", agent.name, len(zone_ids))
        return zone_ids

    async def _resync(self, agent_id: int) -> list[int] | None:
        zone_ids = await self._sync(agent_id)
        if zone_ids is None:
            return None

        agent = await self._users.get_by_id(agent_id)
        primary = pick_primary_zone(agent.primary_zone_id, zone_ids)
        if primary != agent.primary_zone_id:
            await self._users.update_zone_cache(
                agent_id, primary_zone_id=primary, clear_primary_zone=primary is None
            )
            logger.info("Primary zone for agent %s moved to %s", agent.name, primary)
        return zone_ids
