"""Status endpoints — cached vs derived status, zone sync, team members, bulk refresh."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from knockwise.application.services import AssignmentServices
from knockwise.domain.errors import NotFoundError
from knockwise.domain.value_objects.enums import ActivityStatus
from knockwise.infrastructure.api.dependencies import get_services
from knockwise.infrastructure.api.schemas import StatusChangeOut

router = APIRouter(tags=["status"])


class AgentStatusResponse(BaseModel):
    id: int
    name: str
    cached_status: ActivityStatus
    derived_status: ActivityStatus
    in_sync: bool
    primary_zone_id: int | None
    zone_ids: list[int]
    team_ids: list[int]


class TeamStatusResponse(BaseModel):
    id: int
    name: str
    cached_status: ActivityStatus
    derived_status: ActivityStatus
    in_sync: bool
    agent_ids: list[int]


class TeamMembersRequest(BaseModel):
    agent_ids: list[int]


class TeamMembersResponse(BaseModel):
    team_id: int
    agent_ids: list[int]
    added: list[int]
    removed: list[int]
    status: ActivityStatus


class RefreshStatusesRequest(BaseModel):
    admin_id: int


class RefreshStatusesResponse(BaseModel):
    agents_checked: int
    teams_checked: int
    agent_changes: list[StatusChangeOut]
    team_changes: list[StatusChangeOut]


@router.get("/users/{user_id}/status", response_model=AgentStatusResponse)
async def get_user_status(user_id: int, services: AssignmentServices = Depends(get_services)):
    """Compare the cached status with what the assignment records say."""
    user = await services.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    derived = await services.deriver.derive_agent_status(user_id)
    return AgentStatusResponse(
        id=user.id,
        name=user.name,
        cached_status=user.status,
        derived_status=derived,
        in_sync=user.status == derived,
        primary_zone_id=user.primary_zone_id,
        zone_ids=user.zone_ids,
        team_ids=user.team_ids,
    )


@router.post("/users/{user_id}/sync-zones", response_model=AgentStatusResponse)
async def sync_user_zones(user_id: int, services: AssignmentServices = Depends(get_services)):
    """Rebuild the agent's zone caches and recompute its status."""
    if await services.users.get_by_id(user_id) is None:
        raise NotFoundError("User", user_id)

    await services.synchronizer.resync_agent(user_id)
    await services.deriver.recompute_agent_status(user_id)
    await services.commit()
    return await get_user_status(user_id, services)


@router.get("/teams/{team_id}/status", response_model=TeamStatusResponse)
async def get_team_status(team_id: int, services: AssignmentServices = Depends(get_services)):
    team = await services.teams.get_by_id(team_id)
    if team is None:
        raise NotFoundError("Team", team_id)

    derived = await services.deriver.derive_team_status(team_id)
    return TeamStatusResponse(
        id=team.id,
        name=team.name,
        cached_status=team.status,
        derived_status=derived,
        in_sync=team.status == derived,
        agent_ids=team.agent_ids,
    )


@router.put("/teams/{team_id}/members", response_model=TeamMembersResponse)
async def update_team_members(
    team_id: int,
    body: TeamMembersRequest,
    services: AssignmentServices = Depends(get_services),
):
    change = await services.update_team_members.execute(team_id, body.agent_ids)
    await services.commit()

    team = await services.teams.get_by_id(team_id)
    return TeamMembersResponse(
        team_id=team_id,
        agent_ids=team.agent_ids,
        added=change.added,
        removed=change.removed,
        status=team.status,
    )


@router.post("/maintenance/refresh-statuses", response_model=RefreshStatusesResponse)
async def refresh_statuses(
    body: RefreshStatusesRequest,
    services: AssignmentServices = Depends(get_services),
):
    """Recompute cached statuses for every agent and team of one admin."""
    report = await services.refresh_statuses.execute(body.admin_id)
    await services.commit()
    return RefreshStatusesResponse(
        agents_checked=report.agents_checked,
        teams_checked=report.teams_checked,
        agent_changes=[StatusChangeOut.from_domain(c) for c in report.agent_changes],
        team_changes=[StatusChangeOut.from_domain(c) for c in report.team_changes],
    )
