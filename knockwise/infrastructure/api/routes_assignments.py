"""Assignment endpoints — create, list, end, delete."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from knockwise.application.services import AssignmentServices
from knockwise.application.use_cases.create_assignment import CreateAssignmentCommand
from knockwise.domain.errors import NotFoundError
from knockwise.domain.value_objects.enums import AssignmentStatus
from knockwise.infrastructure.api.dependencies import get_services
from knockwise.infrastructure.api.schemas import AssignmentOut, ScheduledAssignmentOut

router = APIRouter(prefix="/assignments", tags=["assignments"])


class CreateAssignmentRequest(BaseModel):
    zone_id: int
    assigned_by: int
    agent_id: int | None = None
    team_id: int | None = None
    effective_from: datetime | None = None


class CreateAssignmentResponse(BaseModel):
    scheduled: bool
    assignment: AssignmentOut | None = None
    scheduled_assignment: ScheduledAssignmentOut | None = None
    deactivated_ids: list[int]
    cancelled_scheduled_ids: list[int]


@router.post("", status_code=201, response_model=CreateAssignmentResponse)
async def create_assignment(
    body: CreateAssignmentRequest,
    services: AssignmentServices = Depends(get_services),
):
    """Assign an agent or a team to a zone; future dates are scheduled."""
    result = await services.create_assignment.execute(
        CreateAssignmentCommand(
            zone_id=body.zone_id,
            assigned_by=body.assigned_by,
            agent_id=body.agent_id,
            team_id=body.team_id,
            effective_from=body.effective_from,
        )
    )
    await services.commit_and_notify(result.notifications)

    return CreateAssignmentResponse(
        scheduled=result.scheduled,
        assignment=AssignmentOut.from_domain(result.assignment) if result.assignment else None,
        scheduled_assignment=(
            ScheduledAssignmentOut.from_domain(result.scheduled_assignment)
            if result.scheduled_assignment
            else None
        ),
        deactivated_ids=result.deactivated_ids,
        cancelled_scheduled_ids=result.cancelled_scheduled_ids,
    )


@router.get("", response_model=list[AssignmentOut])
async def list_assignments(
    zone_id: int | None = None,
    agent_id: int | None = None,
    team_id: int | None = None,
    status: AssignmentStatus | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    services: AssignmentServices = Depends(get_services),
):
    """Newest first."""
    assignments = await services.assignments.find(
        zone_id=zone_id, agent_id=agent_id, team_id=team_id, status=status, limit=limit
    )
    return [AssignmentOut.from_domain(a) for a in assignments]


@router.get("/{assignment_id}", response_model=AssignmentOut)
async def get_assignment(
    assignment_id: int,
    services: AssignmentServices = Depends(get_services),
):
    assignment = await services.assignments.get_by_id(assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment", assignment_id)
    return AssignmentOut.from_domain(assignment)


@router.post("/{assignment_id}/end", response_model=AssignmentOut)
async def end_assignment(
    assignment_id: int,
    services: AssignmentServices = Depends(get_services),
):
    """Close the assignment and release its zone."""
    assignment = await services.end_assignment.execute(assignment_id)
    await services.commit()
    return AssignmentOut.from_domain(assignment)


@router.delete("/{assignment_id}", status_code=204)
async def delete_assignment(
    assignment_id: int,
    services: AssignmentServices = Depends(get_services),
):
    await services.delete_assignment.execute(assignment_id)
    await services.commit()
