"""Scheduled-assignment endpoints — list, cancel, activate now."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from knockwise.application.services import AssignmentServices
from knockwise.domain.value_objects.enums import ScheduledStatus
from knockwise.infrastructure.api.dependencies import get_services
from knockwise.infrastructure.api.schemas import ScheduledAssignmentOut

router = APIRouter(prefix="/scheduled-assignments", tags=["scheduled-assignments"])


class ActivationResponse(BaseModel):
    found: int
    activated: list[int]
    failed: list[int]


@router.get("", response_model=list[ScheduledAssignmentOut])
async def list_scheduled_assignments(
    agent_id: int | None = None,
    team_id: int | None = None,
    status: ScheduledStatus | None = None,
    services: AssignmentServices = Depends(get_services),
):
    """Ordered by scheduled date."""
    records = await services.scheduled.find(agent_id=agent_id, team_id=team_id, status=status)
    return [ScheduledAssignmentOut.from_domain(s) for s in records]


@router.post("/activate", response_model=ActivationResponse)
async def activate_pending(services: AssignmentServices = Depends(get_services)):
    """Run the activation sweep now instead of waiting for the background job."""
    report = await services.activate_pending.execute()
    await services.commit_and_notify(report.notifications)
    return ActivationResponse(
        found=report.found, activated=report.activated, failed=report.failed
    )


@router.post("/{scheduled_id}/cancel", response_model=ScheduledAssignmentOut)
async def cancel_scheduled_assignment(
    scheduled_id: int,
    services: AssignmentServices = Depends(get_services),
):
    scheduled = await services.cancel_scheduled.execute(scheduled_id)
    await services.commit()
    return ScheduledAssignmentOut.from_domain(scheduled)
