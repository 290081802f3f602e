"""Response schemas shared by the routers."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from knockwise.application.use_cases.status_deriver import StatusChange
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.value_objects.enums import (
    ActivityStatus,
    AssignmentStatus,
    ScheduledStatus,
)


class AssignmentOut(BaseModel):
    id: int
    zone_id: int
    agent_id: int | None
    team_id: int | None
    effective_from: datetime
    effective_to: datetime | None
    status: AssignmentStatus
    assigned_by: int
    scheduled_assignment_id: int | None

    @classmethod
    def from_domain(cls, a: AgentZoneAssignment) -> AssignmentOut:
        return cls(
            id=a.id,
            zone_id=a.zone_id,
            agent_id=a.agent_id,
            team_id=a.team_id,
            effective_from=a.effective_from,
            effective_to=a.effective_to,
            status=a.status,
            assigned_by=a.assigned_by,
            scheduled_assignment_id=a.scheduled_assignment_id,
        )


class ScheduledAssignmentOut(BaseModel):
    id: int
    zone_id: int
    agent_id: int | None
    team_id: int | None
    scheduled_date: datetime
    effective_from: datetime
    status: ScheduledStatus
    assigned_by: int
    notification_sent: bool

    @classmethod
    def from_domain(cls, s: ScheduledAssignment) -> ScheduledAssignmentOut:
        return cls(
            id=s.id,
            zone_id=s.zone_id,
            agent_id=s.agent_id,
            team_id=s.team_id,
            scheduled_date=s.scheduled_date,
            effective_from=s.effective_from,
            status=s.status,
            assigned_by=s.assigned_by,
            notification_sent=s.notification_sent,
        )


class StatusChangeOut(BaseModel):
    id: int
    name: str
    old_status: ActivityStatus
    new_status: ActivityStatus

    @classmethod
    def from_domain(cls, c: StatusChange) -> StatusChangeOut:
        return cls(id=c.entity_id, name=c.name, old_status=c.old_status, new_status=c.new_status)
