"""AgentZoneAssignment entity — an operative binding of an agent or team to a zone."""

from dataclasses import dataclass
from datetime import datetime

from knockwise.domain.policies.assignment_rules import ensure_single_target
from knockwise.domain.value_objects.enums import (
    CLOSED_ASSIGNMENT_STATUSES,
    AssignmentStatus,
)


@dataclass
class AgentZoneAssignment:
    id: int | None
    zone_id: int
    effective_from: datetime
    assigned_by: int
    agent_id: int | None = None
    team_id: int | None = None
    effective_to: datetime | None = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    scheduled_assignment_id: int | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        ensure_single_target(self.agent_id, self.team_id)

    def is_open(self) -> bool:
        """Still binding: not closed and no end date."""
        return self.effective_to is None and self.status not in CLOSED_ASSIGNMENT_STATUSES

    def is_team_assignment(self) -> bool:
        return self.team_id is not None

    def close(self, at: datetime, status: AssignmentStatus = AssignmentStatus.INACTIVE) -> None:
        self.status = status
        self.effective_to = at
