"""ScheduledAssignment entity — a future-dated binding awaiting activation."""

from dataclasses import dataclass
from datetime import datetime

from knockwise.domain.policies.assignment_rules import ensure_single_target
from knockwise.domain.value_objects.enums import ScheduledStatus


@dataclass
class ScheduledAssignment:
    id: int | None
    zone_id: int
    scheduled_date: datetime
    effective_from: datetime
    assigned_by: int
    agent_id: int | None = None
    team_id: int | None = None
    status: ScheduledStatus = ScheduledStatus.PENDING
    notification_sent: bool = False
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        ensure_single_target(self.agent_id, self.team_id)

    def is_pending(self) -> bool:
        return self.status == ScheduledStatus.PENDING

    def is_due(self, now: datetime) -> bool:
        return self.is_pending() and self.scheduled_date <= now
