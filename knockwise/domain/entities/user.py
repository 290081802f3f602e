"""User entity — an admin or a field agent."""

from dataclasses import dataclass, field

from knockwise.domain.value_objects.enums import ActivityStatus, UserRole


@dataclass
class User:
    id: int | None
    name: str
    email: str
    role: UserRole
    status: ActivityStatus = ActivityStatus.INACTIVE
    primary_team_id: int | None = None
    primary_zone_id: int | None = None
    team_ids: list[int] = field(default_factory=list)
    zone_ids: list[int] = field(default_factory=list)
    created_by: int | None = None

    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT
