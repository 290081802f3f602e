"""Team entity — a group of agents led by one of them."""

from dataclasses import dataclass, field

from knockwise.domain.value_objects.enums import ActivityStatus


@dataclass
class Team:
    id: int | None
    name: str
    created_by: int
    leader_id: int
    status: ActivityStatus = ActivityStatus.INACTIVE
    agent_ids: list[int] = field(default_factory=list)
