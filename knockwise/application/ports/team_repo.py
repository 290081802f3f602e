"""Port interface for team persistence."""

from abc import ABC, abstractmethod

from knockwise.domain.entities.team import Team
from knockwise.domain.value_objects.enums import ActivityStatus


class TeamRepository(ABC):
    @abstractmethod
    async def save(self, team: Team) -> Team:
        ...

    @abstractmethod
    async def get_by_id(self, team_id: int) -> Team | None:
        ...

    @abstractmethod
    async def get_created_by(self, admin_id: int) -> list[Team]:
        ...

    @abstractmethod
    async def set_members(self, team_id: int, agent_ids: list[int]) -> None:
        ...

    @abstractmethod
    async def set_status(self, team_id: int, status: ActivityStatus) -> None:
        ...
