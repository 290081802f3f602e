"""Port interface for AgentZoneAssignment persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.value_objects.enums import AssignmentStatus


class AssignmentRepository(ABC):
    @abstractmethod
    async def save(self, assignment: AgentZoneAssignment) -> AgentZoneAssignment:
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: int) -> AgentZoneAssignment | None:
        ...

    @abstractmethod
    async def get_by_scheduled_id(self, scheduled_id: int) -> AgentZoneAssignment | None:
        ...

    @abstractmethod
    async def find(
        self,
        *,
        zone_id: int | None = None,
        agent_id: int | None = None,
        team_id: int | None = None,
        status: AssignmentStatus | None = None,
        limit: int = 200,
    ) -> list[AgentZoneAssignment]:
        """Newest first."""
        ...

    @abstractmethod
    async def get_open_for_agent(
        self, agent_id: int, team_ids: list[int]
    ) -> list[AgentZoneAssignment]:
        """Open records with agent_id == agent OR team_id in team_ids, oldest first."""
        ...

    @abstractmethod
    async def get_open_for_team(self, team_id: int) -> list[AgentZoneAssignment]:
        ...

    @abstractmethod
    async def get_open_for_zone(self, zone_id: int) -> list[AgentZoneAssignment]:
        ...

    @abstractmethod
    async def deactivate_open_for_zone(
        self, zone_id: int, at: datetime
    ) -> list[AgentZoneAssignment]:
        """Close every open ACTIVE record of the zone; return the closed records."""
        ...

    @abstractmethod
    async def update(self, assignment: AgentZoneAssignment) -> AgentZoneAssignment:
        ...

    @abstractmethod
    async def delete(self, assignment_id: int) -> None:
        ...
