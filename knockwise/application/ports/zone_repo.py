"""Port interface for zone persistence."""

from abc import ABC, abstractmethod

from knockwise.domain.entities.zone import Zone


class ZoneRepository(ABC):
    @abstractmethod
    async def save(self, zone: Zone) -> Zone:
        ...

    @abstractmethod
    async def get_by_id(self, zone_id: int) -> Zone | None:
        ...

    @abstractmethod
    async def update(self, zone: Zone) -> Zone:
        """Persist status / assigned_agent_id / team_id."""
        ...
