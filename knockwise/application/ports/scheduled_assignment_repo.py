"""Port interface for ScheduledAssignment persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.value_objects.enums import ScheduledStatus


class ScheduledAssignmentRepository(ABC):
    @abstractmethod
    async def save(self, scheduled: ScheduledAssignment) -> ScheduledAssignment:
        ...

    @abstractmethod
    async def get_by_id(self, scheduled_id: int) -> ScheduledAssignment | None:
        ...

    @abstractmethod
    async def find(
        self,
        *,
        agent_id: int | None = None,
        team_id: int | None = None,
        status: ScheduledStatus | None = None,
    ) -> list[ScheduledAssignment]:
        """Ordered by scheduled_date ascending."""
        ...

    @abstractmethod
    async def get_pending_for_agent(
        self, agent_id: int, team_ids: list[int]
    ) -> list[ScheduledAssignment]:
        ...

    @abstractmethod
    async def get_pending_for_zone(self, zone_id: int) -> list[ScheduledAssignment]:
        ...

    @abstractmethod
    async def claim_due(self, now: datetime) -> list[ScheduledAssignment]:
        """PENDING records with scheduled_date <= now.

        Implementations should lock the returned rows (SELECT ... FOR UPDATE
        SKIP LOCKED) so two sweeps never claim the same record.
        """
        ...

    @abstractmethod
    async def cancel_pending_for_zone(self, zone_id: int) -> list[ScheduledAssignment]:
        """Mark every PENDING record of the zone CANCELLED; return them."""
        ...

    @abstractmethod
    async def update(self, scheduled: ScheduledAssignment) -> ScheduledAssignment:
        """Persist status and notification_sent."""
        ...
