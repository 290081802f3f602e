"""Port interface for user persistence."""

from abc import ABC, abstractmethod

from knockwise.domain.entities.user import User
from knockwise.domain.value_objects.enums import ActivityStatus


class UserRepository(ABC):
    @abstractmethod
    async def save(self, user: User) -> User:
        ...

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User | None:
        ...

    @abstractmethod
    async def get_many(self, user_ids: list[int]) -> list[User]:
        ...

    @abstractmethod
    async def get_agents_created_by(self, admin_id: int) -> list[User]:
        ...

    @abstractmethod
    async def update_zone_cache(
        self,
        user_id: int,
        *,
        zone_ids: list[int] | None = None,
        primary_zone_id: int | None = None,
        clear_primary_zone: bool = False,
    ) -> None:
        """Overwrite zone_ids and/or primary_zone_id; None leaves a field untouched."""
        ...

    @abstractmethod
    async def update_teams(
        self, user_id: int, team_ids: list[int], primary_team_id: int | None
    ) -> None:
        ...

    @abstractmethod
    async def set_status(self, user_id: int, status: ActivityStatus) -> None:
        ...
