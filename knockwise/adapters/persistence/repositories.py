"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from knockwise.adapters.persistence.models import (
    AgentZoneAssignmentModel,
    ScheduledAssignmentModel,
    TeamModel,
    UserModel,
    ZoneModel,
)
from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.team import Team
from knockwise.domain.entities.user import User
from knockwise.domain.entities.zone import Zone
from knockwise.domain.value_objects.clock import ensure_aware
from knockwise.domain.value_objects.enums import (
    CLOSED_ASSIGNMENT_STATUSES,
    ActivityStatus,
    AssignmentStatus,
    ScheduledStatus,
    UserRole,
    ZoneStatus,
)
from knockwise.domain.value_objects.geo_polygon import GeoPolygon

# ─── Mappers ─────────────────────────────────────────────────────────


def _user_to_domain(m: UserModel) -> User:
    return User(
        id=m.id,
        name=m.name,
        email=m.email,
        role=UserRole(m.role),
        status=ActivityStatus(m.status),
        primary_team_id=m.primary_team_id,
        primary_zone_id=m.primary_zone_id,
        team_ids=list(m.team_ids or []),
        zone_ids=list(m.zone_ids or []),
        created_by=m.created_by,
    )


def _team_to_domain(m: TeamModel) -> Team:
    return Team(
        id=m.id,
        name=m.name,
        created_by=m.created_by,
        leader_id=m.leader_id,
        status=ActivityStatus(m.status),
        agent_ids=list(m.agent_ids or []),
    )


def _zone_to_domain(m: ZoneModel) -> Zone:
    return Zone(
        id=m.id,
        name=m.name,
        created_by=m.created_by,
        boundary=GeoPolygon.from_geojson(m.boundary) if m.boundary else None,
        status=ZoneStatus(m.status),
        assigned_agent_id=m.assigned_agent_id,
        team_id=m.team_id,
    )


def _assignment_to_domain(m: AgentZoneAssignmentModel) -> AgentZoneAssignment:
    return AgentZoneAssignment(
        id=m.id,
        agent_id=m.agent_id,
        team_id=m.team_id,
        zone_id=m.zone_id,
        effective_from=ensure_aware(m.effective_from),
        effective_to=ensure_aware(m.effective_to) if m.effective_to else None,
        status=AssignmentStatus(m.status),
        assigned_by=m.assigned_by,
        scheduled_assignment_id=m.scheduled_assignment_id,
        created_at=m.created_at,
    )


def _scheduled_to_domain(m: ScheduledAssignmentModel) -> ScheduledAssignment:
    return ScheduledAssignment(
        id=m.id,
        agent_id=m.agent_id,
        team_id=m.team_id,
        zone_id=m.zone_id,
        scheduled_date=ensure_aware(m.scheduled_date),
        effective_from=ensure_aware(m.effective_from),
        status=ScheduledStatus(m.status),
        assigned_by=m.assigned_by,
        notification_sent=m.notification_sent,
        created_at=m.created_at,
    )


def _is_open():
    """SQL form of AgentZoneAssignment.is_open()."""
    return (
        AgentZoneAssignmentModel.effective_to.is_(None)
        & AgentZoneAssignmentModel.status.not_in([s.value for s in CLOSED_ASSIGNMENT_STATUSES])
    )


def _targets(model, agent_id: int, team_ids: list[int]):
    if team_ids:
        return or_(model.agent_id == agent_id, model.team_id.in_(team_ids))
    return model.agent_id == agent_id


# ─── Repositories ────────────────────────────────────────────────────


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, user: User) -> User:
        m = UserModel(
            name=user.name,
            email=user.email,
            role=user.role.value,
            status=user.status.value,
            primary_team_id=user.primary_team_id,
            primary_zone_id=user.primary_zone_id,
            team_ids=list(user.team_ids),
            zone_ids=list(user.zone_ids),
            created_by=user.created_by,
        )
        self._s.add(m)
        await self._s.flush()
        user.id = m.id
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        m = await self._s.get(UserModel, user_id, populate_existing=True)
        return _user_to_domain(m) if m else None

    async def get_many(self, user_ids: list[int]) -> list[User]:
        if not user_ids:
            return []
        result = await self._s.execute(
            select(UserModel).where(UserModel.id.in_(user_ids)).order_by(UserModel.id)
        )
        return [_user_to_domain(m) for m in result.scalars()]

    async def get_agents_created_by(self, admin_id: int) -> list[User]:
        result = await self._s.execute(
            select(UserModel)
            .where(UserModel.created_by == admin_id, UserModel.role == UserRole.AGENT.value)
            .order_by(UserModel.id)
        )
        return [_user_to_domain(m) for m in result.scalars()]

    async def update_zone_cache(
        self,
        user_id: int,
        *,
        zone_ids: list[int] | None = None,
        primary_zone_id: int | None = None,
        clear_primary_zone: bool = False,
    ) -> None:
        values: dict = {}
        if zone_ids is not None:
            values["zone_ids"] = list(zone_ids)
        if clear_primary_zone:
            values["primary_zone_id"] = None
        elif primary_zone_id is not None:
            values["primary_zone_id"] = primary_zone_id
        if not values:
            return
        await self._s.execute(update(UserModel).where(UserModel.id == user_id).values(**values))
        await self._s.flush()

    async def update_teams(
        self, user_id: int, team_ids: list[int], primary_team_id: int | None
    ) -> None:
        await self._s.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(team_ids=list(team_ids), primary_team_id=primary_team_id)
        )
        await self._s.flush()

    async def set_status(self, user_id: int, status: ActivityStatus) -> None:
        await self._s.execute(
            update(UserModel).where(UserModel.id == user_id).values(status=status.value)
        )
        await self._s.flush()


class SqlTeamRepository(TeamRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, team: Team) -> Team:
        m = TeamModel(
            name=team.name,
            status=team.status.value,
            created_by=team.created_by,
            leader_id=team.leader_id,
            agent_ids=list(team.agent_ids),
        )
        self._s.add(m)
        await self._s.flush()
        team.id = m.id
        return team

    async def get_by_id(self, team_id: int) -> Team | None:
        m = await self._s.get(TeamModel, team_id, populate_existing=True)
        return _team_to_domain(m) if m else None

    async def get_created_by(self, admin_id: int) -> list[Team]:
        result = await self._s.execute(
            select(TeamModel).where(TeamModel.created_by == admin_id).order_by(TeamModel.id)
        )
        return [_team_to_domain(m) for m in result.scalars()]

    async def set_members(self, team_id: int, agent_ids: list[int]) -> None:
        await self._s.execute(
            update(TeamModel).where(TeamModel.id == team_id).values(agent_ids=list(agent_ids))
        )
        await self._s.flush()

    async def set_status(self, team_id: int, status: ActivityStatus) -> None:
        await self._s.execute(
            update(TeamModel).where(TeamModel.id == team_id).values(status=status.value)
        )
        await self._s.flush()


class SqlZoneRepository(ZoneRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, zone: Zone) -> Zone:
        m = ZoneModel(
            name=zone.name,
            boundary=zone.boundary.to_geojson() if zone.boundary else None,
            status=zone.status.value,
            assigned_agent_id=zone.assigned_agent_id,
            team_id=zone.team_id,
            created_by=zone.created_by,
        )
        self._s.add(m)
        await self._s.flush()
        zone.id = m.id
        return zone

    async def get_by_id(self, zone_id: int) -> Zone | None:
        m = await self._s.get(ZoneModel, zone_id, populate_existing=True)
        return _zone_to_domain(m) if m else None

    async def update(self, zone: Zone) -> Zone:
        await self._s.execute(
            update(ZoneModel)
            .where(ZoneModel.id == zone.id)
            .values(
                status=zone.status.value,
                assigned_agent_id=zone.assigned_agent_id,
                team_id=zone.team_id,
            )
        )
        await self._s.flush()
        return zone


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, assignment: AgentZoneAssignment) -> AgentZoneAssignment:
        m = AgentZoneAssignmentModel(
            agent_id=assignment.agent_id,
            team_id=assignment.team_id,
            zone_id=assignment.zone_id,
            assigned_by=assignment.assigned_by,
            effective_from=assignment.effective_from,
            effective_to=assignment.effective_to,
            status=assignment.status.value,
            scheduled_assignment_id=assignment.scheduled_assignment_id,
        )
        self._s.add(m)
        await self._s.flush()
        assignment.id = m.id
        return assignment

    async def get_by_id(self, assignment_id: int) -> AgentZoneAssignment | None:
        m = await self._s.get(AgentZoneAssignmentModel, assignment_id, populate_existing=True)
        return _assignment_to_domain(m) if m else None

    async def get_by_scheduled_id(self, scheduled_id: int) -> AgentZoneAssignment | None:
        result = await self._s.execute(
            select(AgentZoneAssignmentModel).where(
                AgentZoneAssignmentModel.scheduled_assignment_id == scheduled_id
            )
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def find(
        self,
        *,
        zone_id: int | None = None,
        agent_id: int | None = None,
        team_id: int | None = None,
        status: AssignmentStatus | None = None,
        limit: int = 200,
    ) -> list[AgentZoneAssignment]:
        stmt = select(AgentZoneAssignmentModel)
        if zone_id is not None:
            stmt = stmt.where(AgentZoneAssignmentModel.zone_id == zone_id)
        if agent_id is not None:
            stmt = stmt.where(AgentZoneAssignmentModel.agent_id == agent_id)
        if team_id is not None:
            stmt = stmt.where(AgentZoneAssignmentModel.team_id == team_id)
        if status is not None:
            stmt = stmt.where(AgentZoneAssignmentModel.status == status.value)
        stmt = stmt.order_by(
            AgentZoneAssignmentModel.effective_from.desc(), AgentZoneAssignmentModel.id.desc()
        ).limit(limit)
        result = await self._s.execute(stmt)
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def get_open_for_agent(
        self, agent_id: int, team_ids: list[int]
    ) -> list[AgentZoneAssignment]:
        result = await self._s.execute(
            select(AgentZoneAssignmentModel)
            .where(_is_open(), _targets(AgentZoneAssignmentModel, agent_id, team_ids))
            .order_by(AgentZoneAssignmentModel.effective_from, AgentZoneAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def get_open_for_team(self, team_id: int) -> list[AgentZoneAssignment]:
        result = await self._s.execute(
            select(AgentZoneAssignmentModel)
            .where(_is_open(), AgentZoneAssignmentModel.team_id == team_id)
            .order_by(AgentZoneAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def get_open_for_zone(self, zone_id: int) -> list[AgentZoneAssignment]:
        result = await self._s.execute(
            select(AgentZoneAssignmentModel)
            .where(_is_open(), AgentZoneAssignmentModel.zone_id == zone_id)
            .order_by(AgentZoneAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def deactivate_open_for_zone(
        self, zone_id: int, at: datetime
    ) -> list[AgentZoneAssignment]:
        result = await self._s.execute(
            select(AgentZoneAssignmentModel)
            .where(
                AgentZoneAssignmentModel.zone_id == zone_id,
                AgentZoneAssignmentModel.status == AssignmentStatus.ACTIVE.value,
                AgentZoneAssignmentModel.effective_to.is_(None),
            )
            .order_by(AgentZoneAssignmentModel.id)
            .with_for_update()
        )
        closed = []
        for m in result.scalars():
            m.status = AssignmentStatus.INACTIVE.value
            m.effective_to = at
            closed.append(m)
        await self._s.flush()
        return [_assignment_to_domain(m) for m in closed]

    async def update(self, assignment: AgentZoneAssignment) -> AgentZoneAssignment:
        await self._s.execute(
            update(AgentZoneAssignmentModel)
            .where(AgentZoneAssignmentModel.id == assignment.id)
            .values(status=assignment.status.value, effective_to=assignment.effective_to)
        )
        await self._s.flush()
        return assignment

    async def delete(self, assignment_id: int) -> None:
        await self._s.execute(
            delete(AgentZoneAssignmentModel).where(AgentZoneAssignmentModel.id == assignment_id)
        )
        await self._s.flush()


class SqlScheduledAssignmentRepository(ScheduledAssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, scheduled: ScheduledAssignment) -> ScheduledAssignment:
        m = ScheduledAssignmentModel(
            agent_id=scheduled.agent_id,
            team_id=scheduled.team_id,
            zone_id=scheduled.zone_id,
            assigned_by=scheduled.assigned_by,
            scheduled_date=scheduled.scheduled_date,
            effective_from=scheduled.effective_from,
            status=scheduled.status.value,
            notification_sent=scheduled.notification_sent,
        )
        self._s.add(m)
        await self._s.flush()
        scheduled.id = m.id
        return scheduled

    async def get_by_id(self, scheduled_id: int) -> ScheduledAssignment | None:
        m = await self._s.get(ScheduledAssignmentModel, scheduled_id, populate_existing=True)
        return _scheduled_to_domain(m) if m else None

    async def find(
        self,
        *,
        agent_id: int | None = None,
        team_id: int | None = None,
        status: ScheduledStatus | None = None,
    ) -> list[ScheduledAssignment]:
        stmt = select(ScheduledAssignmentModel)
        if agent_id is not None:
            stmt = stmt.where(ScheduledAssignmentModel.agent_id == agent_id)
        if team_id is not None:
            stmt = stmt.where(ScheduledAssignmentModel.team_id == team_id)
        if status is not None:
            stmt = stmt.where(ScheduledAssignmentModel.status == status.value)
        stmt = stmt.order_by(ScheduledAssignmentModel.scheduled_date, ScheduledAssignmentModel.id)
        result = await self._s.execute(stmt)
        return [_scheduled_to_domain(m) for m in result.scalars()]

    async def get_pending_for_agent(
        self, agent_id: int, team_ids: list[int]
    ) -> list[ScheduledAssignment]:
        result = await self._s.execute(
            select(ScheduledAssignmentModel)
            .where(
                ScheduledAssignmentModel.status == ScheduledStatus.PENDING.value,
                _targets(ScheduledAssignmentModel, agent_id, team_ids),
            )
            .order_by(ScheduledAssignmentModel.scheduled_date)
        )
        return [_scheduled_to_domain(m) for m in result.scalars()]

    async def get_pending_for_zone(self, zone_id: int) -> list[ScheduledAssignment]:
        result = await self._s.execute(
            select(ScheduledAssignmentModel)
            .where(
                ScheduledAssignmentModel.status == ScheduledStatus.PENDING.value,
                ScheduledAssignmentModel.zone_id == zone_id,
            )
            .order_by(ScheduledAssignmentModel.scheduled_date)
        )
        return [_scheduled_to_domain(m) for m in result.scalars()]

    async def claim_due(self, now: datetime) -> list[ScheduledAssignment]:
        result = await self._s.execute(
            select(ScheduledAssignmentModel)
            .where(
                ScheduledAssignmentModel.status == ScheduledStatus.PENDING.value,
                ScheduledAssignmentModel.scheduled_date <= now,
            )
            .order_by(ScheduledAssignmentModel.scheduled_date, ScheduledAssignmentModel.id)
            .with_for_update(skip_locked=True)
        )
        return [_scheduled_to_domain(m) for m in result.scalars()]

    async def cancel_pending_for_zone(self, zone_id: int) -> list[ScheduledAssignment]:
        result = await self._s.execute(
            select(ScheduledAssignmentModel)
            .where(
                ScheduledAssignmentModel.status == ScheduledStatus.PENDING.value,
                ScheduledAssignmentModel.zone_id == zone_id,
            )
            .with_for_update()
        )
        cancelled = []
        for m in result.scalars():
            m.status = ScheduledStatus.CANCELLED.value
            cancelled.append(m)
        await self._s.flush()
        return [_scheduled_to_domain(m) for m in cancelled]

    async def update(self, scheduled: ScheduledAssignment) -> ScheduledAssignment:
        await self._s.execute(
            update(ScheduledAssignmentModel)
            .where(ScheduledAssignmentModel.id == scheduled.id)
            .values(status=scheduled.status.value, notification_sent=scheduled.notification_sent)
        )
        await self._s.flush()
        return scheduled


class SqlUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self._s = session

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        async with self._s.begin_nested():
            yield
