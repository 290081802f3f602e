"""Pytest configuration, in-memory fakes and shared fixtures."""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

import pytest

from knockwise.application.ports.assignment_repo import AssignmentRepository
from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.application.ports.scheduled_assignment_repo import (
    ScheduledAssignmentRepository,
)
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.unit_of_work import UnitOfWork
from knockwise.application.ports.user_repo import UserRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.application.services import AssignmentServices, wire_services
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.team import Team
from knockwise.domain.entities.user import User
from knockwise.domain.entities.zone import Zone
from knockwise.domain.value_objects.enums import (
    AssignmentStatus,
    ScheduledStatus,
    UserRole,
)

NOW = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)


# ─── Clock ──────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


# ─── In-memory store ────────────────────────────────────────────────


class InMemoryStore:
    """Tables as dicts. Repositories hand out copies, like a real session would."""

    def __init__(self):
        self.users: dict[int, User] = {}
        self.teams: dict[int, Team] = {}
        self.zones: dict[int, Zone] = {}
        self.assignments: dict[int, AgentZoneAssignment] = {}
        self.scheduled: dict[int, ScheduledAssignment] = {}
        self._next_id = 0
        # Default assigner and creator for the builders below
        self.users[0] = User(
            id=0, name="Root Admin", email="root@example.com", role=UserRole.SUPERADMIN
        )

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def snapshot(self) -> tuple:
        return copy.deepcopy(
            (self.users, self.teams, self.zones, self.assignments, self.scheduled)
        )

    def restore(self, snapshot: tuple) -> None:
        self.users, self.teams, self.zones, self.assignments, self.scheduled = snapshot

    # Builders used by the tests

    def add_admin(self, name: str = "Admin") -> User:
        return self._add_user(name, UserRole.SUBADMIN, created_by=None)

    def add_agent(self, name: str, created_by: int | None = None, **fields) -> User:
        return self._add_user(name, UserRole.AGENT, created_by=created_by, **fields)

    def add_team(self, name: str, members: list[User], created_by: int = 0) -> Team:
        team = Team(
            id=self.next_id(),
            name=name,
            created_by=created_by,
            leader_id=members[0].id if members else 0,
            agent_ids=[m.id for m in members],
        )
        self.teams[team.id] = team
        for member in members:
            user = self.users[member.id]
            user.team_ids.append(team.id)
            if user.primary_team_id is None:
                user.primary_team_id = team.id
        return copy.deepcopy(team)

    def add_zone(self, name: str, created_by: int = 0, **fields) -> Zone:
        zone = Zone(id=self.next_id(), name=name, created_by=created_by, **fields)
        self.zones[zone.id] = zone
        return copy.deepcopy(zone)

    def add_assignment(self, **fields) -> AgentZoneAssignment:
        fields.setdefault("effective_from", NOW - timedelta(days=1))
        fields.setdefault("assigned_by", 0)
        assignment = AgentZoneAssignment(id=self.next_id(), **fields)
        self.assignments[assignment.id] = assignment
        return copy.deepcopy(assignment)

    def add_scheduled(self, **fields) -> ScheduledAssignment:
        fields.setdefault("assigned_by", 0)
        fields.setdefault("effective_from", fields["scheduled_date"])
        scheduled = ScheduledAssignment(id=self.next_id(), **fields)
        self.scheduled[scheduled.id] = scheduled
        return copy.deepcopy(scheduled)

    def _add_user(self, name, role, created_by, **fields) -> User:
        user = User(
            id=self.next_id(),
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            role=role,
            created_by=created_by,
            **fields,
        )
        self.users[user.id] = user
        return copy.deepcopy(user)


# ─── Fake ports ─────────────────────────────────────────────────────


class FakeUserRepo(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store
        self.fail_zone_cache = False

    async def save(self, user):
        user.id = self._store.next_id()
        self._store.users[user.id] = copy.deepcopy(user)
        return user

    async def get_by_id(self, user_id):
        user = self._store.users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_many(self, user_ids):
        return [copy.deepcopy(self._store.users[i]) for i in sorted(set(user_ids)) if i in self._store.users]

    async def get_agents_created_by(self, admin_id):
        return [
            copy.deepcopy(u) for u in self._store.users.values()
            if u.created_by == admin_id and u.role == UserRole.AGENT
        ]

    async def update_zone_cache(self, user_id, *, zone_ids=None, primary_zone_id=None, clear_primary_zone=False):
        if self.fail_zone_cache:
            raise RuntimeError("zone cache write failed")
        user = self._store.users[user_id]
        if zone_ids is not None:
            user.zone_ids = list(zone_ids)
        if clear_primary_zone:
            user.primary_zone_id = None
        elif primary_zone_id is not None:
            user.primary_zone_id = primary_zone_id

    async def update_teams(self, user_id, team_ids, primary_team_id):
        user = self._store.users[user_id]
        user.team_ids = list(team_ids)
        user.primary_team_id = primary_team_id

    async def set_status(self, user_id, status):
        self._store.users[user_id].status = status


class FakeTeamRepo(TeamRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save(self, team):
        team.id = self._store.next_id()
        self._store.teams[team.id] = copy.deepcopy(team)
        return team

    async def get_by_id(self, team_id):
        team = self._store.teams.get(team_id)
        return copy.deepcopy(team) if team else None

    async def get_created_by(self, admin_id):
        return [copy.deepcopy(t) for t in self._store.teams.values() if t.created_by == admin_id]

    async def set_members(self, team_id, agent_ids):
        self._store.teams[team_id].agent_ids = list(agent_ids)

    async def set_status(self, team_id, status):
        self._store.teams[team_id].status = status


class FakeZoneRepo(ZoneRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save(self, zone):
        zone.id = self._store.next_id()
        self._store.zones[zone.id] = copy.deepcopy(zone)
        return zone

    async def get_by_id(self, zone_id):
        zone = self._store.zones.get(zone_id)
        return copy.deepcopy(zone) if zone else None

    async def update(self, zone):
        self._store.zones[zone.id] = copy.deepcopy(zone)
        return zone


def _targets(record, agent_id, team_ids) -> bool:
    return record.agent_id == agent_id or (record.team_id is not None and record.team_id in team_ids)


class FakeAssignmentRepo(AssignmentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _all(self):
        return sorted(self._store.assignments.values(), key=lambda a: (a.effective_from, a.id))

    async def save(self, assignment):
        duplicate = assignment.scheduled_assignment_id is not None and any(
            a.scheduled_assignment_id == assignment.scheduled_assignment_id
            for a in self._store.assignments.values()
        )
        if duplicate:
            raise RuntimeError("unique violation: scheduled_assignment_id")
        assignment.id = self._store.next_id()
        self._store.assignments[assignment.id] = copy.deepcopy(assignment)
        return assignment

    async def get_by_id(self, assignment_id):
        a = self._store.assignments.get(assignment_id)
        return copy.deepcopy(a) if a else None

    async def get_by_scheduled_id(self, scheduled_id):
        for a in self._store.assignments.values():
            if a.scheduled_assignment_id == scheduled_id:
                return copy.deepcopy(a)
        return None

    async def find(self, *, zone_id=None, agent_id=None, team_id=None, status=None, limit=200):
        rows = [
            a for a in reversed(self._all())
            if (zone_id is None or a.zone_id == zone_id)
            and (agent_id is None or a.agent_id == agent_id)
            and (team_id is None or a.team_id == team_id)
            and (status is None or a.status == status)
        ]
        return copy.deepcopy(rows[:limit])

    async def get_open_for_agent(self, agent_id, team_ids):
        return copy.deepcopy([a for a in self._all() if a.is_open() and _targets(a, agent_id, team_ids)])

    async def get_open_for_team(self, team_id):
        return copy.deepcopy([a for a in self._all() if a.is_open() and a.team_id == team_id])

    async def get_open_for_zone(self, zone_id):
        return copy.deepcopy([a for a in self._all() if a.is_open() and a.zone_id == zone_id])

    async def deactivate_open_for_zone(self, zone_id, at):
        closed = []
        for a in self._all():
            if a.zone_id == zone_id and a.status == AssignmentStatus.ACTIVE and a.effective_to is None:
                a.close(at)
                closed.append(copy.deepcopy(a))
        return closed

    async def update(self, assignment):
        self._store.assignments[assignment.id] = copy.deepcopy(assignment)
        return assignment

    async def delete(self, assignment_id):
        self._store.assignments.pop(assignment_id, None)


class FakeScheduledRepo(ScheduledAssignmentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def _all(self):
        return sorted(self._store.scheduled.values(), key=lambda s: (s.scheduled_date, s.id))

    async def save(self, scheduled):
        scheduled.id = self._store.next_id()
        self._store.scheduled[scheduled.id] = copy.deepcopy(scheduled)
        return scheduled

    async def get_by_id(self, scheduled_id):
        s = self._store.scheduled.get(scheduled_id)
        return copy.deepcopy(s) if s else None

    async def find(self, *, agent_id=None, team_id=None, status=None):
        return copy.deepcopy([
            s for s in self._all()
            if (agent_id is None or s.agent_id == agent_id)
            and (team_id is None or s.team_id == team_id)
            and (status is None or s.status == status)
        ])

    async def get_pending_for_agent(self, agent_id, team_ids):
        return copy.deepcopy([s for s in self._all() if s.is_pending() and _targets(s, agent_id, team_ids)])

    async def get_pending_for_zone(self, zone_id):
        return copy.deepcopy([s for s in self._all() if s.is_pending() and s.zone_id == zone_id])

    async def claim_due(self, now):
        return copy.deepcopy([s for s in self._all() if s.is_due(now)])

    async def cancel_pending_for_zone(self, zone_id):
        cancelled = []
        for s in self._all():
            if s.zone_id == zone_id and s.is_pending():
                s.status = ScheduledStatus.CANCELLED
                cancelled.append(copy.deepcopy(s))
        return cancelled

    async def update(self, scheduled):
        self._store.scheduled[scheduled.id] = copy.deepcopy(scheduled)
        return scheduled


class FakeUnitOfWork(UnitOfWork):
    """Savepoints snapshot the store and restore it when the block raises."""

    def __init__(self, store: InMemoryStore):
        self._store = store
        self.rollbacks = 0

    @asynccontextmanager
    async def savepoint(self):
        snapshot = self._store.snapshot()
        try:
            yield
        except Exception:
            self._store.restore(snapshot)
            self.rollbacks += 1
            raise


class FakeNotifier(NotifierPort):
    def __init__(self):
        self.sent = []
        self.fail = False

    async def notify(self, notification):
        if self.fail:
            raise RuntimeError("notification channel down")
        self.sent.append(notification)


# ─── Fixtures ───────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def user_repo(store) -> FakeUserRepo:
    return FakeUserRepo(store)


@pytest.fixture
def uow(store) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def services(store, clock, notifier, user_repo, uow) -> AssignmentServices:
    return wire_services(
        users=user_repo,
        teams=FakeTeamRepo(store),
        zones=FakeZoneRepo(store),
        assignments=FakeAssignmentRepo(store),
        scheduled=FakeScheduledRepo(store),
        notifier=notifier,
        uow=uow,
        now=clock,
    )
