"""Tests for StatusDerivation policy."""

from datetime import UTC, datetime, timedelta

from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.entities.user import User
from knockwise.domain.policies.status_derivation import agent_status, binds_agent, team_status
from knockwise.domain.value_objects.enums import (
    ActivityStatus,
    AssignmentStatus,
    ScheduledStatus,
    UserRole,
)

NOW = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)


def _agent(**fields) -> User:
    return User(id=1, name="Ava", email="ava@example.com", role=UserRole.AGENT, **fields)


def _assignment(**fields) -> AgentZoneAssignment:
    return AgentZoneAssignment(id=10, zone_id=100, effective_from=NOW, assigned_by=0, **fields)


def _scheduled(**fields) -> ScheduledAssignment:
    later = NOW + timedelta(days=7)
    return ScheduledAssignment(
        id=20, zone_id=100, scheduled_date=later, effective_from=later, assigned_by=0, **fields
    )


def test_no_signals_is_inactive():
    assert agent_status(_agent(), [], []) == ActivityStatus.INACTIVE


def test_missing_agent_is_inactive():
    assert agent_status(None, [_assignment(agent_id=1)], []) == ActivityStatus.INACTIVE


def test_non_agent_is_inactive_even_with_zones():
    admin = User(id=1, name="Boss", email="b@example.com", role=UserRole.SUBADMIN, zone_ids=[100])
    assert agent_status(admin, [], []) == ActivityStatus.INACTIVE


def test_zone_ids_alone_make_active():
    assert agent_status(_agent(zone_ids=[100]), [], []) == ActivityStatus.ACTIVE


def test_primary_zone_alone_makes_active():
    """OR rule: primary_zone_id without zone_ids is enough."""
    assert agent_status(_agent(primary_zone_id=100), [], []) == ActivityStatus.ACTIVE


def test_direct_open_assignment_makes_active():
    assert agent_status(_agent(), [_assignment(agent_id=1)], []) == ActivityStatus.ACTIVE


def test_team_open_assignment_makes_active():
    agent = _agent(team_ids=[5])
    assert agent_status(agent, [_assignment(team_id=5)], []) == ActivityStatus.ACTIVE


def test_closed_assignment_is_ignored():
    ended = _assignment(agent_id=1, effective_to=NOW)
    cancelled = _assignment(agent_id=1, status=AssignmentStatus.CANCELLED)
    assert agent_status(_agent(), [ended, cancelled], []) == ActivityStatus.INACTIVE


def test_pending_scheduled_makes_active():
    assert agent_status(_agent(), [], [_scheduled(agent_id=1)]) == ActivityStatus.ACTIVE


def test_cancelled_scheduled_is_ignored():
    cancelled = _scheduled(agent_id=1, status=ScheduledStatus.CANCELLED)
    assert agent_status(_agent(), [], [cancelled]) == ActivityStatus.INACTIVE


def test_other_agents_records_are_ignored():
    agent = _agent(team_ids=[5])
    records = [_assignment(agent_id=2), _assignment(team_id=6)]
    assert agent_status(agent, records, [_scheduled(agent_id=2)]) == ActivityStatus.INACTIVE


def test_binds_agent_directly_and_via_team():
    agent = _agent(team_ids=[5])
    assert binds_agent(_assignment(agent_id=1), agent)
    assert binds_agent(_scheduled(team_id=5), agent)
    assert not binds_agent(_assignment(team_id=9), agent)


def test_team_active_only_with_open_team_assignment():
    assert team_status(5, [_assignment(team_id=5)]) == ActivityStatus.ACTIVE
    assert team_status(5, [_assignment(team_id=5, effective_to=NOW)]) == ActivityStatus.INACTIVE
    assert team_status(5, [_assignment(agent_id=1)]) == ActivityStatus.INACTIVE


def test_derivation_is_repeatable():
    agent = _agent(team_ids=[5])
    records = [_assignment(team_id=5)]
    assert agent_status(agent, records, []) == agent_status(agent, records, [])
