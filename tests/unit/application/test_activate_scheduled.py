"""Tests for ActivatePendingAssignmentsUseCase with in-memory fakes."""

from __future__ import annotations

from datetime import timedelta

import pytest

from knockwise.application.use_cases.create_assignment import CreateAssignmentCommand
from knockwise.domain.value_objects.enums import (
    ActivityStatus,
    AssignmentStatus,
    NotificationKind,
    ScheduledStatus,
    ZoneStatus,
)


async def _schedule(services, clock, zone, days=7, **target):
    result = await services.create_assignment.execute(
        CreateAssignmentCommand(
            zone_id=zone.id, assigned_by=0, effective_from=clock() + timedelta(days=days), **target
        )
    )
    return result.scheduled_assignment


@pytest.mark.asyncio
async def test_nothing_due(store, services, clock):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    scheduled = await _schedule(services, clock, zone, agent_id=agent.id)

    report = await services.activate_pending.execute()

    assert report.found == 0
    assert store.scheduled[scheduled.id].status == ScheduledStatus.PENDING
    assert store.assignments == {}


@pytest.mark.asyncio
async def test_due_record_is_promoted(store, services, clock, notifier):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    scheduled = await _schedule(services, clock, zone, agent_id=agent.id)

    clock.advance(days=8)
    report = await services.activate_pending.execute()

    assert report.found == 1
    assert report.activated == [scheduled.id]
    assert report.failed == []

    promoted = [a for a in store.assignments.values() if a.zone_id == zone.id]
    assert len(promoted) == 1
    assert promoted[0].scheduled_assignment_id == scheduled.id
    assert promoted[0].status == AssignmentStatus.ACTIVE
    assert promoted[0].effective_from == scheduled.effective_from

    record = store.scheduled[scheduled.id]
    assert record.status == ScheduledStatus.ACTIVATED
    assert record.notification_sent is True

    saved = store.users[agent.id]
    assert saved.primary_zone_id == zone.id
    assert saved.zone_ids == [zone.id]
    assert saved.status == ActivityStatus.ACTIVE
    assert store.zones[zone.id].status == ZoneStatus.ACTIVE
    assert store.zones[zone.id].assigned_agent_id == agent.id

    assert notifier.sent == []
    assert [n.kind for n in report.notifications] == [NotificationKind.ASSIGNMENT_ACTIVATED]
    assert report.notifications[0].assignment_id == promoted[0].id

    await services.commit_and_notify(report.notifications)
    assert notifier.sent == report.notifications


@pytest.mark.asyncio
async def test_team_record_binds_members(store, services, clock):
    zone = store.add_zone("Maple Heights")
    a1 = store.add_agent("Ava")
    a2 = store.add_agent("Liam")
    team = store.add_team("North Crew", [a1, a2])
    await _schedule(services, clock, zone, days=1, team_id=team.id)

    clock.advance(days=1)
    await services.activate_pending.execute()

    for member in (a1, a2):
        assert store.users[member.id].primary_zone_id == zone.id
    assert store.teams[team.id].status == ActivityStatus.ACTIVE
    assert store.zones[zone.id].team_id == team.id


@pytest.mark.asyncio
async def test_running_twice_creates_one_assignment(store, services, clock):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    await _schedule(services, clock, zone, days=1, agent_id=agent.id)

    clock.advance(days=2)
    first = await services.activate_pending.execute()
    second = await services.activate_pending.execute()

    assert len(first.activated) == 1
    assert second.found == 0
    assert len(store.assignments) == 1


@pytest.mark.asyncio
async def test_already_promoted_record_is_not_duplicated(store, services, clock, notifier):
    """A crash between creating the assignment and marking ACTIVATED leaves a PENDING record."""
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    scheduled = store.add_scheduled(zone_id=zone.id, agent_id=agent.id, scheduled_date=clock())
    existing = store.add_assignment(zone_id=zone.id, agent_id=agent.id, scheduled_assignment_id=scheduled.id)

    report = await services.activate_pending.execute()

    assert report.activated == [scheduled.id]
    assert list(store.assignments) == [existing.id]
    assert store.scheduled[scheduled.id].status == ScheduledStatus.ACTIVATED
    assert report.notifications == []


@pytest.mark.asyncio
async def test_failing_record_does_not_stop_sweep(store, services, clock, uow, caplog):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    broken = store.add_scheduled(zone_id=999, agent_id=agent.id, scheduled_date=clock() - timedelta(hours=1))
    good = store.add_scheduled(zone_id=zone.id, agent_id=agent.id, scheduled_date=clock())

    report = await services.activate_pending.execute()

    assert report.found == 2
    assert report.failed == [broken.id]
    assert report.activated == [good.id]
    assert store.scheduled[broken.id].status == ScheduledStatus.PENDING
    assert store.scheduled[good.id].status == ScheduledStatus.ACTIVATED
    assert uow.rollbacks >= 1
    assert "Error activating scheduled assignment" in caplog.text


@pytest.mark.asyncio
async def test_activation_replaces_current_binding(store, services, clock):
    zone = store.add_zone("Maple Heights")
    ava = store.add_agent("Ava")
    liam = store.add_agent("Liam")
    current = store.add_assignment(zone_id=zone.id, agent_id=ava.id)
    store.users[ava.id].zone_ids = [zone.id]
    store.users[ava.id].primary_zone_id = zone.id
    store.add_scheduled(zone_id=zone.id, agent_id=liam.id, scheduled_date=clock())

    await services.activate_pending.execute()

    closed = store.assignments[current.id]
    assert closed.status == AssignmentStatus.INACTIVE
    assert closed.effective_to == clock()
    assert store.users[ava.id].zone_ids == []
    assert store.users[ava.id].primary_zone_id is None
    assert store.users[liam.id].primary_zone_id == zone.id


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_activation(store, services, clock, notifier):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    scheduled = store.add_scheduled(zone_id=zone.id, agent_id=agent.id, scheduled_date=clock())
    notifier.fail = True

    report = await services.activate_pending.execute()

    assert report.activated == [scheduled.id]
    assert store.scheduled[scheduled.id].status == ScheduledStatus.ACTIVATED

    await services.commit_and_notify(report.notifications)
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_no_activation_notice_when_commit_fails(store, services, clock, notifier):
    zone = store.add_zone("Maple Heights")
    agent = store.add_agent("Ava")
    store.add_scheduled(zone_id=zone.id, agent_id=agent.id, scheduled_date=clock())

    async def failing_commit():
        raise RuntimeError("connection lost")

    services.commit = failing_commit
    report = await services.activate_pending.execute()

    with pytest.raises(RuntimeError):
        await services.commit_and_notify(report.notifications)
    assert len(report.notifications) == 1
    assert notifier.sent == []
