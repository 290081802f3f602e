"""Tests for domain entities."""

from datetime import UTC, datetime, timedelta

import pytest

from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.notification import activated_notification, scheduled_notification
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment
from knockwise.domain.errors import NotFoundError, ValidationError
from knockwise.domain.value_objects.enums import (
    AssignmentStatus,
    NotificationKind,
    ScheduledStatus,
)

NOW = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)


def test_assignment_requires_single_target():
    with pytest.raises(ValidationError):
        AgentZoneAssignment(id=None, zone_id=1, effective_from=NOW, assigned_by=0)
    with pytest.raises(ValidationError):
        AgentZoneAssignment(
            id=None, zone_id=1, effective_from=NOW, assigned_by=0, agent_id=1, team_id=2
        )


def test_assignment_close():
    a = AgentZoneAssignment(id=1, zone_id=1, effective_from=NOW, assigned_by=0, agent_id=1)
    assert a.is_open()
    a.close(NOW + timedelta(hours=1))
    assert a.status == AssignmentStatus.INACTIVE
    assert a.effective_to == NOW + timedelta(hours=1)
    assert not a.is_open()


def test_inactive_without_end_date_is_still_open():
    a = AgentZoneAssignment(
        id=1, zone_id=1, effective_from=NOW, assigned_by=0, agent_id=1,
        status=AssignmentStatus.INACTIVE,
    )
    assert a.is_open()


def test_scheduled_is_due():
    s = ScheduledAssignment(
        id=1, zone_id=1, scheduled_date=NOW, effective_from=NOW, assigned_by=0, team_id=3
    )
    assert s.is_due(NOW)
    assert not s.is_due(NOW - timedelta(seconds=1))
    s.status = ScheduledStatus.ACTIVATED
    assert not s.is_due(NOW)


def test_scheduled_notification_for_team():
    n = scheduled_notification(
        recipient_ids=[1, 2], zone_id=9, zone_name="Maple Heights", scheduled_id=4,
        scheduled_date=datetime(2025, 6, 9, tzinfo=UTC), team_id=3, team_name="North Crew",
    )
    assert n.kind == NotificationKind.ASSIGNMENT_SCHEDULED
    assert n.title == "Scheduled Team Assignment"
    assert "North Crew" in n.message and "Monday, June 09, 2025" in n.message
    payload = n.to_payload()
    assert payload["recipients"] == [1, 2]
    assert payload["data"]["is_team_assignment"] is True


def test_activated_notification_for_agent():
    n = activated_notification(
        recipient_ids=[1], zone_id=9, zone_name="Maple Heights", assignment_id=12,
        effective_from=NOW,
    )
    assert n.kind == NotificationKind.ASSIGNMENT_ACTIVATED
    assert n.title == "Assignment Activated"
    assert n.to_payload()["data"]["assignment_id"] == 12


def test_not_found_error_message():
    err = NotFoundError("Zone", 42)
    assert str(err) == "Zone not found: 42"
    assert isinstance(err, LookupError)
