"""Tests for domain enums."""

from knockwise.domain.value_objects.enums import (
    CLOSED_ASSIGNMENT_STATUSES,
    ActivityStatus,
    AssignmentStatus,
    ScheduledStatus,
    UserRole,
    ZoneStatus,
)


def test_user_role_values():
    assert UserRole.AGENT.value == "AGENT"
    assert UserRole.SUBADMIN.value == "SUBADMIN"
    assert UserRole.SUPERADMIN.value == "SUPERADMIN"


def test_zone_statuses_count():
    assert len(ZoneStatus) == 5


def test_activity_status_is_binary():
    assert {s.value for s in ActivityStatus} == {"ACTIVE", "INACTIVE"}


def test_scheduled_status_values():
    assert [s.value for s in ScheduledStatus] == ["PENDING", "ACTIVATED", "CANCELLED"]


def test_closed_statuses():
    """INACTIVE is not closed: only COMPLETED and CANCELLED end a binding by status."""
    assert CLOSED_ASSIGNMENT_STATUSES == {AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}
    assert AssignmentStatus.INACTIVE not in CLOSED_ASSIGNMENT_STATUSES
