"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class UserRole(str, Enum):
    SUPERADMIN = "SUPERADMIN"
    SUBADMIN = "SUBADMIN"
    AGENT = "AGENT"


class ActivityStatus(str, Enum):
    """Derived status cached on users and teams."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ZoneStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"


class AssignmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ScheduledStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVATED = "ACTIVATED"
    CANCELLED = "CANCELLED"


class NotificationKind(str, Enum):
    ASSIGNMENT_SCHEDULED = "ASSIGNMENT_SCHEDULED"
    ASSIGNMENT_ACTIVATED = "ASSIGNMENT_ACTIVATED"


# Assignment statuses that no longer bind anyone to a zone
CLOSED_ASSIGNMENT_STATUSES = frozenset(
    {AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}
)
