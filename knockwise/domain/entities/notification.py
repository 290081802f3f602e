"""Notification — message sent to agents when a zone binding is scheduled or activated."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from knockwise.domain.value_objects.enums import NotificationKind


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    recipient_ids: tuple[int, ...]
    title: str
    message: str
    zone_id: int
    zone_name: str
    assignment_id: int | None
    effective_date: datetime
    team_id: int | None = None
    team_name: str | None = None

    def to_payload(self) -> dict:
        return {
            "type": self.kind.value,
            "title": self.title,
            "message": self.message,
            "recipients": list(self.recipient_ids),
            "data": {
                "zone_id": self.zone_id,
                "zone_name": self.zone_name,
                "assignment_id": self.assignment_id,
                "effective_date": self.effective_date.isoformat(),
                "is_team_assignment": self.team_id is not None,
                "team_id": self.team_id,
                "team_name": self.team_name,
            },
        }


def _format_day(value: datetime) -> str:
    return value.strftime("%A, %B %d, %Y")


def scheduled_notification(
    *,
    recipient_ids: list[int],
    zone_id: int,
    zone_name: str,
    scheduled_id: int | None,
    scheduled_date: datetime,
    team_id: int | None = None,
    team_name: str | None = None,
) -> Notification:
    if team_id is not None:
        title = "Scheduled Team Assignment"
        message = (
            f'Your team "{team_name}" is scheduled for territory {zone_name} '
            f"starting {_format_day(scheduled_date)}."
        )
    else:
        title = "Scheduled Territory Assignment"
        message = (
            f"You have been scheduled for territory {zone_name} "
            f"starting {_format_day(scheduled_date)}."
        )
    return Notification(
        kind=NotificationKind.ASSIGNMENT_SCHEDULED,
        recipient_ids=tuple(recipient_ids),
        title=title,
        message=message,
        zone_id=zone_id,
        zone_name=zone_name,
        assignment_id=scheduled_id,
        effective_date=scheduled_date,
        team_id=team_id,
        team_name=team_name,
    )


def activated_notification(
    *,
    recipient_ids: list[int],
    zone_id: int,
    zone_name: str,
    assignment_id: int | None,
    effective_from: datetime,
    team_id: int | None = None,
    team_name: str | None = None,
) -> Notification:
    if team_id is not None:
        title = "Team Territory Assignment"
        message = f'Your team "{team_name}" assignment to territory {zone_name} is now active.'
    else:
        title = "Assignment Activated"
        message = f"Your scheduled assignment to territory {zone_name} is now active."
    return Notification(
        kind=NotificationKind.ASSIGNMENT_ACTIVATED,
        recipient_ids=tuple(recipient_ids),
        title=title,
        message=message,
        zone_id=zone_id,
        zone_name=zone_name,
        assignment_id=assignment_id,
        effective_date=effective_from,
        team_id=team_id,
        team_name=team_name,
    )
