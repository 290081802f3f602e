"""AssignmentNotifier — build scheduled/activated notices and deliver them after commit."""

from __future__ import annotations

import logging

from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.application.ports.team_repo import TeamRepository
from knockwise.application.ports.zone_repo import ZoneRepository
from knockwise.domain.entities.assignment import AgentZoneAssignment
from knockwise.domain.entities.notification import (
    Notification,
    activated_notification,
    scheduled_notification,
)
from knockwise.domain.entities.scheduled_assignment import ScheduledAssignment

logger = logging.getLogger(__name__)


class AssignmentNotifier:
    """Notification side-channel. Never raises.

    Use cases only *build* notifications while the transaction is open;
    ``deliver`` runs once the caller has committed.
    """

    def __init__(
        self,
        notifier: NotifierPort,
        zone_repo: ZoneRepository,
        team_repo: TeamRepository,
    ):
        self._notifier = notifier
        self._zones = zone_repo
        self._teams = team_repo

    async def build_scheduled(self, scheduled: ScheduledAssignment) -> Notification | None:
        try:
            zone_name, team_name, recipients = await self._resolve(
                scheduled.zone_id, scheduled.agent_id, scheduled.team_id
            )
            notification = scheduled_notification(
                recipient_ids=recipients,
                zone_id=scheduled.zone_id,
                zone_name=zone_name,
                scheduled_id=scheduled.id,
                scheduled_date=scheduled.scheduled_date,
                team_id=scheduled.team_id,
                team_name=team_name,
            )
        except Exception:
            logger.exception("Error building scheduled notification %s", scheduled.id)
            return None
        return _with_recipients(notification)

    async def build_activated(self, assignment: AgentZoneAssignment) -> Notification | None:
        try:
            zone_name, team_name, recipients = await self._resolve(
                assignment.zone_id, assignment.agent_id, assignment.team_id
            )
            notification = activated_notification(
                recipient_ids=recipients,
                zone_id=assignment.zone_id,
                zone_name=zone_name,
                assignment_id=assignment.id,
                effective_from=assignment.effective_from,
                team_id=assignment.team_id,
                team_name=team_name,
            )
        except Exception:
            logger.exception("Error building activation notification %s", assignment.id)
            return None
        return _with_recipients(notification)

    async def deliver(self, notifications: list[Notification]) -> int:
        """Send each notification; returns how many went out."""
        sent = 0
        for notification in notifications:
            try:
                await self._notifier.notify(notification)
                sent += 1
            except Exception:
                logger.exception(
                    "Error sending %s notification for zone %s",
                    notification.kind.value, notification.zone_name,
                )
        return sent

    async def _resolve(
        self, zone_id: int, agent_id: int | None, team_id: int | None
    ) -> tuple[str, str | None, list[int]]:
        zone = await self._zones.get_by_id(zone_id)
        zone_name = zone.name if zone else "Unknown Zone"

        if team_id is None:
            return zone_name, None, [agent_id]

        team = await self._teams.get_by_id(team_id)
        if team is None:
            return zone_name, None, []
        return zone_name, team.name, list(team.agent_ids)


def _with_recipients(notification: Notification) -> Notification | None:
    if not notification.recipient_ids:
        logger.info("No recipients for %s on zone %s", notification.kind.value, notification.zone_name)
        return None
    return notification
