"""Log-only notifier — implements NotifierPort."""

from __future__ import annotations

import logging

from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.domain.entities.notification import Notification

logger = logging.getLogger(__name__)


class LogNotifier(NotifierPort):
    """Writes notifications to the log. Used when no webhook is configured."""

    async def notify(self, notification: Notification) -> None:
        logger.info(
            "%s → users %s: %s",
            notification.kind.value,
            list(notification.recipient_ids),
            notification.message,
        )
