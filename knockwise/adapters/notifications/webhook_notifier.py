"""HTTP webhook notifier — implements NotifierPort."""

from __future__ import annotations

import logging

import httpx

from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.config import settings
from knockwise.domain.entities.notification import Notification

logger = logging.getLogger(__name__)


class WebhookNotifier(NotifierPort):
    """POSTs each notification as JSON to a configured URL.

    Non-2xx responses raise ``httpx.HTTPStatusError``; callers decide whether
    that is fatal.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url or settings.notification_webhook_url
        self._timeout = timeout if timeout is not None else settings.notification_timeout_seconds
        self._transport = transport

    async def notify(self, notification: Notification) -> None:
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            response = await client.post(self._url, json=notification.to_payload())
            response.raise_for_status()
        logger.info(
            "Delivered %s to %d recipient(s) via webhook",
            notification.kind.value, len(notification.recipient_ids),
        )
