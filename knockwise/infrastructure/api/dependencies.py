"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from knockwise.adapters.notifications.log_notifier import LogNotifier
from knockwise.adapters.notifications.webhook_notifier import WebhookNotifier
from knockwise.adapters.persistence.database import get_session
from knockwise.adapters.persistence.repositories import (
    SqlAssignmentRepository,
    SqlScheduledAssignmentRepository,
    SqlTeamRepository,
    SqlUnitOfWork,
    SqlUserRepository,
    SqlZoneRepository,
)
from knockwise.application.ports.notifier_port import NotifierPort
from knockwise.application.services import AssignmentServices, wire_services
from knockwise.config import settings

logger = logging.getLogger(__name__)

# Singleton notifier (stateless)
if settings.notification_webhook_url:
    _notifier: NotifierPort = WebhookNotifier()
    logger.info("Sending assignment notifications to webhook")
else:
    _notifier = LogNotifier()


def build_sql_services(session: AsyncSession) -> AssignmentServices:
    """All use cases bound to *session*; ``commit`` commits it."""
    return wire_services(
        users=SqlUserRepository(session),
        teams=SqlTeamRepository(session),
        zones=SqlZoneRepository(session),
        assignments=SqlAssignmentRepository(session),
        scheduled=SqlScheduledAssignmentRepository(session),
        notifier=_notifier,
        uow=SqlUnitOfWork(session),
        commit=session.commit,
    )


def get_services(session: AsyncSession = Depends(get_session)) -> AssignmentServices:
    return build_sql_services(session)
