"""Port interface for assignment notifications (email, push, webhooks...)."""

from abc import ABC, abstractmethod

from knockwise.domain.entities.notification import Notification


class NotifierPort(ABC):
    @abstractmethod
    async def notify(self, notification: Notification) -> None:
        """Deliver a notification. May raise; callers treat failures as non-fatal."""
        ...
