"""
Notification Repository Port - Interface for notification persistence.
Implementation: infrastructure/persistence/prisma_notification_repository.py
"""

from abc import ABC, abstractmethod

from community_messaging.domain.entities.notification import (
    NewNotification,
    Notification,
)


class NotificationRepository(ABC):
    @abstractmethod
    async def save(self, notification: NewNotification) -> Notification: ...
