"""Prisma Notification Repository - writes to the notifications table."""

from typing import TYPE_CHECKING

from community_messaging.domain.entities.notification import NewNotification, Notification
from community_messaging.domain.ports.repositories.notification_repository import (
    NotificationRepository,
)
from community_messaging.infrastructure.persistence.row_mapper import (
    notification_from_row,
    notification_to_create_data,
)

if TYPE_CHECKING:
    from prisma import Prisma


class PrismaNotificationRepository(NotificationRepository):
    def __init__(self, prisma: "Prisma"):
        self._prisma = prisma

    async def save(self, notification: NewNotification) -> Notification:
        row = await self._prisma.notification.create(
            data=notification_to_create_data(notification)
        )
        return notification_from_row(row)
