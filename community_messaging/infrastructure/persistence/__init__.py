"""
Persistence Layer - Database implementations.

Contains Prisma implementations of the record store and notification
ports, plus the row mapper shared with the realtime stream.
"""

from community_messaging.infrastructure.persistence.prisma_record_store import (
    PrismaRecordStore,
)
from community_messaging.infrastructure.persistence.prisma_notification_repository import (
    PrismaNotificationRepository,
)

__all__ = [
    "PrismaRecordStore",
    "PrismaNotificationRepository",
]
