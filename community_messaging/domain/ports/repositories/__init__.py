"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the domain needs
- Does NOT specify implementation (Prisma, in-memory, etc.)
"""

from community_messaging.domain.ports.repositories.record_store import RecordStore
from community_messaging.domain.ports.repositories.notification_repository import (
    NotificationRepository,
)

__all__ = [
    "RecordStore",
    "NotificationRepository",
]
