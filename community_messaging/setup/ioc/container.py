"""
Dishka DI Container Setup.

Two providers:
- InfrastructureProvider (this module): Prisma, Redis, the realtime feed
  and the port implementations
- HandlerProvider (handlers.py): dispatcher and CQRS handlers

Scopes:
- APP:     Prisma client, Redis client, RedisStreamFeed (one reader task per
           open subscription, all cancelled on shutdown)
- REQUEST: stores and handlers, one per HTTP request / WebSocket connection

Wiring of the record store:

    RecordStore → PublishingRecordStore(PrismaRecordStore(prisma), redis)
"""

from typing import AsyncIterable

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from prisma import Prisma
from redis.asyncio import Redis

from community_messaging.domain.ports.realtime_feed import RealtimeFeed
from community_messaging.domain.ports.repositories import (
    NotificationRepository,
    RecordStore,
)
from community_messaging.infrastructure.persistence import (
    PrismaNotificationRepository,
    PrismaRecordStore,
)
from community_messaging.infrastructure.realtime import (
    PublishingRecordStore,
    RedisStreamFeed,
    close_redis_client,
    create_redis_client,
)
from community_messaging.setup.ioc.handlers import HandlerProvider


class InfrastructureProvider(Provider):
    # ==================== DATABASE ====================

    @provide(scope=Scope.APP)
    async def get_prisma(self) -> AsyncIterable[Prisma]:
        """Connected once at startup, disconnected when the container closes."""
        prisma = Prisma()
        await prisma.connect()
        yield prisma
        await prisma.disconnect()

    # ==================== REDIS ====================

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterable[Redis]:
        client = await create_redis_client()
        yield client
        await close_redis_client(client)

    @provide(scope=Scope.APP)
    async def get_realtime_feed(self, redis: Redis) -> AsyncIterable[RealtimeFeed]:
        feed = RedisStreamFeed(redis)
        yield feed
        await feed.aclose()

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_record_store(self, prisma: Prisma, redis: Redis) -> RecordStore:
        """
        - Return type is ABSTRACT (RecordStore)
        - Prisma is the source of truth, the decorator publishes each append
        """
        return PublishingRecordStore(PrismaRecordStore(prisma), redis)

    @provide(scope=Scope.REQUEST)
    def get_notification_repository(self, prisma: Prisma) -> NotificationRepository:
        return PrismaNotificationRepository(prisma)


def create_container() -> AsyncContainer:
    """Create the production container; call ONCE per process."""
    return make_async_container(InfrastructureProvider(), HandlerProvider())
