"""
Publishing Record Store - Decorator that pushes stored rows to Redis.

Architecture:
    PublishingRecordStore (decorator)
        ↓ wraps
    PrismaRecordStore (source of truth)
        ↓ implements
    RecordStore (abstract interface)

Write-through: the wrapped append must succeed first; the returned record
(with its server-assigned id and created_at) is then added to the
conversation's stream:

    XADD conv:<key>:feed MAXLEN ~ FEED_STREAM_MAXLEN * payload <json>
    EXPIRE conv:<key>:feed FEED_STREAM_TTL

Publishing is best-effort. A failed publish is logged and counted but never
fails the send; subscribers still see the row on their next snapshot.
Reads and mark_read are delegated untouched.
"""

import logging
from typing import Optional, Sequence

from redis.asyncio import Redis

from community_messaging.config.settings import Config
from community_messaging.domain.entities.drafts import Draft
from community_messaging.domain.entities.records import DirectMessage, Inquiry, RawRecord
from community_messaging.domain.ports.repositories.record_store import RecordStore
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.infrastructure.persistence.row_mapper import record_to_payload
from community_messaging.infrastructure.realtime.streams import PAYLOAD_FIELD, stream_key
from community_messaging.observability.metrics import MetricsErrorType, increment_error

logger = logging.getLogger(__name__)


class PublishingRecordStore(RecordStore):
    def __init__(self, store: RecordStore, redis: Redis):
        """
        Args:
            store: Underlying RecordStore (e.g., PrismaRecordStore)
            redis: Async Redis client
        """
        self._store = store
        self._redis = redis

    async def fetch_snapshot(self, conversation_key: ConversationKey) -> list[RawRecord]:
        return await self._store.fetch_snapshot(conversation_key)

    async def append(self, draft: Draft) -> RawRecord:
        # 1. Store first (source of truth)
        record = await self._store.append(draft)

        # 2. Publish (best effort)
        await self.publish(record)
        return record

    async def publish(self, record: RawRecord) -> bool:
        stream = stream_key(record.conversation_key)
        try:
            await self._redis.xadd(
                stream,
                {PAYLOAD_FIELD: record_to_payload(record)},
                maxlen=Config.FEED_STREAM_MAXLEN,
                approximate=True,
            )
            await self._redis.expire(stream, Config.FEED_STREAM_TTL)
        except Exception as e:
            logger.warning(f"Redis publish error for {stream}: {str(e)}")
            increment_error(MetricsErrorType.PUBLISH_FAILED)
            return False

        logger.debug(f"Published {record.table} row {record.id} to {stream}")
        return True

    async def mark_read(self, record_ids: Sequence[str], recipient_id: str) -> int:
        return await self._store.mark_read(record_ids, recipient_id)

    async def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]:
        return await self._store.get_inquiry(inquiry_id)

    async def list_direct_messages(self, user_id: str, limit: int) -> list[DirectMessage]:
        return await self._store.list_direct_messages(user_id, limit)

    async def first_direct_message(
        self, conversation_key: ConversationKey
    ) -> Optional[DirectMessage]:
        return await self._store.first_direct_message(conversation_key)
