"""
Realtime Layer - Redis Streams push channel.

- redis_client:            pooled async client factory
- publishing_record_store: write-through publisher decorating the record store
- redis_stream_feed:       RealtimeFeed with per-subscription XREAD readers
"""

from community_messaging.infrastructure.realtime.redis_client import (
    create_redis_client,
    close_redis_client,
)
from community_messaging.infrastructure.realtime.publishing_record_store import (
    PublishingRecordStore,
)
from community_messaging.infrastructure.realtime.redis_stream_feed import RedisStreamFeed
from community_messaging.infrastructure.realtime.streams import stream_key

__all__ = [
    "create_redis_client",
    "close_redis_client",
    "PublishingRecordStore",
    "RedisStreamFeed",
    "stream_key",
]
