"""
Redis Stream Feed - RealtimeFeed over one Redis stream per conversation.

Each subscription owns a reader task:

    subscribe(key)
      ├─ TIME                       → cursor = now - FEED_REPLAY_WINDOW_MS
      └─ task: loop
            XREAD BLOCK FEED_BLOCK_MS COUNT FEED_BATCH_SIZE STREAMS conv:<key>:feed <cursor>
            → decode payload → handle.deliver(record) → cursor = entry id

Starting the cursor in the past replays rows appended while the caller's
snapshot query was in flight, so nothing falls between snapshot and
subscription. Replayed rows that the snapshot already holds are
deduplicated by the consumer's Timeline; delivery is at-least-once.

Connection errors are retried inside the reader with exponential backoff
(FEED_RECONNECT_BASE_DELAY doubling up to FEED_RECONNECT_MAX_DELAY). The
cursor survives the reconnect, so a recovered reader resumes exactly where
it stopped. Only establishing the subscription can fail the caller.
Undecodable entries are logged and skipped. A reader that still dies on an
unexpected error is logged, counted and removed from active_subscriptions.

unsubscribe() is synchronous: the handle is closed before the task is even
cancelled, so no record is delivered afterwards.
"""

import asyncio
import logging
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from community_messaging.config.settings import Config
from community_messaging.domain.exceptions import FeedSubscriptionError, MalformedRecordError
from community_messaging.domain.ports.realtime_feed import (
    OnRecord,
    RealtimeFeed,
    SubscriptionHandle,
)
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.infrastructure.persistence.row_mapper import record_from_payload
from community_messaging.infrastructure.realtime.streams import PAYLOAD_FIELD, stream_key
from community_messaging.observability.metrics import (
    MetricsErrorType,
    decrement_active_subscriptions,
    increment_active_subscriptions,
    increment_dropped_records,
    increment_error,
    increment_feed_reconnect,
)

logger = logging.getLogger(__name__)


class RedisStreamFeed(RealtimeFeed):
    def __init__(
        self,
        redis: Redis,
        block_ms: Optional[int] = None,
        batch_size: Optional[int] = None,
        replay_window_ms: Optional[int] = None,
        reconnect_base_delay: Optional[float] = None,
        reconnect_max_delay: Optional[float] = None,
    ):
        self._redis = redis
        self._block_ms = block_ms if block_ms is not None else Config.FEED_BLOCK_MS
        self._batch_size = batch_size or Config.FEED_BATCH_SIZE
        self._replay_window_ms = (
            replay_window_ms if replay_window_ms is not None else Config.FEED_REPLAY_WINDOW_MS
        )
        self._base_delay = (
            reconnect_base_delay
            if reconnect_base_delay is not None
            else Config.FEED_RECONNECT_BASE_DELAY
        )
        self._max_delay = (
            reconnect_max_delay
            if reconnect_max_delay is not None
            else Config.FEED_RECONNECT_MAX_DELAY
        )
        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def active_subscriptions(self) -> int:
        return len(self._tasks)

    async def subscribe(
        self, conversation_key: ConversationKey, on_record: OnRecord
    ) -> SubscriptionHandle:
        stream = stream_key(conversation_key)
        try:
            seconds, microseconds = await self._redis.time()
        except (RedisError, OSError) as e:
            logger.error(f"[RedisStreamFeed] Cannot subscribe to {stream}: {e}")
            increment_error(MetricsErrorType.SUBSCRIBE_FAILED)
            raise FeedSubscriptionError(f"Cannot subscribe to {conversation_key}") from e

        now_ms = int(seconds) * 1000 + int(microseconds) // 1000
        cursor = f"{max(now_ms - self._replay_window_ms, 0)}-0"

        handle = SubscriptionHandle(conversation_key, on_record)
        task = asyncio.create_task(
            self._read_loop(handle, stream, cursor), name=f"feed:{stream}:{handle.id}"
        )
        task.add_done_callback(lambda done: self._on_reader_done(handle, done))
        self._tasks[handle.id] = task
        increment_active_subscriptions()
        logger.debug(f"[RedisStreamFeed] Subscribed {handle!r} from {cursor}")
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        handle.close()
        task = self._tasks.pop(handle.id, None)
        if task is None:
            return
        task.cancel()
        decrement_active_subscriptions()
        logger.debug(f"[RedisStreamFeed] Unsubscribed {handle!r}")

    async def aclose(self) -> None:
        """Cancel every reader; called on application shutdown."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
            decrement_active_subscriptions()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _read_loop(self, handle: SubscriptionHandle, stream: str, cursor: str) -> None:
        delay = self._base_delay
        while not handle.closed:
            try:
                response = await self._redis.xread(
                    {stream: cursor}, count=self._batch_size, block=self._block_ms
                )
            except (RedisError, OSError) as e:
                logger.warning(
                    f"[RedisStreamFeed] Read failed on {stream}: {e}; retrying in {delay:.1f}s"
                )
                increment_feed_reconnect()
                await asyncio.sleep(delay)
                delay = min(delay * 2, self._max_delay)
                continue

            delay = self._base_delay
            for entry_id, fields in _entries(response):
                if handle.closed:
                    return
                cursor = entry_id
                self._deliver(handle, stream, entry_id, fields)

    def _on_reader_done(self, handle: SubscriptionHandle, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        # A dead reader delivers nothing more, so the subscription is over
        logger.error(
            f"[RedisStreamFeed] Reader for {handle!r} crashed", exc_info=task.exception()
        )
        increment_error(MetricsErrorType.READER_CRASHED)
        handle.close()
        if self._tasks.get(handle.id) is task:
            del self._tasks[handle.id]
            decrement_active_subscriptions()

    def _deliver(
        self, handle: SubscriptionHandle, stream: str, entry_id: str, fields: dict
    ) -> None:
        try:
            record = record_from_payload(fields.get(PAYLOAD_FIELD))
        except MalformedRecordError as e:
            logger.warning(f"[RedisStreamFeed] Skipping {stream} entry {entry_id}: {e}")
            increment_dropped_records("feed")
            return
        except Exception:
            logger.exception(f"[RedisStreamFeed] Cannot decode {stream} entry {entry_id}")
            increment_dropped_records("feed")
            return

        try:
            handle.deliver(record)
        except Exception:
            logger.exception(f"[RedisStreamFeed] Subscriber failed on {stream} entry {entry_id}")


def _entries(response: Any) -> list[tuple[str, dict]]:
    """Flatten an XREAD reply (RESP2 list or RESP3 dict) for a single stream."""
    if not response:
        return []
    streams = response.items() if isinstance(response, dict) else response
    entries = []
    for _stream, stream_entries in streams:
        entries.extend(stream_entries)
    return entries
