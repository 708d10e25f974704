"""
Conversation Session - one viewer's open conversation.

Opening a session races two operations on purpose:

    fetch_snapshot(key) ──┐
                          ├──► Timeline (dedup by id, ordered by (created_at, id))
    feed.subscribe(key) ──┘

Records pushed before the snapshot lands are merged as they arrive; the
snapshot then adds only what is missing. Once open, every new entry is
forwarded to on_entries and unread direct messages addressed to the
viewer are marked read in the background.

Usage:
    async with ConversationSession(store, feed, key, viewer_id, on_entries=queue.put_nowait) as session:
        render(session.timeline.entries)
        ...

Leaving the block unsubscribes synchronously before anything else, so no
record reaches a dismissed timeline.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from community_messaging.application.services.read_state_tracker import ReadStateTracker
from community_messaging.domain.entities.records import RawRecord
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import RecordStoreError
from community_messaging.domain.ports.realtime_feed import RealtimeFeed, SubscriptionHandle
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.observability.metrics import (
    MetricsErrorType,
    increment_dropped_records,
    increment_error,
)

logger = logging.getLogger(__name__)

OnEntries = Callable[[list[ThreadEntry]], None]


class ConversationSession:
    def __init__(
        self,
        store: RecordStore,
        feed: RealtimeFeed,
        conversation_key: ConversationKey,
        viewer_id: str,
        on_entries: Optional[OnEntries] = None,
        mark_read: bool = True,
    ):
        self._store = store
        self._feed = feed
        self._viewer_id = viewer_id
        self._on_entries = on_entries
        self._mark_read = mark_read
        self._tracker = ReadStateTracker(store)
        self.timeline = Timeline(conversation_key)

        self._handle: Optional[SubscriptionHandle] = None
        self._opened = False
        self._closed = False
        self._mark_task: Optional[asyncio.Task] = None
        self._mark_pending = False

    @property
    def conversation_key(self) -> ConversationKey:
        return self.timeline.conversation_key

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    async def open(self) -> ConversationSession:
        """
        Fetch the snapshot and subscribe concurrently.

        Raises:
            RecordStoreError: Snapshot failed (subscription torn down)
            FeedSubscriptionError: Subscription failed
        """
        key = self.conversation_key
        snapshot, handle = await asyncio.gather(
            self._store.fetch_snapshot(key),
            self._feed.subscribe(key, self._on_record),
            return_exceptions=True,
        )
        if isinstance(handle, SubscriptionHandle):
            self._handle = handle
        if isinstance(snapshot, BaseException):
            await self.close()
            raise snapshot
        if isinstance(handle, BaseException):
            await self.close()
            raise handle

        self._merge(snapshot, source="snapshot")
        self._opened = True
        logger.info(
            f"[ConversationSession] Opened {key} for {self._viewer_id} "
            f"with {len(self.timeline)} entries"
        )

        if self._mark_read:
            await self._mark_read_once()
        return self

    async def refresh(self) -> list[ThreadEntry]:
        """Re-fetch the snapshot; only entries not yet seen are returned and forwarded."""
        records = await self._store.fetch_snapshot(self.conversation_key)
        if self._closed:
            return []
        added = self._merge(records, source="snapshot")
        self._forward(added)
        if self._mark_read and added:
            await self._mark_read_once()
        return added

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._handle is not None:
            self._feed.unsubscribe(self._handle)
            self._handle = None
        if self._mark_task is not None and not self._mark_task.done():
            await asyncio.gather(self._mark_task, return_exceptions=True)
        logger.debug(f"[ConversationSession] Closed {self.conversation_key}")

    async def __aenter__(self) -> ConversationSession:
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _merge(self, records: list[RawRecord], source: str) -> list[ThreadEntry]:
        dropped_before = self.timeline.dropped_count
        added = self.timeline.merge(records)
        increment_dropped_records(source, self.timeline.dropped_count - dropped_before)
        return added

    def _forward(self, entries: list[ThreadEntry]) -> None:
        if not entries or self._on_entries is None:
            return
        try:
            self._on_entries(entries)
        except Exception:
            logger.exception("[ConversationSession] on_entries callback failed")

    def _on_record(self, record: RawRecord) -> None:
        if self._closed:
            return
        added = self._merge([record], source="feed")
        if not added or not self._opened:
            # Pre-open pushes are part of the initial view, not a delta
            return
        self._forward(added)
        if self._mark_read and any(e.is_unread_for(self._viewer_id) for e in added):
            self._schedule_mark_read()

    def _schedule_mark_read(self) -> None:
        if self._mark_task is not None and not self._mark_task.done():
            self._mark_pending = True
            return
        self._mark_task = asyncio.create_task(self._mark_read_loop())

    async def _mark_read_loop(self) -> None:
        while True:
            self._mark_pending = False
            await self._mark_read_once()
            if not self._mark_pending or self._closed:
                return

    async def _mark_read_once(self) -> int:
        try:
            return await self._tracker.mark_timeline_read(self.timeline, self._viewer_id)
        except RecordStoreError as e:
            # Entries stay unread locally and are picked up by the next run
            logger.warning(
                f"[ConversationSession] mark_read failed for {self.conversation_key}: {e}"
            )
            increment_error(MetricsErrorType.MARK_READ_FAILED)
            return 0
