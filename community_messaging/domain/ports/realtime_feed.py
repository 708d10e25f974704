"""
Realtime Feed Port - one push subscription per open conversation.
Implementation: infrastructure/realtime/redis_stream_feed.py

Delivery is at-least-once and unordered relative to the snapshot fetch;
consumers merge through a Timeline, which deduplicates by entry id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
from uuid import uuid4

from community_messaging.domain.entities.records import RawRecord
from community_messaging.domain.value_objects.conversation_key import ConversationKey

OnRecord = Callable[[RawRecord], None]


class SubscriptionHandle:
    """Scoped handle of one subscription. Closing it stops delivery at once."""

    def __init__(self, conversation_key: ConversationKey, on_record: OnRecord):
        self.id = uuid4().hex
        self.conversation_key = conversation_key
        self._on_record = on_record
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, record: RawRecord) -> bool:
        """Hand a record to the subscriber; returns False once closed."""
        if self._closed:
            return False
        self._on_record(record)
        return True

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<SubscriptionHandle {self.id} {self.conversation_key} {state}>"


class RealtimeFeed(ABC):
    @abstractmethod
    async def subscribe(
        self, conversation_key: ConversationKey, on_record: OnRecord
    ) -> SubscriptionHandle:
        """Raises FeedSubscriptionError if the subscription cannot be established."""
        ...

    @abstractmethod
    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """Synchronous and idempotent; no delivery reaches the handle afterwards."""
        ...

    @asynccontextmanager
    async def open(
        self, conversation_key: ConversationKey, on_record: OnRecord
    ) -> AsyncIterator[SubscriptionHandle]:
        handle = await self.subscribe(conversation_key, on_record)
        try:
            yield handle
        finally:
            self.unsubscribe(handle)
