"""
Record Store Port - durable storage for direct messages and inquiry threads.
Implementation: infrastructure/persistence/prisma_record_store.py

Contract:
- fetch_snapshot returns a view of one conversation. A direct pair is read
  in one statement. An inquiry thread is read as the inquiry plus its two
  child tables, and a row committed between those reads can be missing;
  the realtime feed's replay window re-delivers it and the Timeline
  deduplicates.
- append is all-or-nothing and returns the stored record with the
  server-assigned id and created_at; raises SendFailedError on rejection.
- mark_read flips is_read false→true only for rows addressed to
  recipient_id and returns how many rows actually changed.
Other backend failures surface as RecordStoreError.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from community_messaging.domain.entities.drafts import Draft
from community_messaging.domain.entities.records import (
    DirectMessage,
    Inquiry,
    RawRecord,
)
from community_messaging.domain.value_objects.conversation_key import ConversationKey


class RecordStore(ABC):
    @abstractmethod
    async def fetch_snapshot(
        self, conversation_key: ConversationKey
    ) -> list[RawRecord]: ...

    @abstractmethod
    async def append(self, draft: Draft) -> RawRecord: ...

    @abstractmethod
    async def mark_read(self, record_ids: Sequence[str], recipient_id: str) -> int: ...

    @abstractmethod
    async def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]: ...

    @abstractmethod
    async def list_direct_messages(
        self, user_id: str, limit: int
    ) -> list[DirectMessage]: ...

    @abstractmethod
    async def first_direct_message(
        self, conversation_key: ConversationKey
    ) -> Optional[DirectMessage]:
        """Oldest message of a direct pair, regardless of snapshot limits."""
        ...
