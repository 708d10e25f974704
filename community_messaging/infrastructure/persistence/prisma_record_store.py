"""
Prisma Record Store Implementation.

Implements the RecordStore port over the four conversation tables:

    model Message                    → prisma.message                    (messages)
    model ServiceInquiry             → prisma.serviceinquiry             (service_inquiries)
    model ServiceInquiryResponse     → prisma.serviceinquiryresponse     (service_inquiry_responses)
    model ServiceInquiryConversation → prisma.serviceinquiryconversation (service_inquiry_conversations)

Snapshots:
- direct:  one find_many over both directions of the pair, newest
           CONVERSATION_MESSAGE_LIMIT rows, returned oldest first
- inquiry: one find_unique with responses and follow-ups included

Ids and created_at are assigned by the database (@default(uuid()),
@default(now())), never by the caller.

Every Prisma failure is re-raised as RecordStoreError (SendFailedError for
append) with the original exception chained.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from community_messaging.config.settings import Config
from community_messaging.domain.entities.drafts import Draft
from community_messaging.domain.entities.records import (
    TABLE_FOLLOWUPS,
    TABLE_INQUIRIES,
    TABLE_MESSAGES,
    TABLE_RESPONSES,
    DirectMessage,
    Inquiry,
    RawRecord,
)
from community_messaging.domain.exceptions import (
    EntityNotFoundError,
    RecordStoreError,
    SendFailedError,
)
from community_messaging.domain.ports.repositories.record_store import RecordStore
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.infrastructure.persistence.row_mapper import (
    draft_to_create_data,
    record_from_row,
)

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)


class PrismaRecordStore(RecordStore):
    """Prisma implementation of RecordStore."""

    def __init__(self, prisma: "Prisma"):
        """
        Args:
            prisma: Connected Prisma client (injected by DI container)
        """
        self._prisma = prisma

    def _delegate(self, table: str) -> Any:
        return {
            TABLE_MESSAGES: self._prisma.message,
            TABLE_INQUIRIES: self._prisma.serviceinquiry,
            TABLE_RESPONSES: self._prisma.serviceinquiryresponse,
            TABLE_FOLLOWUPS: self._prisma.serviceinquiryconversation,
        }[table]

    async def fetch_snapshot(self, conversation_key: ConversationKey) -> list[RawRecord]:
        if conversation_key.is_direct:
            return await self._fetch_direct(conversation_key)
        return await self._fetch_inquiry(conversation_key.inquiry_id)

    async def _fetch_direct(self, conversation_key: ConversationKey) -> list[RawRecord]:
        first, second = conversation_key.participants
        try:
            rows = await self._prisma.message.find_many(
                where={
                    "OR": [
                        {"sender_id": first, "recipient_id": second},
                        {"sender_id": second, "recipient_id": first},
                    ]
                },
                order={"created_at": "desc"},
                take=Config.CONVERSATION_MESSAGE_LIMIT,
            )
        except Exception as e:
            logger.error(f"[PrismaRecordStore] Snapshot failed for {conversation_key}: {e}")
            raise RecordStoreError(f"Failed to load {conversation_key}") from e

        rows.reverse()  # Now oldest first
        return [record_from_row(TABLE_MESSAGES, row) for row in rows]

    async def _fetch_inquiry(self, inquiry_id: str) -> list[RawRecord]:
        # The engine resolves include= as separate reads outside a transaction.
        # Rows committed in between are re-delivered by the feed replay.
        try:
            row = await self._prisma.serviceinquiry.find_unique(
                where={"id": inquiry_id},
                include={"responses": True, "conversations": True},
            )
        except Exception as e:
            logger.error(f"[PrismaRecordStore] Snapshot failed for inquiry {inquiry_id}: {e}")
            raise RecordStoreError(f"Failed to load inquiry {inquiry_id}") from e

        if row is None:
            raise EntityNotFoundError(f"Inquiry {inquiry_id} not found")

        records: list[RawRecord] = [record_from_row(TABLE_INQUIRIES, row)]
        records.extend(
            record_from_row(TABLE_RESPONSES, response) for response in row.responses or []
        )
        records.extend(
            record_from_row(TABLE_FOLLOWUPS, followup)
            for followup in row.conversations or []
        )
        return records

    async def append(self, draft: Draft) -> RawRecord:
        data = draft_to_create_data(draft)
        try:
            row = await self._delegate(draft.table).create(data=data)
        except Exception as e:
            logger.error(f"[PrismaRecordStore] Insert into {draft.table} failed: {e}")
            raise SendFailedError(f"Failed to store {type(draft).__name__}") from e

        record = record_from_row(draft.table, row)
        logger.debug(f"[PrismaRecordStore] Stored {draft.table} row {record.id}")
        return record

    async def mark_read(self, record_ids: Sequence[str], recipient_id: str) -> int:
        if not record_ids:
            return 0
        try:
            count = await self._prisma.message.update_many(
                where={
                    "id": {"in": list(record_ids)},
                    "recipient_id": recipient_id,
                    "is_read": False,
                },
                data={"is_read": True},
            )
        except Exception as e:
            logger.error(f"[PrismaRecordStore] mark_read failed for {recipient_id}: {e}")
            raise RecordStoreError("Failed to mark messages read") from e
        return count

    async def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]:
        try:
            row = await self._prisma.serviceinquiry.find_unique(where={"id": inquiry_id})
        except Exception as e:
            raise RecordStoreError(f"Failed to load inquiry {inquiry_id}") from e
        return record_from_row(TABLE_INQUIRIES, row) if row else None

    async def list_direct_messages(self, user_id: str, limit: int) -> list[DirectMessage]:
        """Newest-first direct messages sent or received by user_id."""
        try:
            rows = await self._prisma.message.find_many(
                where={"OR": [{"sender_id": user_id}, {"recipient_id": user_id}]},
                order={"created_at": "desc"},
                take=limit,
            )
        except Exception as e:
            raise RecordStoreError(f"Failed to list messages for {user_id}") from e
        return [record_from_row(TABLE_MESSAGES, row) for row in rows]

    async def first_direct_message(
        self, conversation_key: ConversationKey
    ) -> Optional[DirectMessage]:
        first, second = conversation_key.participants
        try:
            row = await self._prisma.message.find_first(
                where={
                    "OR": [
                        {"sender_id": first, "recipient_id": second},
                        {"sender_id": second, "recipient_id": first},
                    ]
                },
                order=[{"created_at": "asc"}, {"id": "asc"}],
            )
        except Exception as e:
            raise RecordStoreError(f"Failed to load first message of {conversation_key}") from e
        return record_from_row(TABLE_MESSAGES, row) if row else None
