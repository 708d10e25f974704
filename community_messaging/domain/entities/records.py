"""
Raw records - the stored rows of both message schemas, as a tagged union.

Direct messages live in one table keyed by (sender, recipient). An inquiry
thread is composed of three tables: the inquiry itself, structured company
responses and free-form follow-ups. Each record class carries its `kind`
and source `table` as class-level tags so consumers dispatch on the tag,
never on which fields happen to be present.

Records are immutable: the only field that ever changes after a send is
DirectMessage.is_read, and that change happens in the store, not here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional, Union

from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.roles import EntryKind

TABLE_MESSAGES = "messages"
TABLE_INQUIRIES = "service_inquiries"
TABLE_RESPONSES = "service_inquiry_responses"
TABLE_FOLLOWUPS = "service_inquiry_conversations"


@dataclass(frozen=True)
class DirectMessage:
    kind: ClassVar[EntryKind] = EntryKind.DIRECT
    table: ClassVar[str] = TABLE_MESSAGES

    id: str
    sender_id: str
    recipient_id: str
    subject: str
    content: str
    is_read: bool
    created_at: datetime

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.direct(self.sender_id, self.recipient_id)


@dataclass(frozen=True)
class Inquiry:
    kind: ClassVar[EntryKind] = EntryKind.INQUIRY
    table: ClassVar[str] = TABLE_INQUIRIES

    id: str
    inquirer_id: Optional[str]  # None for guest inquiries
    inquirer_name: str
    company_id: str
    message: str
    created_at: datetime

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.inquiry(self.id)


@dataclass(frozen=True)
class InquiryResponse:
    kind: ClassVar[EntryKind] = EntryKind.RESPONSE
    table: ClassVar[str] = TABLE_RESPONSES

    id: str
    inquiry_id: str
    company_id: str
    response_message: str
    created_at: datetime

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.inquiry(self.inquiry_id)


@dataclass(frozen=True)
class FollowupMessage:
    kind: ClassVar[EntryKind] = EntryKind.FOLLOWUP
    table: ClassVar[str] = TABLE_FOLLOWUPS

    id: str
    inquiry_id: str
    sender_id: str
    sender_type: str  # "user" | "company"
    message: str
    created_at: datetime

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.inquiry(self.inquiry_id)


RawRecord = Union[DirectMessage, Inquiry, InquiryResponse, FollowupMessage]

RECORD_TYPES: dict[str, type] = {
    TABLE_MESSAGES: DirectMessage,
    TABLE_INQUIRIES: Inquiry,
    TABLE_RESPONSES: InquiryResponse,
    TABLE_FOLLOWUPS: FollowupMessage,
}
