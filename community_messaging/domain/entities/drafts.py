"""
Drafts - write-side shapes handed to RecordStore.append().

A draft has no id and no timestamp. The store assigns both, and the
returned record is the only source of ordering information, so a lagging
client clock can never reorder a thread.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from community_messaging.domain.entities.records import (
    TABLE_FOLLOWUPS,
    TABLE_INQUIRIES,
    TABLE_MESSAGES,
    TABLE_RESPONSES,
)
from community_messaging.domain.value_objects.conversation_key import ConversationKey


@dataclass(frozen=True)
class NewDirectMessage:
    table: ClassVar[str] = TABLE_MESSAGES

    sender_id: str
    recipient_id: str
    subject: str
    content: str

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.direct(self.sender_id, self.recipient_id)


@dataclass(frozen=True)
class NewInquiry:
    table: ClassVar[str] = TABLE_INQUIRIES

    company_id: str
    inquirer_name: str
    message: str
    inquirer_id: Optional[str] = None


@dataclass(frozen=True)
class NewInquiryResponse:
    table: ClassVar[str] = TABLE_RESPONSES

    inquiry_id: str
    company_id: str
    response_message: str

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.inquiry(self.inquiry_id)


@dataclass(frozen=True)
class NewFollowupMessage:
    table: ClassVar[str] = TABLE_FOLLOWUPS

    inquiry_id: str
    sender_id: str
    sender_type: str
    message: str

    @property
    def conversation_key(self) -> ConversationKey:
        return ConversationKey.inquiry(self.inquiry_id)


Draft = Union[NewDirectMessage, NewInquiry, NewInquiryResponse, NewFollowupMessage]
