"""Conversation DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from community_messaging.domain.entities.thread_entry import ThreadEntry


class ThreadEntryDTO(BaseModel):
    """DTO for one timeline entry returned to the frontend."""

    id: str
    conversation_key: str
    kind: str
    author_id: Optional[str] = None
    author_role: str
    body: str
    created_at: datetime
    recipient_id: Optional[str] = None
    is_read: Optional[bool] = None
    subject: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: ThreadEntry) -> "ThreadEntryDTO":
        return cls(
            id=entry.id,
            conversation_key=str(entry.conversation_key),
            kind=entry.kind.value,
            author_id=entry.author_id,
            author_role=entry.author_role.value,
            body=entry.body,
            created_at=entry.created_at,
            recipient_id=entry.recipient_id,
            is_read=entry.is_read,
            subject=entry.subject,
        )


class TimelineDTO(BaseModel):
    conversation_key: str
    entries: list[ThreadEntryDTO]
    marked_read: int = 0


class InboxConversationDTO(BaseModel):
    conversation_key: str
    counterpart_id: str
    latest: ThreadEntryDTO
    unread_count: int


class InboxDTO(BaseModel):
    conversations: list[InboxConversationDTO]
    total_unread: int


class MarkReadDTO(BaseModel):
    marked: int
