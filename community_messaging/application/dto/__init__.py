"""Data Transfer Objects for the HTTP and WebSocket surfaces."""

from community_messaging.application.dto.conversation import (
    ThreadEntryDTO,
    TimelineDTO,
    InboxConversationDTO,
    InboxDTO,
    MarkReadDTO,
)

__all__ = [
    "ThreadEntryDTO",
    "TimelineDTO",
    "InboxConversationDTO",
    "InboxDTO",
    "MarkReadDTO",
]
