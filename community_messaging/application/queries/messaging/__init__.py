"""Messaging queries."""

from community_messaging.application.queries.messaging.get_timeline import (
    GetTimelineQuery,
    GetTimelineHandler,
    TimelineResult,
)
from community_messaging.application.queries.messaging.list_inbox import (
    ListInboxQuery,
    ListInboxHandler,
    InboxConversation,
)

__all__ = [
    "GetTimelineQuery",
    "GetTimelineHandler",
    "TimelineResult",
    "ListInboxQuery",
    "ListInboxHandler",
    "InboxConversation",
]
