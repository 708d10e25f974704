"""
ENTITIES - Records, drafts and the normalized thread entry

- records:      stored rows of both schemas (tagged union RawRecord)
- drafts:       write-side shapes without id/timestamp
- thread_entry: normalized timeline item
- notification: fan-out record
"""

from community_messaging.domain.entities.records import (
    DirectMessage,
    Inquiry,
    InquiryResponse,
    FollowupMessage,
    RawRecord,
)
from community_messaging.domain.entities.drafts import (
    NewDirectMessage,
    NewInquiry,
    NewInquiryResponse,
    NewFollowupMessage,
    Draft,
)
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.entities.notification import (
    Notification,
    NewNotification,
)

__all__ = [
    "DirectMessage",
    "Inquiry",
    "InquiryResponse",
    "FollowupMessage",
    "RawRecord",
    "NewDirectMessage",
    "NewInquiry",
    "NewInquiryResponse",
    "NewFollowupMessage",
    "Draft",
    "ThreadEntry",
    "Notification",
    "NewNotification",
]
