"""
ThreadEntry Entity - one normalized, kind-tagged item of a timeline.

Produced only by domain.services.normalizer. Ordering within a conversation
is the total order on sort_key = (created_at, id).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.roles import AuthorRole, EntryKind


@dataclass(frozen=True)
class ThreadEntry:
    id: str
    conversation_key: ConversationKey
    kind: EntryKind
    author_id: Optional[str]
    author_role: AuthorRole
    body: str
    created_at: datetime
    record_id: str
    # Direct messages only
    recipient_id: Optional[str] = None
    is_read: Optional[bool] = None
    subject: Optional[str] = None

    @staticmethod
    def make_id(kind: EntryKind, record_id: str) -> str:
        """Entry ids are unique across all four source tables."""
        return f"{kind.value}:{record_id}"

    @property
    def sort_key(self) -> tuple[datetime, str]:
        return (self.created_at, self.id)

    def is_unread_for(self, viewer_id: str) -> bool:
        return (
            self.kind is EntryKind.DIRECT
            and self.recipient_id == viewer_id
            and self.is_read is False
        )
