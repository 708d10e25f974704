"""
List Inbox Query - a viewer's direct messages grouped per counterpart.

Each group is a small Timeline, so ordering and dedup follow the same rules
as an open conversation; the newest group comes first.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from community_messaging.application.common.interfaces import Query, QueryHandler
from community_messaging.config.settings import Config
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.read_state import select_unread
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_dropped_records

logger = logging.getLogger(__name__)


@dataclass
class InboxConversation:
    counterpart_id: str
    conversation_key: ConversationKey
    latest: ThreadEntry
    unread_count: int


@dataclass(frozen=True)
class ListInboxQuery(Query[list[InboxConversation]]):
    viewer_id: UserId
    limit: Optional[int] = None


class ListInboxHandler(QueryHandler[list[InboxConversation]]):
    def __init__(self, store: RecordStore):
        self._store = store

    async def execute(self, query: ListInboxQuery) -> list[InboxConversation]:
        viewer_id = query.viewer_id.value
        limit = query.limit or Config.INBOX_MESSAGE_LIMIT
        messages = await self._store.list_direct_messages(viewer_id, limit)

        timelines: dict[ConversationKey, Timeline] = {}
        for message in messages:
            try:
                key = message.conversation_key
            except ValueError as e:
                increment_dropped_records("inbox")
                logger.warning(f"[ListInbox] Skipping malformed message {message.id}: {e}")
                continue
            timelines.setdefault(key, Timeline(key)).merge([message])

        conversations = []
        for key, timeline in timelines.items():
            increment_dropped_records("inbox", timeline.dropped_count)
            if timeline.latest is None:
                continue
            conversations.append(
                InboxConversation(
                    counterpart_id=key.counterpart_of(viewer_id),
                    conversation_key=key,
                    latest=timeline.latest,
                    unread_count=len(select_unread(timeline, viewer_id)),
                )
            )

        conversations.sort(key=lambda c: c.latest.sort_key, reverse=True)
        return conversations
