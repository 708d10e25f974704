"""Get Timeline Query - snapshot of one conversation, optionally marking it read."""

import logging
from dataclasses import dataclass

from community_messaging.application.common.interfaces import Query, QueryHandler
from community_messaging.application.services.access import authorize_viewer
from community_messaging.application.services.read_state_tracker import ReadStateTracker
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_dropped_records

logger = logging.getLogger(__name__)


@dataclass
class TimelineResult:
    conversation_key: ConversationKey
    entries: tuple[ThreadEntry, ...]
    marked_read: int = 0


@dataclass(frozen=True)
class GetTimelineQuery(Query[TimelineResult]):
    conversation_key: ConversationKey
    viewer_id: UserId
    mark_read: bool = True


class GetTimelineHandler(QueryHandler[TimelineResult]):
    def __init__(self, store: RecordStore):
        self._store = store
        self._tracker = ReadStateTracker(store)

    async def execute(self, query: GetTimelineQuery) -> TimelineResult:
        viewer_id = query.viewer_id.value
        await authorize_viewer(self._store, query.conversation_key, viewer_id)

        timeline = Timeline(query.conversation_key)
        timeline.merge(await self._store.fetch_snapshot(query.conversation_key))
        increment_dropped_records("snapshot", timeline.dropped_count)

        marked = 0
        if query.mark_read:
            marked = await self._tracker.mark_timeline_read(timeline, viewer_id)

        return TimelineResult(
            conversation_key=query.conversation_key,
            entries=timeline.entries,
            marked_read=marked,
        )
