"""Mark Conversation Read Command."""

from dataclasses import dataclass

from community_messaging.application.common.interfaces import Command, CommandHandler
from community_messaging.application.services.access import authorize_viewer
from community_messaging.application.services.read_state_tracker import ReadStateTracker
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class MarkConversationReadCommand(Command[int]):
    conversation_key: ConversationKey
    viewer_id: UserId


class MarkConversationReadHandler(CommandHandler[int]):
    def __init__(self, store: RecordStore):
        self._store = store
        self._tracker = ReadStateTracker(store)

    async def execute(self, command: MarkConversationReadCommand) -> int:
        viewer_id = command.viewer_id.value
        await authorize_viewer(self._store, command.conversation_key, viewer_id)

        timeline = Timeline(command.conversation_key)
        timeline.merge(await self._store.fetch_snapshot(command.conversation_key))
        return await self._tracker.mark_timeline_read(timeline, viewer_id)
