"""
Read-State Tracker - marks a timeline's unread entries for one viewer.

One batched store call per run, none when there is nothing to mark. The
store only flips rows that are still unread, so overlapping or concurrent
runs (two tabs, a live push racing a refresh) are harmless and each row is
counted once.
"""

import logging

from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.read_state import select_unread
from community_messaging.domain.services.timeline import Timeline

logger = logging.getLogger(__name__)


class ReadStateTracker:
    def __init__(self, store: RecordStore):
        self._store = store

    async def mark_timeline_read(self, timeline: Timeline, viewer_id: str) -> int:
        """
        Returns:
            Number of rows the store actually flipped to read
        """
        unread = select_unread(timeline.entries, viewer_id)
        if not unread:
            return 0

        count = await self._store.mark_read(
            [entry.record_id for entry in unread], viewer_id
        )
        timeline.mark_read(entry.id for entry in unread)
        logger.debug(
            f"[ReadStateTracker] {count}/{len(unread)} entries marked read "
            f"in {timeline.conversation_key}"
        )
        return count
