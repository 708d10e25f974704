"""
Timeline - the merged, ordered, deduplicated view of one conversation.

Snapshot records and live-delivered records go through the same merge().
The timeline keeps an id-keyed map plus a sorted list of (created_at, id)
keys, so:
- order is total: ties on created_at are broken by id
- an id seen twice is kept once, whichever path delivered it first
- a read flag that is already True is never reset by a later copy

Malformed records and records belonging to another conversation are
dropped and logged; they never fail the rest of the batch.
"""

import logging
from bisect import insort
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Iterator, Optional

from community_messaging.domain.entities.records import RawRecord
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions.malformed_record import MalformedRecordError
from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.value_objects.conversation_key import ConversationKey

logger = logging.getLogger(__name__)


class Timeline:
    def __init__(self, conversation_key: ConversationKey):
        self._conversation_key = conversation_key
        self._entries: dict[str, ThreadEntry] = {}
        self._order: list[tuple[datetime, str]] = []
        self.dropped_count = 0

    @property
    def conversation_key(self) -> ConversationKey:
        return self._conversation_key

    @property
    def entries(self) -> tuple[ThreadEntry, ...]:
        return tuple(self._entries[entry_id] for _, entry_id in self._order)

    @property
    def latest(self) -> Optional[ThreadEntry]:
        if not self._order:
            return None
        return self._entries[self._order[-1][1]]

    def merge(self, records: Iterable[RawRecord]) -> list[ThreadEntry]:
        """
        Merge raw records into the timeline.

        Returns:
            The entries that were not already present, in timeline order.
        """
        added: list[ThreadEntry] = []
        for record in records:
            try:
                entry = normalize(record)
            except MalformedRecordError as e:
                self.dropped_count += 1
                logger.warning(
                    f"[Timeline] Dropping malformed {type(record).__name__} "
                    f"for {self._conversation_key}: {e}"
                )
                continue

            if entry.conversation_key != self._conversation_key:
                self.dropped_count += 1
                logger.warning(
                    f"[Timeline] Dropping {entry.id}: belongs to "
                    f"{entry.conversation_key}, not {self._conversation_key}"
                )
                continue

            if self._add(entry):
                added.append(entry)

        added.sort(key=lambda e: e.sort_key)
        return added

    def _add(self, entry: ThreadEntry) -> bool:
        existing = self._entries.get(entry.id)
        if existing is None:
            self._entries[entry.id] = entry
            insort(self._order, entry.sort_key)
            return True

        # Read state only moves forward
        if entry.is_read and existing.is_read is False:
            self._entries[entry.id] = replace(existing, is_read=True)
        return False

    def mark_read(self, entry_ids: Iterable[str]) -> list[ThreadEntry]:
        """Flip local read flags after the store confirmed the update."""
        changed: list[ThreadEntry] = []
        for entry_id in entry_ids:
            existing = self._entries.get(entry_id)
            if existing is None or existing.is_read is not False:
                continue
            updated = replace(existing, is_read=True)
            self._entries[entry_id] = updated
            changed.append(updated)
        return changed

    def get(self, entry_id: str) -> Optional[ThreadEntry]:
        return self._entries.get(entry_id)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __iter__(self) -> Iterator[ThreadEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)
