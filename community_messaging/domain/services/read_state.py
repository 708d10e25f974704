"""Unread selection for the Read-State Tracker."""

from typing import Iterable

from community_messaging.domain.entities.thread_entry import ThreadEntry


def select_unread(entries: Iterable[ThreadEntry], viewer_id: str) -> list[ThreadEntry]:
    """
    Entries addressed to the viewer that are not read yet.

    Only direct messages carry a read receipt; inquiry-thread entries are
    never selected.
    """
    return [entry for entry in entries if entry.is_unread_for(viewer_id)]
