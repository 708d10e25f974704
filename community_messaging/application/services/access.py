"""Participant checks shared by the timeline, read and realtime paths."""

from typing import Optional

from community_messaging.domain.entities.records import Inquiry
from community_messaging.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
)
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.value_objects.conversation_key import ConversationKey


async def load_inquiry(store: RecordStore, inquiry_id: str) -> Inquiry:
    inquiry = await store.get_inquiry(inquiry_id)
    if inquiry is None:
        raise EntityNotFoundError(f"Inquiry {inquiry_id} not found")
    return inquiry


async def authorize_viewer(
    store: RecordStore, conversation_key: ConversationKey, viewer_id: str
) -> Optional[Inquiry]:
    """
    Raise unless viewer_id takes part in the conversation.

    Returns:
        The Inquiry for inquiry conversations, None for direct ones

    Raises:
        EntityNotFoundError: Inquiry does not exist
        AccessDeniedError: Viewer is not a participant
    """
    if conversation_key.is_direct:
        if viewer_id not in conversation_key.participants:
            raise AccessDeniedError()
        return None

    inquiry = await load_inquiry(store, conversation_key.inquiry_id)
    if viewer_id not in (inquiry.inquirer_id, inquiry.company_id):
        raise AccessDeniedError()
    return inquiry
