"""
Conversations API Router - timelines, inbox, read state and direct sends.

Thin layer: parses the path key, builds the Command/Query, maps the result
to DTOs. Domain errors are mapped to HTTP statuses by the app-level
handlers in fastapi_app.py.

Flow:
  HTTP Request → Router → Command/Query → Handler → RecordStore → Database
                                                  ↘ NotificationDispatcher
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from community_messaging.application.commands.messaging import (
    MarkConversationReadCommand,
    MarkConversationReadHandler,
    SendDirectMessageCommand,
    SendDirectMessageHandler,
)
from community_messaging.application.dto import (
    InboxConversationDTO,
    InboxDTO,
    MarkReadDTO,
    ThreadEntryDTO,
    TimelineDTO,
)
from community_messaging.application.queries.messaging import (
    GetTimelineHandler,
    GetTimelineQuery,
    ListInboxHandler,
    ListInboxQuery,
)
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST MODELS ====================


class SendDirectMessageRequest(BaseModel):
    content: str
    subject: Optional[str] = None


# ==================== HELPERS ====================


def parse_conversation_key(key: str) -> ConversationKey:
    try:
        return ConversationKey.parse(key)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e


def parse_user_id(value: str) -> UserId:
    try:
        return UserId(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid user id: {value}",
        ) from e


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=InboxDTO, status_code=status.HTTP_200_OK)
@inject
async def list_inbox(
    handler: FromDishka[ListInboxHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Direct conversations of the current user, newest first."""
    conversations = await handler.execute(ListInboxQuery(viewer_id=current_user.user_id))
    items = [
        InboxConversationDTO(
            conversation_key=str(conv.conversation_key),
            counterpart_id=conv.counterpart_id,
            latest=ThreadEntryDTO.from_entry(conv.latest),
            unread_count=conv.unread_count,
        )
        for conv in conversations
    ]
    return InboxDTO(
        conversations=items,
        total_unread=sum(item.unread_count for item in items),
    )


@router.get("/{key}", response_model=TimelineDTO, status_code=status.HTTP_200_OK)
@inject
async def get_timeline(
    key: str,
    handler: FromDishka[GetTimelineHandler],
    current_user: AuthUser = Depends(get_current_user),
    mark_read: bool = True,
):
    """
    Snapshot of one conversation, ordered by (created_at, id).

    Opening a conversation marks its unread direct messages read unless
    ?mark_read=false.
    """
    result = await handler.execute(
        GetTimelineQuery(
            conversation_key=parse_conversation_key(key),
            viewer_id=current_user.user_id,
            mark_read=mark_read,
        )
    )
    return TimelineDTO(
        conversation_key=str(result.conversation_key),
        entries=[ThreadEntryDTO.from_entry(entry) for entry in result.entries],
        marked_read=result.marked_read,
    )


@router.post("/{key}/read", response_model=MarkReadDTO, status_code=status.HTTP_200_OK)
@inject
async def mark_read(
    key: str,
    handler: FromDishka[MarkConversationReadHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    marked = await handler.execute(
        MarkConversationReadCommand(
            conversation_key=parse_conversation_key(key),
            viewer_id=current_user.user_id,
        )
    )
    return MarkReadDTO(marked=marked)


@router.post(
    "/direct/{recipient_id}/messages",
    response_model=ThreadEntryDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_direct_message(
    recipient_id: str,
    request: SendDirectMessageRequest,
    handler: FromDishka[SendDirectMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    entry = await handler.execute(
        SendDirectMessageCommand(
            sender_id=current_user.user_id,
            recipient_id=parse_user_id(recipient_id),
            content=request.content,
            subject=request.subject,
        )
    )
    return ThreadEntryDTO.from_entry(entry)
