"""Send Direct Message Command."""

import logging
from dataclasses import dataclass
from typing import Optional

from community_messaging.application.common.interfaces import Command, CommandHandler
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from community_messaging.domain.entities.drafts import NewDirectMessage
from community_messaging.domain.entities.records import DirectMessage
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import DomainValidationError, RecordStoreError
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_messages_sent

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "New message"
REPLY_PREFIX = "Re: "


def reply_subject(first_message: Optional[DirectMessage]) -> str:
    """Subject for a message sent without one: reply to the thread's first subject."""
    first = ((first_message.subject if first_message else None) or "").strip()
    if not first:
        return DEFAULT_SUBJECT
    if first.startswith(REPLY_PREFIX):
        return first
    return REPLY_PREFIX + first


@dataclass(frozen=True)
class SendDirectMessageCommand(Command[ThreadEntry]):
    sender_id: UserId
    recipient_id: UserId
    content: str
    subject: Optional[str] = None


class SendDirectMessageHandler(CommandHandler[ThreadEntry]):
    def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
        self._store = store
        self._dispatcher = dispatcher

    async def execute(self, command: SendDirectMessageCommand) -> ThreadEntry:
        sender_id = command.sender_id.value
        recipient_id = command.recipient_id.value

        content = (command.content or "").strip()
        if not content:
            raise DomainValidationError("Message content cannot be empty", field="content")
        if sender_id == recipient_id:
            raise DomainValidationError("Cannot send a message to yourself", field="recipient_id")

        subject = (command.subject or "").strip()
        if not subject:
            subject = await self._default_subject(sender_id, recipient_id)

        record = await self._store.append(
            NewDirectMessage(
                sender_id=sender_id,
                recipient_id=recipient_id,
                subject=subject,
                content=content,
            )
        )
        increment_messages_sent(record.kind.value)
        logger.info(f"[SendDirectMessage] {record.id} stored in {record.conversation_key}")

        await self._dispatcher.dispatch(record, recipient_id)
        return normalize(record)

    async def _default_subject(self, sender_id: str, recipient_id: str) -> str:
        key = ConversationKey.direct(sender_id, recipient_id)
        try:
            first_message = await self._store.first_direct_message(key)
        except RecordStoreError as e:
            # A failed lookup never blocks the send
            logger.warning(f"[SendDirectMessage] Cannot load first subject of {key}: {e}")
            return DEFAULT_SUBJECT
        return reply_subject(first_message)
