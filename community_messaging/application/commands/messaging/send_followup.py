"""Send Followup Command - free-form message on an inquiry thread, either side."""

import logging
from dataclasses import dataclass

from community_messaging.application.common.interfaces import Command, CommandHandler
from community_messaging.application.services.access import load_inquiry
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from community_messaging.domain.entities.drafts import NewFollowupMessage
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
)
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.value_objects.roles import AuthorRole
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_messages_sent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendFollowupCommand(Command[ThreadEntry]):
    inquiry_id: str
    sender_id: UserId
    message: str


class SendFollowupHandler(CommandHandler[ThreadEntry]):
    def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
        self._store = store
        self._dispatcher = dispatcher

    async def execute(self, command: SendFollowupCommand) -> ThreadEntry:
        message = (command.message or "").strip()
        if not message:
            raise DomainValidationError("Message cannot be empty", field="message")

        inquiry = await load_inquiry(self._store, command.inquiry_id)
        sender_id = command.sender_id.value

        # The role comes from the inquiry, never from the client
        if sender_id == inquiry.company_id:
            role, recipient_id = AuthorRole.COMPANY, inquiry.inquirer_id
        elif inquiry.inquirer_id and sender_id == inquiry.inquirer_id:
            role, recipient_id = AuthorRole.USER, inquiry.company_id
        else:
            raise AccessDeniedError()

        record = await self._store.append(
            NewFollowupMessage(
                inquiry_id=inquiry.id,
                sender_id=sender_id,
                sender_type=role.value,
                message=message,
            )
        )
        increment_messages_sent(record.kind.value)
        logger.info(
            f"[SendFollowup] {role.value} message {record.id} on inquiry {inquiry.id}"
        )

        await self._dispatcher.dispatch(record, recipient_id)
        return normalize(record)
