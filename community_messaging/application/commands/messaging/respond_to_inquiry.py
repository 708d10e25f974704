"""Respond To Inquiry Command - structured company response."""

import logging
from dataclasses import dataclass

from community_messaging.application.common.interfaces import Command, CommandHandler
from community_messaging.application.services.access import load_inquiry
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from community_messaging.domain.entities.drafts import NewInquiryResponse
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
)
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_messages_sent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RespondToInquiryCommand(Command[ThreadEntry]):
    inquiry_id: str
    company_id: UserId
    message: str


class RespondToInquiryHandler(CommandHandler[ThreadEntry]):
    def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
        self._store = store
        self._dispatcher = dispatcher

    async def execute(self, command: RespondToInquiryCommand) -> ThreadEntry:
        message = (command.message or "").strip()
        if not message:
            raise DomainValidationError("Response message cannot be empty", field="message")

        inquiry = await load_inquiry(self._store, command.inquiry_id)
        if inquiry.company_id != command.company_id.value:
            raise AccessDeniedError("Only the addressed company can respond to this inquiry")

        record = await self._store.append(
            NewInquiryResponse(
                inquiry_id=inquiry.id,
                company_id=inquiry.company_id,
                response_message=message,
            )
        )
        increment_messages_sent(record.kind.value)
        logger.info(f"[RespondToInquiry] Response {record.id} on inquiry {inquiry.id}")

        await self._dispatcher.dispatch(record, inquiry.inquirer_id)
        return normalize(record)
