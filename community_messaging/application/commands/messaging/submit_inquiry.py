"""Submit Inquiry Command - opens a new inquiry thread with a company."""

import logging
from dataclasses import dataclass
from typing import Optional

from community_messaging.application.common.interfaces import Command, CommandHandler
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from community_messaging.domain.entities.drafts import NewInquiry
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import DomainValidationError
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.observability.metrics import increment_messages_sent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitInquiryCommand(Command[ThreadEntry]):
    company_id: UserId
    inquirer_name: str
    message: str
    inquirer_id: Optional[UserId] = None


class SubmitInquiryHandler(CommandHandler[ThreadEntry]):
    def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
        self._store = store
        self._dispatcher = dispatcher

    async def execute(self, command: SubmitInquiryCommand) -> ThreadEntry:
        message = (command.message or "").strip()
        inquirer_name = (command.inquirer_name or "").strip()
        if not message:
            raise DomainValidationError("Inquiry message cannot be empty", field="message")
        if not inquirer_name:
            raise DomainValidationError("Inquirer name cannot be empty", field="inquirer_name")

        inquirer_id = command.inquirer_id.value if command.inquirer_id else None
        if inquirer_id == command.company_id.value:
            raise DomainValidationError("A company cannot send an inquiry to itself", field="company_id")

        record = await self._store.append(
            NewInquiry(
                company_id=command.company_id.value,
                inquirer_name=inquirer_name,
                message=message,
                inquirer_id=inquirer_id,
            )
        )
        increment_messages_sent(record.kind.value)
        logger.info(f"[SubmitInquiry] Inquiry {record.id} sent to {record.company_id}")

        await self._dispatcher.dispatch(record, record.company_id)
        return normalize(record)
