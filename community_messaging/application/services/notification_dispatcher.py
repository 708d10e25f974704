"""
Notification Dispatcher - best-effort fan-out after a successful send.

A send is strongly consistent; its notification is not. Whatever happens
while building or storing the notification is logged and counted, and the
caller gets None back. Nothing is retried here and nothing is raised, so a
notification store outage can never fail or roll back a message send.
"""

import logging
import re
from typing import Optional

from community_messaging.config.settings import Config
from community_messaging.domain.entities.notification import (
    KIND_MESSAGE,
    KIND_SERVICE_INQUIRY,
    KIND_SERVICE_MESSAGE,
    KIND_SERVICE_RESPONSE,
    NewNotification,
    Notification,
)
from community_messaging.domain.entities.records import (
    DirectMessage,
    FollowupMessage,
    Inquiry,
    InquiryResponse,
    RawRecord,
)
from community_messaging.domain.ports.repositories import NotificationRepository
from community_messaging.observability.metrics import (
    NotificationOutcome,
    increment_notification,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def preview(text: str, limit: Optional[int] = None) -> str:
    """Single-line preview of a message body, truncated to limit characters."""
    limit = limit or Config.NOTIFICATION_PREVIEW_CHARS
    flat = _WHITESPACE.sub(" ", text or "").strip()
    if len(flat) <= limit:
        return flat
    return flat[: max(limit - 3, 0)].rstrip() + "..."


def build_notification(record: RawRecord, recipient_id: str) -> NewNotification:
    key = str(record.conversation_key)
    if isinstance(record, DirectMessage):
        return NewNotification(
            recipient_id=recipient_id,
            kind=KIND_MESSAGE,
            title="New message",
            body=preview(record.content),
            related_type="message",
            related_conversation_key=key,
        )
    if isinstance(record, Inquiry):
        return NewNotification(
            recipient_id=recipient_id,
            kind=KIND_SERVICE_INQUIRY,
            title=f"New service inquiry from {record.inquirer_name}",
            body=preview(record.message),
            related_type="service_inquiry",
            related_conversation_key=key,
        )
    if isinstance(record, InquiryResponse):
        return NewNotification(
            recipient_id=recipient_id,
            kind=KIND_SERVICE_RESPONSE,
            title="New response to your inquiry",
            body=preview(record.response_message),
            related_type="service_inquiry",
            related_conversation_key=key,
        )
    if isinstance(record, FollowupMessage):
        return NewNotification(
            recipient_id=recipient_id,
            kind=KIND_SERVICE_MESSAGE,
            title="New message about your inquiry",
            body=preview(record.message),
            related_type="service_inquiry",
            related_conversation_key=key,
        )
    raise TypeError(f"Cannot build a notification for {type(record).__name__}")


def author_of(record: RawRecord) -> Optional[str]:
    if isinstance(record, DirectMessage):
        return record.sender_id
    if isinstance(record, Inquiry):
        return record.inquirer_id
    if isinstance(record, InquiryResponse):
        return record.company_id
    if isinstance(record, FollowupMessage):
        return record.sender_id
    return None


class NotificationDispatcher:
    def __init__(self, notification_repository: NotificationRepository):
        self._notification_repository = notification_repository

    async def dispatch(
        self, record: RawRecord, recipient_id: Optional[str]
    ) -> Optional[Notification]:
        """
        Notify the counterpart of a freshly stored record.

        Args:
            record: The record returned by RecordStore.append()
            recipient_id: Counterpart participant; None for guest inquirers.
                Skipped when missing or equal to the author.

        Returns:
            The stored Notification, or None if skipped or failed
        """
        kind = type(record).kind.value
        if not recipient_id or recipient_id == author_of(record):
            logger.info(f"[NotificationDispatcher] No counterpart for {kind} {record.id}, skipping")
            increment_notification(kind, NotificationOutcome.SKIPPED)
            return None

        try:
            notification = await self._notification_repository.save(
                build_notification(record, recipient_id)
            )
        except Exception as e:
            logger.warning(
                f"[NotificationDispatcher] Failed to notify {recipient_id} "
                f"about {kind} {record.id}: {e}"
            )
            increment_notification(kind, NotificationOutcome.FAILED)
            return None

        increment_notification(kind, NotificationOutcome.CREATED)
        logger.debug(
            f"[NotificationDispatcher] Notification {notification.id} "
            f"created for {recipient_id}"
        )
        return notification
