"""
Normalizer - maps any RawRecord onto the ThreadEntry shape.

Dispatch is on the record type (the tagged union), never on which fields a
record happens to carry. Roles are assigned here once:
- Inquiry          → kind=inquiry,  role=user
- InquiryResponse  → kind=response, role=company
- FollowupMessage  → kind=followup, role from sender_type
- DirectMessage    → kind=direct,   role=user

Anything that cannot be mapped raises MalformedRecordError.
"""

from datetime import datetime
from typing import Any, Callable

from community_messaging.domain.entities.records import (
    DirectMessage,
    FollowupMessage,
    Inquiry,
    InquiryResponse,
    RawRecord,
)
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions.malformed_record import MalformedRecordError
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.roles import AuthorRole, EntryKind


def _text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MalformedRecordError(f"Missing or empty field: {field}")
    return value


def _timestamp(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise MalformedRecordError(f"Invalid created_at: {value!r}")
    # Naive and aware datetimes cannot be compared, so naive ones never enter a timeline
    if value.tzinfo is None or value.utcoffset() is None:
        raise MalformedRecordError(f"created_at has no timezone: {value!r}")
    return value


def _from_direct(message: DirectMessage) -> ThreadEntry:
    record_id = _text(message.id, "id")
    return ThreadEntry(
        id=ThreadEntry.make_id(EntryKind.DIRECT, record_id),
        conversation_key=ConversationKey.direct(
            _text(message.sender_id, "sender_id"),
            _text(message.recipient_id, "recipient_id"),
        ),
        kind=EntryKind.DIRECT,
        author_id=message.sender_id,
        author_role=AuthorRole.USER,
        body=_text(message.content, "content"),
        created_at=_timestamp(message.created_at),
        record_id=record_id,
        recipient_id=message.recipient_id,
        is_read=bool(message.is_read),
        subject=message.subject or "",
    )


def _from_inquiry(inquiry: Inquiry) -> ThreadEntry:
    record_id = _text(inquiry.id, "id")
    return ThreadEntry(
        id=ThreadEntry.make_id(EntryKind.INQUIRY, record_id),
        conversation_key=ConversationKey.inquiry(record_id),
        kind=EntryKind.INQUIRY,
        author_id=inquiry.inquirer_id or None,
        author_role=AuthorRole.USER,
        body=_text(inquiry.message, "message"),
        created_at=_timestamp(inquiry.created_at),
        record_id=record_id,
    )


def _from_response(response: InquiryResponse) -> ThreadEntry:
    record_id = _text(response.id, "id")
    return ThreadEntry(
        id=ThreadEntry.make_id(EntryKind.RESPONSE, record_id),
        conversation_key=ConversationKey.inquiry(
            _text(response.inquiry_id, "inquiry_id")
        ),
        kind=EntryKind.RESPONSE,
        author_id=_text(response.company_id, "company_id"),
        author_role=AuthorRole.COMPANY,
        body=_text(response.response_message, "response_message"),
        created_at=_timestamp(response.created_at),
        record_id=record_id,
    )


def _from_followup(followup: FollowupMessage) -> ThreadEntry:
    record_id = _text(followup.id, "id")
    try:
        role = AuthorRole(followup.sender_type)
    except ValueError as e:
        raise MalformedRecordError(
            f"Unknown sender_type: {followup.sender_type!r}"
        ) from e
    return ThreadEntry(
        id=ThreadEntry.make_id(EntryKind.FOLLOWUP, record_id),
        conversation_key=ConversationKey.inquiry(
            _text(followup.inquiry_id, "inquiry_id")
        ),
        kind=EntryKind.FOLLOWUP,
        author_id=_text(followup.sender_id, "sender_id"),
        author_role=role,
        body=_text(followup.message, "message"),
        created_at=_timestamp(followup.created_at),
        record_id=record_id,
    )


_NORMALIZERS: dict[type, Callable[[Any], ThreadEntry]] = {
    DirectMessage: _from_direct,
    Inquiry: _from_inquiry,
    InquiryResponse: _from_response,
    FollowupMessage: _from_followup,
}


def normalize(record: RawRecord) -> ThreadEntry:
    """Map one raw record to a ThreadEntry; raises MalformedRecordError."""
    normalizer = _NORMALIZERS.get(type(record))
    if normalizer is None:
        raise MalformedRecordError(
            f"Unsupported record type: {type(record).__name__}"
        )
    try:
        return normalizer(record)
    except ValueError as e:
        # ConversationKey rejects self-addressed or malformed participant ids
        raise MalformedRecordError(str(e)) from e
