"""
Row Mapper - table rows ←→ domain records.

One mapping serves both the Prisma adapter (model objects) and the realtime
stream payloads (plain dicts decoded from JSON), so a record pushed over the
stream is rebuilt exactly like one read from the database.

Column names follow the tables; the only renamed field is
service_inquiries.user_id → Inquiry.inquirer_id.

Timestamps:
- datetime objects pass through; naive ones are taken as UTC (the database
  stores UTC)
- ISO-8601 strings are parsed, including a trailing "Z"
- anything else is left as-is and rejected later by normalization
"""

import json
from datetime import datetime, timezone
from typing import Any, Mapping

from community_messaging.domain.entities.drafts import (
    Draft,
    NewDirectMessage,
    NewFollowupMessage,
    NewInquiry,
    NewInquiryResponse,
)
from community_messaging.domain.entities.notification import NewNotification, Notification
from community_messaging.domain.entities.records import (
    RECORD_TYPES,
    TABLE_FOLLOWUPS,
    TABLE_INQUIRIES,
    TABLE_MESSAGES,
    TABLE_RESPONSES,
    DirectMessage,
    RawRecord,
)
from community_messaging.domain.exceptions.malformed_record import MalformedRecordError

# domain field → column, per table
_COLUMNS: dict[str, dict[str, str]] = {
    TABLE_MESSAGES: {
        "id": "id",
        "sender_id": "sender_id",
        "recipient_id": "recipient_id",
        "subject": "subject",
        "content": "content",
        "is_read": "is_read",
        "created_at": "created_at",
    },
    TABLE_INQUIRIES: {
        "id": "id",
        "inquirer_id": "user_id",
        "inquirer_name": "inquirer_name",
        "company_id": "company_id",
        "message": "message",
        "created_at": "created_at",
    },
    TABLE_RESPONSES: {
        "id": "id",
        "inquiry_id": "inquiry_id",
        "company_id": "company_id",
        "response_message": "response_message",
        "created_at": "created_at",
    },
    TABLE_FOLLOWUPS: {
        "id": "id",
        "inquiry_id": "inquiry_id",
        "sender_id": "sender_id",
        "sender_type": "sender_type",
        "message": "message",
        "created_at": "created_at",
    },
}


def _get(row: Any, column: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(column)
    return getattr(row, column, None)


def parse_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return value
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return value


def record_from_row(table: str, row: Any) -> RawRecord:
    """
    Build the domain record for one row of table.

    Raises:
        MalformedRecordError: Unknown table
    """
    record_type = RECORD_TYPES.get(table)
    if record_type is None:
        raise MalformedRecordError(f"Unknown table: {table!r}")

    values = {field: _get(row, column) for field, column in _COLUMNS[table].items()}
    values["created_at"] = parse_timestamp(values["created_at"])
    if record_type is DirectMessage:
        values["is_read"] = bool(values["is_read"])
    return record_type(**values)


def record_to_row(record: RawRecord) -> dict[str, Any]:
    """Column-keyed, JSON-safe dict of a record."""
    row = {}
    for field, column in _COLUMNS[record.table].items():
        value = getattr(record, field)
        row[column] = value.isoformat() if isinstance(value, datetime) else value
    return row


def record_to_payload(record: RawRecord) -> str:
    return json.dumps({"table": record.table, "record": record_to_row(record)})


def record_from_payload(payload: str) -> RawRecord:
    """
    Decode one stream payload.

    Raises:
        MalformedRecordError: Not JSON, wrong shape or unknown table
    """
    try:
        data = json.loads(payload)
        table, row = data["table"], data["record"]
    except (TypeError, ValueError, KeyError) as e:
        raise MalformedRecordError(f"Undecodable feed payload: {e}") from e
    if not isinstance(table, str):
        raise MalformedRecordError(f"Feed payload table is not a string: {table!r}")
    if not isinstance(row, dict):
        raise MalformedRecordError("Feed payload record is not an object")
    return record_from_row(table, row)


def draft_to_create_data(draft: Draft) -> dict[str, Any]:
    """Create payload for the draft's table; id and created_at are left to the database."""
    if isinstance(draft, NewDirectMessage):
        return {
            "sender_id": draft.sender_id,
            "recipient_id": draft.recipient_id,
            "subject": draft.subject,
            "content": draft.content,
        }
    if isinstance(draft, NewInquiry):
        return {
            "user_id": draft.inquirer_id,
            "inquirer_name": draft.inquirer_name,
            "company_id": draft.company_id,
            "message": draft.message,
        }
    if isinstance(draft, NewInquiryResponse):
        return {
            "inquiry_id": draft.inquiry_id,
            "company_id": draft.company_id,
            "response_message": draft.response_message,
        }
    if isinstance(draft, NewFollowupMessage):
        return {
            "inquiry_id": draft.inquiry_id,
            "sender_id": draft.sender_id,
            "sender_type": draft.sender_type,
            "message": draft.message,
        }
    raise TypeError(f"Unsupported draft: {type(draft).__name__}")


def notification_to_create_data(notification: NewNotification) -> dict[str, Any]:
    return {
        "user_id": notification.recipient_id,
        "type": notification.kind,
        "title": notification.title,
        "content": notification.body,
        "related_type": notification.related_type,
        "related_id": notification.related_conversation_key,
    }


def notification_from_row(row: Any) -> Notification:
    return Notification(
        id=_get(row, "id"),
        recipient_id=_get(row, "user_id"),
        kind=_get(row, "type"),
        title=_get(row, "title"),
        body=_get(row, "content"),
        related_type=_get(row, "related_type"),
        related_conversation_key=_get(row, "related_id"),
        created_at=parse_timestamp(_get(row, "created_at")),
    )
