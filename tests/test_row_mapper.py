from datetime import datetime, timezone

import pytest

from community_messaging.domain.entities.records import Inquiry
from community_messaging.domain.exceptions import MalformedRecordError
from community_messaging.infrastructure.persistence.row_mapper import (
    parse_timestamp,
    record_from_payload,
    record_from_row,
    record_to_payload,
)
from fakes import ALICE, COMPANY, ts


@pytest.mark.parametrize(
    "value",
    [
        "2026-01-01T12:00:00Z",
        "2026-01-01T12:00:00+00:00",
        "2026-01-01T12:00:00",
        datetime(2026, 1, 1, 12, 0),
    ],
)
def test_timestamps_become_utc_aware(value):
    assert parse_timestamp(value) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_unparseable_timestamp_is_left_for_normalization():
    assert parse_timestamp("yesterday") == "yesterday"


def test_payload_keeps_guest_inquirer_and_column_names():
    inquiry = Inquiry("q1", None, "Guest", COMPANY, "Hello", ts(1))

    payload = record_to_payload(inquiry)

    assert '"user_id": null' in payload
    assert record_from_payload(payload) == inquiry


def test_row_with_missing_fields_builds_a_record_normalization_rejects():
    record = record_from_row("service_inquiry_responses", {"id": "r1", "inquiry_id": "q1"})

    assert record.response_message is None and record.created_at is None


@pytest.mark.parametrize(
    "payload",
    [None, "", "[]", '{"table": "messages"}', '{"table": "polls", "record": {}}', '{"table": "messages", "record": 5}', '{"table": {"name": "messages"}, "record": {}}', '{"table": 7, "record": {}}'],
)
def test_undecodable_payloads(payload):
    with pytest.raises(MalformedRecordError):
        record_from_payload(payload)


def test_direct_message_from_dict_row():
    record = record_from_row(
        "messages",
        {
            "id": "m1",
            "sender_id": ALICE,
            "recipient_id": COMPANY,
            "subject": "Hi",
            "content": "hello",
            "is_read": 0,
            "created_at": "2026-01-01T12:00:01Z",
        },
    )

    assert record.is_read is False
    assert record.created_at.tzinfo is not None
