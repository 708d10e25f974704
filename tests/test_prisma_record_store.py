from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from community_messaging.config.settings import Config
from community_messaging.domain.entities.drafts import (
    NewDirectMessage,
    NewFollowupMessage,
    NewInquiry,
)
from community_messaging.domain.entities.notification import NewNotification
from community_messaging.domain.entities.records import (
    DirectMessage,
    FollowupMessage,
    Inquiry,
    InquiryResponse,
)
from community_messaging.domain.exceptions import (
    EntityNotFoundError,
    RecordStoreError,
    SendFailedError,
)
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.infrastructure.persistence import (
    PrismaNotificationRepository,
    PrismaRecordStore,
)
from fakes import ALICE, BOB, COMPANY

T1 = datetime(2026, 1, 1, 12, 0, 1, tzinfo=timezone.utc)
T2 = datetime(2026, 1, 1, 12, 0, 2, tzinfo=timezone.utc)


def message_row(id, sender, recipient, at=T1, is_read=False):
    return SimpleNamespace(
        id=id,
        sender_id=sender,
        recipient_id=recipient,
        subject="Hello",
        content="hi",
        is_read=is_read,
        created_at=at,
        updated_at=at,
    )


@pytest.fixture()
def prisma():
    client = MagicMock()
    for delegate in (
        "message",
        "serviceinquiry",
        "serviceinquiryresponse",
        "serviceinquiryconversation",
        "notification",
    ):
        setattr(client, delegate, AsyncMock())
    return client


@pytest.mark.asyncio
async def test_direct_snapshot_queries_both_directions(prisma):
    prisma.message.find_many.return_value = [
        message_row("m2", BOB, ALICE, T2),
        message_row("m1", ALICE, BOB, T1),
    ]

    records = await PrismaRecordStore(prisma).fetch_snapshot(ConversationKey.direct(BOB, ALICE))

    assert [r.id for r in records] == ["m1", "m2"]
    assert all(isinstance(r, DirectMessage) for r in records)
    kwargs = prisma.message.find_many.await_args.kwargs
    assert kwargs["where"]["OR"] == [
        {"sender_id": ALICE, "recipient_id": BOB},
        {"sender_id": BOB, "recipient_id": ALICE},
    ]
    assert kwargs["order"] == {"created_at": "desc"}
    assert kwargs["take"] == Config.CONVERSATION_MESSAGE_LIMIT


@pytest.mark.asyncio
async def test_inquiry_snapshot_is_one_query_with_includes(prisma):
    prisma.serviceinquiry.find_unique.return_value = SimpleNamespace(
        id="q1",
        user_id=ALICE,
        inquirer_name="Alice",
        company_id=COMPANY,
        message="Do you deliver?",
        inquiry_type="contact",
        created_at=T1,
        responses=[
            SimpleNamespace(
                id="r1", inquiry_id="q1", company_id=COMPANY, response_message="Yes", created_at=T2
            )
        ],
        conversations=[
            SimpleNamespace(
                id="f1", inquiry_id="q1", sender_id=ALICE, sender_type="user", message="Thanks", created_at=T2
            )
        ],
    )

    records = await PrismaRecordStore(prisma).fetch_snapshot(ConversationKey.inquiry("q1"))

    assert [type(r) for r in records] == [Inquiry, InquiryResponse, FollowupMessage]
    assert records[0].inquirer_id == ALICE
    prisma.serviceinquiry.find_unique.assert_awaited_once_with(
        where={"id": "q1"}, include={"responses": True, "conversations": True}
    )


@pytest.mark.asyncio
async def test_missing_inquiry_is_not_found(prisma):
    prisma.serviceinquiry.find_unique.return_value = None

    with pytest.raises(EntityNotFoundError):
        await PrismaRecordStore(prisma).fetch_snapshot(ConversationKey.inquiry("nope"))


@pytest.mark.asyncio
async def test_backend_failure_is_typed(prisma):
    prisma.message.find_many.side_effect = ConnectionError("db down")

    with pytest.raises(RecordStoreError) as exc_info:
        await PrismaRecordStore(prisma).fetch_snapshot(ConversationKey.direct(ALICE, BOB))

    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_append_uses_server_assigned_id_and_timestamp(prisma):
    prisma.message.create.return_value = message_row("m9", ALICE, BOB, T2)

    record = await PrismaRecordStore(prisma).append(
        NewDirectMessage(sender_id=ALICE, recipient_id=BOB, subject="Hello", content="hi")
    )

    assert (record.id, record.created_at) == ("m9", T2)
    data = prisma.message.create.await_args.kwargs["data"]
    assert "id" not in data and "created_at" not in data


@pytest.mark.asyncio
async def test_append_maps_inquiry_and_followup_columns(prisma):
    prisma.serviceinquiry.create.return_value = SimpleNamespace(
        id="q1", user_id=None, inquirer_name="Guest", company_id=COMPANY, message="Hi", created_at=T1
    )
    prisma.serviceinquiryconversation.create.return_value = SimpleNamespace(
        id="f1", inquiry_id="q1", sender_id=COMPANY, sender_type="company", message="Hello", created_at=T2
    )
    store = PrismaRecordStore(prisma)

    inquiry = await store.append(NewInquiry(company_id=COMPANY, inquirer_name="Guest", message="Hi"))
    followup = await store.append(
        NewFollowupMessage(inquiry_id="q1", sender_id=COMPANY, sender_type="company", message="Hello")
    )

    assert inquiry.inquirer_id is None
    assert prisma.serviceinquiry.create.await_args.kwargs["data"]["user_id"] is None
    assert followup.sender_type == "company"


@pytest.mark.asyncio
async def test_append_failure_is_send_failed(prisma):
    prisma.message.create.side_effect = RuntimeError("constraint violation")

    with pytest.raises(SendFailedError):
        await PrismaRecordStore(prisma).append(
            NewDirectMessage(sender_id=ALICE, recipient_id=BOB, subject="Hello", content="hi")
        )


@pytest.mark.asyncio
async def test_mark_read_is_one_conditional_update(prisma):
    prisma.message.update_many.return_value = 2
    store = PrismaRecordStore(prisma)

    assert await store.mark_read(["m1", "m2"], ALICE) == 2
    prisma.message.update_many.assert_awaited_once_with(
        where={"id": {"in": ["m1", "m2"]}, "recipient_id": ALICE, "is_read": False},
        data={"is_read": True},
    )

    assert await store.mark_read([], ALICE) == 0
    assert prisma.message.update_many.await_count == 1


@pytest.mark.asyncio
async def test_list_direct_messages(prisma):
    prisma.message.find_many.return_value = [message_row("m1", BOB, ALICE)]

    messages = await PrismaRecordStore(prisma).list_direct_messages(ALICE, 50)

    assert [m.id for m in messages] == ["m1"]
    kwargs = prisma.message.find_many.await_args.kwargs
    assert kwargs["where"] == {"OR": [{"sender_id": ALICE}, {"recipient_id": ALICE}]}
    assert kwargs["take"] == 50


@pytest.mark.asyncio
async def test_first_direct_message_is_oldest_of_both_directions(prisma):
    prisma.message.find_first.return_value = message_row("m1", BOB, ALICE)
    key = ConversationKey.direct(ALICE, BOB)

    first = await PrismaRecordStore(prisma).first_direct_message(key)

    assert first.id == "m1"
    kwargs = prisma.message.find_first.await_args.kwargs
    assert kwargs["order"] == [{"created_at": "asc"}, {"id": "asc"}]
    assert {"sender_id": BOB, "recipient_id": ALICE} in kwargs["where"]["OR"]
    assert "take" not in kwargs

    prisma.message.find_first.return_value = None
    assert await PrismaRecordStore(prisma).first_direct_message(key) is None

    prisma.message.find_first.side_effect = RuntimeError("engine down")
    with pytest.raises(RecordStoreError):
        await PrismaRecordStore(prisma).first_direct_message(key)


@pytest.mark.asyncio
async def test_notification_repository_maps_columns(prisma):
    prisma.notification.create.return_value = SimpleNamespace(
        id="n1",
        user_id=BOB,
        type="message",
        title="New message",
        content="hi",
        related_type="message",
        related_id="direct:a:b",
        is_read=False,
        created_at=T1,
    )

    saved = await PrismaNotificationRepository(prisma).save(
        NewNotification(
            recipient_id=BOB,
            kind="message",
            title="New message",
            body="hi",
            related_type="message",
            related_conversation_key="direct:a:b",
        )
    )

    assert saved.recipient_id == BOB and saved.related_conversation_key == "direct:a:b"
    data = prisma.notification.create.await_args.kwargs["data"]
    assert data["user_id"] == BOB and data["content"] == "hi" and data["type"] == "message"
