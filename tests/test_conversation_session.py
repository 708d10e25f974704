import asyncio

import pytest

from community_messaging.application.services.conversation_session import ConversationSession
from community_messaging.domain.entities.drafts import NewDirectMessage
from community_messaging.domain.entities.records import FollowupMessage, Inquiry, InquiryResponse
from community_messaging.domain.exceptions import FeedSubscriptionError, RecordStoreError
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from fakes import ALICE, BOB, COMPANY, InMemoryFeed, InMemoryRecordStore, direct, ts, wait_for

KEY = ConversationKey.direct(ALICE, BOB)


@pytest.fixture()
def feed():
    return InMemoryFeed()


@pytest.fixture()
def store(feed):
    return InMemoryRecordStore(feed=feed)


def bob_says(content):
    return NewDirectMessage(sender_id=BOB, recipient_id=ALICE, subject="Hi", content=content)


@pytest.mark.asyncio
async def test_push_racing_the_snapshot_is_merged_once(store, feed):
    a, b, c = direct("a", ALICE, BOB, 1), direct("b", BOB, ALICE, 2), direct("c", ALICE, BOB, 3)
    store.add(a, b)
    store.snapshot_gate = asyncio.Event()
    deltas = []
    session = ConversationSession(store, feed, KEY, ALICE, on_entries=deltas.append, mark_read=False)

    opening = asyncio.create_task(session.open())
    await wait_for(lambda: feed.handles)
    # Snapshot view already taken; the feed replays b and delivers c
    feed.publish(b)
    feed.publish(c)
    store.snapshot_gate.set()
    await opening

    assert [e.record_id for e in session.timeline] == ["a", "b", "c"]
    assert deltas == []

    await session.close()


@pytest.mark.asyncio
async def test_inquiry_rows_missed_by_the_snapshot_arrive_through_the_feed(store, feed):
    inquiry = Inquiry("q1", ALICE, "Alice", COMPANY, "Do you deliver?", ts(1))
    response = InquiryResponse("r1", "q1", COMPANY, "Yes", ts(2))
    followup = FollowupMessage("f1", "q1", ALICE, "user", "Great", ts(3))
    store.add(inquiry, response)
    store.snapshot_gate = asyncio.Event()
    key = ConversationKey.inquiry("q1")
    session = ConversationSession(store, feed, key, ALICE, mark_read=False)

    opening = asyncio.create_task(session.open())
    await wait_for(lambda: feed.handles)
    # Committed after the child tables were read, replayed by the feed
    store.add(followup)
    feed.publish(response)
    feed.publish(followup)
    store.snapshot_gate.set()
    await opening

    assert [e.id for e in session.timeline] == ["inquiry:q1", "response:r1", "followup:f1"]

    await session.close()

@pytest.mark.asyncio
async def test_live_entries_are_forwarded_and_marked_read(store, feed):
    deltas = []

    async with ConversationSession(store, feed, KEY, ALICE, on_entries=deltas.append) as session:
        record = await store.append(bob_says("are you there?"))

        assert [[e.record_id for e in batch] for batch in deltas] == [[record.id]]
        await wait_for(lambda: store.messages[record.id].is_read)
        await wait_for(lambda: session.timeline.get(f"direct:{record.id}").is_read)


@pytest.mark.asyncio
async def test_opening_marks_unread_snapshot_entries(store, feed):
    store.add(direct("a", BOB, ALICE, 1), direct("b", ALICE, BOB, 2))

    async with ConversationSession(store, feed, KEY, ALICE):
        assert store.messages["a"].is_read
        assert not store.messages["b"].is_read


@pytest.mark.asyncio
async def test_own_messages_do_not_trigger_mark_read(store, feed):
    async with ConversationSession(store, feed, KEY, ALICE):
        await store.append(
            NewDirectMessage(sender_id=ALICE, recipient_id=BOB, subject="Hi", content="hey")
        )
        await asyncio.sleep(0)

    assert store.mark_read_calls == []


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery(store, feed):
    deltas = []
    session = ConversationSession(store, feed, KEY, ALICE, on_entries=deltas.append)
    await session.open()
    handle = feed.handles[0]

    await session.close()
    await store.append(bob_says("too late"))

    assert handle.closed
    assert feed.handles == []
    assert handle.deliver(direct("z", BOB, ALICE, 9)) is False
    assert len(session.timeline) == 0
    assert deltas == []


@pytest.mark.asyncio
async def test_other_conversations_are_not_delivered(store, feed):
    deltas = []

    async with ConversationSession(store, feed, KEY, ALICE, on_entries=deltas.append) as session:
        await store.append(
            NewDirectMessage(sender_id=COMPANY, recipient_id=ALICE, subject="Hi", content="offer")
        )

    assert deltas == []
    assert len(session.timeline) == 0


@pytest.mark.asyncio
async def test_snapshot_failure_tears_down_subscription(store, feed):
    store.fail_snapshot = True

    with pytest.raises(RecordStoreError):
        await ConversationSession(store, feed, KEY, ALICE).open()

    assert feed.subscribe_calls == 1
    assert feed.handles == []


@pytest.mark.asyncio
async def test_subscription_failure_propagates(store, feed):
    feed.fail_subscribe = True

    with pytest.raises(FeedSubscriptionError):
        async with ConversationSession(store, feed, KEY, ALICE):
            pass


@pytest.mark.asyncio
async def test_mark_read_failure_does_not_break_the_session(store, feed):
    store.add(direct("a", BOB, ALICE, 1))
    store.fail_mark_read = True

    async with ConversationSession(store, feed, KEY, ALICE) as session:
        assert session.is_open
        assert session.timeline.get("direct:a").is_read is False


@pytest.mark.asyncio
async def test_refresh_returns_only_unseen_entries(store, feed):
    store.add(direct("a", BOB, ALICE, 1))
    deltas = []

    async with ConversationSession(
        store, feed, KEY, ALICE, on_entries=deltas.append, mark_read=False
    ) as session:
        store.add(direct("b", BOB, ALICE, 2))
        added = await session.refresh()

        assert [e.record_id for e in added] == ["b"]
        assert await session.refresh() == []
        assert [[e.record_id for e in batch] for batch in deltas] == [["b"]]


@pytest.mark.asyncio
async def test_close_is_idempotent(store, feed):
    session = ConversationSession(store, feed, KEY, ALICE)
    await session.open()

    await session.close()
    await session.close()

    assert not session.is_open
