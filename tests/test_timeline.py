from community_messaging.domain.entities.records import (
    FollowupMessage,
    Inquiry,
    InquiryResponse,
)
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from fakes import ALICE, BOB, COMPANY, direct, ts

DIRECT_KEY = ConversationKey.direct(ALICE, BOB)


def test_snapshot_and_live_race_merges_without_duplicates():
    """Snapshot [A, B], live feed delivers B again and C."""
    a = direct("a", ALICE, BOB, 1)
    b = direct("b", BOB, ALICE, 2)
    c = direct("c", ALICE, BOB, 3)
    timeline = Timeline(DIRECT_KEY)

    timeline.merge([a, b])
    added = timeline.merge([b, c])

    assert [e.record_id for e in timeline.entries] == ["a", "b", "c"]
    assert len(timeline) == 3
    assert [e.record_id for e in added] == ["c"]


def test_live_record_before_snapshot_is_kept_in_order():
    timeline = Timeline(DIRECT_KEY)

    timeline.merge([direct("c", ALICE, BOB, 3)])
    timeline.merge([direct("a", ALICE, BOB, 1), direct("c", ALICE, BOB, 3)])

    assert [e.record_id for e in timeline] == ["a", "c"]


def test_merge_is_idempotent():
    records = [direct("a", ALICE, BOB, 1), direct("b", BOB, ALICE, 2)]
    timeline = Timeline(DIRECT_KEY)

    timeline.merge(records)
    before = timeline.entries
    assert timeline.merge(records) == []
    assert timeline.entries == before


def test_equal_timestamps_are_ordered_by_id():
    timeline = Timeline(DIRECT_KEY)

    timeline.merge([direct("z", ALICE, BOB, 5), direct("k", BOB, ALICE, 5), direct("a", ALICE, BOB, 9)])
    timeline.merge([direct("m", ALICE, BOB, 5)])

    assert [e.record_id for e in timeline] == ["k", "m", "z", "a"]


def test_inquiry_thread_follows_server_timestamps():
    """
    The client sent its follow-up "before" the company responded, but the
    server clock says otherwise; only server created_at decides order.
    """
    key = ConversationKey.inquiry("q1")
    inquiry = Inquiry("q1", ALICE, "Alice", COMPANY, "Do you deliver?", ts(10))
    followup = FollowupMessage("f1", "q1", ALICE, "user", "Any news?", ts(30))
    response = InquiryResponse("r1", "q1", COMPANY, "Yes we do", ts(20))
    timeline = Timeline(key)

    timeline.merge([followup, inquiry, response])

    assert [e.id for e in timeline] == ["inquiry:q1", "response:r1", "followup:f1"]
    assert timeline.latest.id == "followup:f1"


def test_malformed_and_foreign_records_are_dropped():
    timeline = Timeline(DIRECT_KEY)
    bad = InquiryResponse("r1", "q1", COMPANY, "", ts(1))
    foreign = direct("x", ALICE, COMPANY, 2)

    added = timeline.merge([bad, direct("a", ALICE, BOB, 1), foreign])

    assert [e.record_id for e in added] == ["a"]
    assert timeline.dropped_count == 2


def test_read_flag_never_goes_back():
    timeline = Timeline(DIRECT_KEY)
    timeline.merge([direct("a", ALICE, BOB, 1, is_read=False)])

    changed = timeline.mark_read(["direct:a"])
    assert [e.is_read for e in changed] == [True]

    # A stale copy delivered late must not reset the flag
    timeline.merge([direct("a", ALICE, BOB, 1, is_read=False)])
    assert timeline.get("direct:a").is_read is True
    assert timeline.mark_read(["direct:a"]) == []


def test_newer_copy_can_set_read():
    timeline = Timeline(DIRECT_KEY)
    timeline.merge([direct("a", ALICE, BOB, 1, is_read=False)])

    timeline.merge([direct("a", ALICE, BOB, 1, is_read=True)])

    assert timeline.get("direct:a").is_read is True


def test_empty_input():
    timeline = Timeline(DIRECT_KEY)

    assert timeline.merge([]) == []
    assert timeline.mark_read([]) == []
    assert timeline.latest is None
