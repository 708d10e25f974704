import pytest

from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
    build_notification,
    preview,
)
from community_messaging.domain.entities.notification import (
    KIND_MESSAGE,
    KIND_SERVICE_MESSAGE,
    KIND_SERVICE_RESPONSE,
)
from community_messaging.domain.entities.records import FollowupMessage, InquiryResponse
from fakes import ALICE, BOB, COMPANY, RecordingNotificationRepository, direct, ts


def test_preview_flattens_and_truncates():
    assert preview("  hello\n\nworld  ") == "hello world"
    assert preview("a" * 20, limit=10) == "aaaaaaa..."


def test_build_notification_per_kind():
    message = build_notification(direct("m1", ALICE, BOB, 1, content="Hi there"), BOB)
    response = build_notification(InquiryResponse("r1", "q1", COMPANY, "Yes", ts(1)), ALICE)
    followup = build_notification(FollowupMessage("f1", "q1", ALICE, "user", "Ok", ts(1)), COMPANY)

    assert (message.kind, message.body, message.related_type) == (KIND_MESSAGE, "Hi there", "message")
    assert response.kind == KIND_SERVICE_RESPONSE
    assert response.related_conversation_key == "inquiry:q1"
    assert followup.kind == KIND_SERVICE_MESSAGE


@pytest.mark.asyncio
async def test_dispatch_never_raises():
    repository = RecordingNotificationRepository(fail=True)

    result = await NotificationDispatcher(repository).dispatch(direct("m1", ALICE, BOB, 1), BOB)

    assert result is None
    assert len(repository.attempts) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("recipient", [None, "", ALICE])
async def test_dispatch_skips_missing_or_self_recipient(recipient):
    repository = RecordingNotificationRepository()

    result = await NotificationDispatcher(repository).dispatch(
        direct("m1", ALICE, BOB, 1), recipient
    )

    assert result is None
    assert repository.attempts == []
