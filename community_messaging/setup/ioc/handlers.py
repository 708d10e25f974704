"""
Handler Provider - application services and CQRS handlers.

Depends only on the abstract ports (RecordStore, NotificationRepository),
so the same provider is combined with the Prisma/Redis provider in
production and with in-memory fakes in tests.
"""

from dishka import Provider, Scope, provide

from community_messaging.application.commands.messaging import (
    MarkConversationReadHandler,
    RespondToInquiryHandler,
    SendDirectMessageHandler,
    SendFollowupHandler,
    SubmitInquiryHandler,
)
from community_messaging.application.queries.messaging import (
    GetTimelineHandler,
    ListInboxHandler,
)
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from community_messaging.domain.ports.repositories import (
    NotificationRepository,
    RecordStore,
)


class HandlerProvider(Provider):
    # ==================== SERVICES ====================

    @provide(scope=Scope.REQUEST)
    def get_notification_dispatcher(
        self, notification_repository: NotificationRepository
    ) -> NotificationDispatcher:
        return NotificationDispatcher(notification_repository)

    # ==================== COMMAND HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_direct_message_handler(
        self, store: RecordStore, dispatcher: NotificationDispatcher
    ) -> SendDirectMessageHandler:
        return SendDirectMessageHandler(store, dispatcher)

    @provide(scope=Scope.REQUEST)
    def get_submit_inquiry_handler(
        self, store: RecordStore, dispatcher: NotificationDispatcher
    ) -> SubmitInquiryHandler:
        return SubmitInquiryHandler(store, dispatcher)

    @provide(scope=Scope.REQUEST)
    def get_respond_to_inquiry_handler(
        self, store: RecordStore, dispatcher: NotificationDispatcher
    ) -> RespondToInquiryHandler:
        return RespondToInquiryHandler(store, dispatcher)

    @provide(scope=Scope.REQUEST)
    def get_send_followup_handler(
        self, store: RecordStore, dispatcher: NotificationDispatcher
    ) -> SendFollowupHandler:
        return SendFollowupHandler(store, dispatcher)

    @provide(scope=Scope.REQUEST)
    def get_mark_conversation_read_handler(
        self, store: RecordStore
    ) -> MarkConversationReadHandler:
        return MarkConversationReadHandler(store)

    # ==================== QUERY HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_timeline_handler(self, store: RecordStore) -> GetTimelineHandler:
        return GetTimelineHandler(store)

    @provide(scope=Scope.REQUEST)
    def get_list_inbox_handler(self, store: RecordStore) -> ListInboxHandler:
        return ListInboxHandler(store)
