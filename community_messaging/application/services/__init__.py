"""
APPLICATION SERVICES - Orchestration shared by commands, queries and realtime

- notification_dispatcher: best-effort notification after a send
- read_state_tracker:      idempotent mark-read of a timeline
- conversation_session:    snapshot + realtime merge for one open conversation
- access:                  participant checks
"""

from community_messaging.application.services.access import (
    authorize_viewer,
    load_inquiry,
)
from community_messaging.application.services.conversation_session import (
    ConversationSession,
)
from community_messaging.application.services.notification_dispatcher import (
    NotificationDispatcher,
    build_notification,
    preview,
)
from community_messaging.application.services.read_state_tracker import (
    ReadStateTracker,
)

__all__ = [
    "authorize_viewer",
    "load_inquiry",
    "ConversationSession",
    "NotificationDispatcher",
    "build_notification",
    "preview",
    "ReadStateTracker",
]
