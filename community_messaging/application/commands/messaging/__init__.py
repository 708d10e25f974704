"""Messaging commands."""

from .send_direct_message import SendDirectMessageCommand, SendDirectMessageHandler
from .submit_inquiry import SubmitInquiryCommand, SubmitInquiryHandler
from .respond_to_inquiry import RespondToInquiryCommand, RespondToInquiryHandler
from .send_followup import SendFollowupCommand, SendFollowupHandler
from .mark_conversation_read import (
    MarkConversationReadCommand,
    MarkConversationReadHandler,
)

__all__ = [
    "SendDirectMessageCommand",
    "SendDirectMessageHandler",
    "SubmitInquiryCommand",
    "SubmitInquiryHandler",
    "RespondToInquiryCommand",
    "RespondToInquiryHandler",
    "SendFollowupCommand",
    "SendFollowupHandler",
    "MarkConversationReadCommand",
    "MarkConversationReadHandler",
]
