"""Redis stream naming for conversation feeds."""

from community_messaging.domain.value_objects.conversation_key import ConversationKey

PAYLOAD_FIELD = "payload"


def stream_key(conversation_key: ConversationKey) -> str:
    """conv:<conversation key>:feed, e.g. conv:inquiry:42:feed"""
    return f"conv:{conversation_key}:feed"
