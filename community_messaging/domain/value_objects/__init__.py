"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass / enum)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from community_messaging.domain.value_objects.user_id import UserId
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.domain.value_objects.roles import AuthorRole, EntryKind

__all__ = [
    "UserId",
    "ConversationKey",
    "AuthorRole",
    "EntryKind",
]
