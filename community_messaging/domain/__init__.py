"""
DOMAIN LAYER - Conversations, entries and the rules that order them

This layer contains:
- Value Objects: UserId, ConversationKey, AuthorRole, EntryKind
- Entities: raw records of both schemas, drafts, ThreadEntry, Notification
- Ports: RecordStore, NotificationRepository, RealtimeFeed
- Services: normalization, Timeline merge, unread selection (no I/O)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Redis, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
