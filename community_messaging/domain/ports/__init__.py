"""
PORTS - Interfaces that infrastructure implements

- repositories/record_store.py          → both message schemas (Prisma)
- repositories/notification_repository.py → notification rows (Prisma)
- realtime_feed.py                       → push subscription (Redis Streams)
"""
