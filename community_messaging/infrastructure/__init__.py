"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: Prisma implementations (records, notifications)
- realtime/:    Redis Streams publisher and feed
"""
