"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Sends and read-state writes (CQRS)
- queries/   → Timeline and inbox reads (CQRS)
- services/  → Dispatcher, read-state tracker, conversation session
- dto/       → Data Transfer Objects
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
"""
