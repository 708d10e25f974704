"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class SendFollowupCommand(Command[ThreadEntry]):
        inquiry_id: str
        sender_id: UserId
        message: str

    class SendFollowupHandler(CommandHandler[ThreadEntry]):
        def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
            ...

        async def execute(self, command: SendFollowupCommand) -> ThreadEntry:
            record = await self._store.append(...)
            return normalize(record)
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")
class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
