"""
EntityNotFoundError - Raised when a conversation or inquiry does not exist.
Maps to: HTTP 404 Not Found
"""


class EntityNotFoundError(Exception):
    def __init__(self, message: str = "Conversation not found"):
        super().__init__(message)
