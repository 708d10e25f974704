"""
AccessDeniedError - Raised when a viewer is not a participant of a conversation,
or tries to act in a role they do not hold (e.g. respond for another company).
Maps to: HTTP 403 Forbidden
"""


class AccessDeniedError(Exception):
    def __init__(self, message: str = "You are not a participant of this conversation"):
        super().__init__(message)
