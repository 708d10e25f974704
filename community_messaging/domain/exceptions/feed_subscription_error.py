"""
FeedSubscriptionError - Raised when a realtime subscription cannot be established.

Transient reconnects after establishment are handled inside the feed and
never raise this.
"""


class FeedSubscriptionError(Exception):
    def __init__(self, message: str = "Realtime subscription could not be established"):
        super().__init__(message)
