"""
DOMAIN EXCEPTIONS - Business rule violations and boundary failures

These exceptions are raised by domain/application logic and caught by the
presentation layer, which maps them to HTTP status codes.
"""

from community_messaging.domain.exceptions.entity_not_found import EntityNotFoundError
from community_messaging.domain.exceptions.access_denied import AccessDeniedError
from community_messaging.domain.exceptions.validation_error import DomainValidationError
from community_messaging.domain.exceptions.record_store_error import (
    RecordStoreError,
    SendFailedError,
)
from community_messaging.domain.exceptions.feed_subscription_error import (
    FeedSubscriptionError,
)
from community_messaging.domain.exceptions.malformed_record import MalformedRecordError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "DomainValidationError",
    "RecordStoreError",
    "SendFailedError",
    "FeedSubscriptionError",
    "MalformedRecordError",
]
