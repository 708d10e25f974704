"""Observability package for the messaging service."""

from community_messaging.observability.metrics import (
    increment_active_subscriptions,
    decrement_active_subscriptions,
    increment_messages_sent,
    increment_notification,
    increment_feed_reconnect,
    increment_dropped_records,
    increment_error,
    get_metrics_content,
    MetricsErrorType,
    NotificationOutcome,
)

__all__ = [
    "increment_active_subscriptions",
    "decrement_active_subscriptions",
    "increment_messages_sent",
    "increment_notification",
    "increment_feed_reconnect",
    "increment_dropped_records",
    "increment_error",
    "get_metrics_content",
    "MetricsErrorType",
    "NotificationOutcome",
]
