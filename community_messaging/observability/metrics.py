"""
Prometheus Metrics for the messaging service.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus ──► Grafana

METRIC TYPES:
    - Gauge: Value goes up/down (open realtime subscriptions)
    - Counter: Value only goes up (messages sent, notification outcomes)
"""

from prometheus_client import (
    Gauge,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_SUBSCRIPTIONS = Gauge(
    "messaging_active_subscriptions",
    "Number of realtime feed subscriptions currently open",
)

MESSAGES_SENT_TOTAL = Counter(
    "messaging_messages_sent_total",
    "Total number of entries appended to the record store",
    ["kind"],
)

NOTIFICATIONS_TOTAL = Counter(
    "messaging_notifications_total",
    "Notification dispatch attempts by outcome",
    ["kind", "outcome"],
)

FEED_RECONNECTS_TOTAL = Counter(
    "messaging_feed_reconnects_total",
    "Total number of realtime feed transport errors retried with backoff",
)

DROPPED_RECORDS_TOTAL = Counter(
    "messaging_dropped_records_total",
    "Records dropped because they could not be normalized",
    ["source"],
)

ERRORS_TOTAL = Counter(
    "messaging_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS (avoid hardcoding strings throughout codebase)
# =============================================================================
class MetricsErrorType:
    """Error type labels for messaging_errors_total metric."""

    STORE_FAILED = "store_failed"
    SEND_FAILED = "send_failed"
    PUBLISH_FAILED = "publish_failed"
    SUBSCRIBE_FAILED = "subscribe_failed"
    MARK_READ_FAILED = "mark_read_failed"
    READER_CRASHED = "reader_crashed"


class NotificationOutcome:
    CREATED = "created"
    FAILED = "failed"
    SKIPPED = "skipped"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def increment_active_subscriptions():
    """Call when a feed subscription is established. Integration point: RedisStreamFeed.subscribe()"""
    ACTIVE_SUBSCRIPTIONS.inc()


def decrement_active_subscriptions():
    """Call when a subscription is torn down. Integration point: RedisStreamFeed.unsubscribe()"""
    ACTIVE_SUBSCRIPTIONS.dec()


def increment_messages_sent(kind: str):
    """Call after a successful append. Integration point: application/commands/messaging/*"""
    MESSAGES_SENT_TOTAL.labels(kind=kind).inc()


def increment_notification(kind: str, outcome: str):
    """Integration point: application/services/notification_dispatcher.py"""
    NOTIFICATIONS_TOTAL.labels(kind=kind, outcome=outcome).inc()


def increment_feed_reconnect():
    """Integration point: RedisStreamFeed._read_loop() backoff branch"""
    FEED_RECONNECTS_TOTAL.inc()


def increment_dropped_records(source: str, count: int = 1):
    """Call with the number of records a merge dropped. source: snapshot | feed"""
    if count > 0:
        DROPPED_RECORDS_TOTAL.labels(source=source).inc(count)


def increment_error(error_type: str):
    """
    Call to record an error occurrence.

    Args:
        error_type: One of MetricsErrorType
    """
    ERRORS_TOTAL.labels(error_type=error_type).inc()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Called by: presentation/api/metrics.py

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


# =============================================================================
# EXPORTS
# =============================================================================
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
