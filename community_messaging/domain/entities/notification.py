"""
Notification Entity - fan-out record created after a successful send.

Never mutated by this service; read/dismiss belong to the notifications
feature of the platform.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

KIND_MESSAGE = "message"
KIND_SERVICE_INQUIRY = "service_inquiry"
KIND_SERVICE_RESPONSE = "service_response"
KIND_SERVICE_MESSAGE = "service_message"


@dataclass(frozen=True)
class NewNotification:
    recipient_id: str
    kind: str
    title: str
    body: str
    related_type: str
    related_conversation_key: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    id: str
    recipient_id: str
    kind: str
    title: str
    body: str
    related_type: Optional[str]
    related_conversation_key: Optional[str]
    created_at: datetime
