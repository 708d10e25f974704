"""
API Routers - FastAPI endpoint definitions.
"""

from community_messaging.presentation.api.conversations import router as conversations_router
from community_messaging.presentation.api.inquiries import router as inquiries_router
from community_messaging.presentation.api.realtime import router as realtime_router
from community_messaging.presentation.api.metrics import router as metrics_router

__all__ = [
    "conversations_router",
    "inquiries_router",
    "realtime_router",
    "metrics_router",
]
