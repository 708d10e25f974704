"""
DOMAIN SERVICES - Pure logic over entries (no I/O)
"""

from community_messaging.domain.services.normalizer import normalize
from community_messaging.domain.services.timeline import Timeline
from community_messaging.domain.services.read_state import select_unread

__all__ = [
    "normalize",
    "Timeline",
    "select_unread",
]
