"""
Entry kind and author role tags.

Every ThreadEntry carries both, assigned once during normalization.
"""

from enum import Enum


class EntryKind(str, Enum):
    DIRECT = "direct"
    INQUIRY = "inquiry"
    RESPONSE = "response"
    FOLLOWUP = "followup"


class AuthorRole(str, Enum):
    USER = "user"
    COMPANY = "company"
