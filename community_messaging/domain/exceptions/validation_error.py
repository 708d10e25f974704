"""
DomainValidationError - Raised when a send or inquiry breaks a business rule
(empty body, messaging yourself).
Maps to: HTTP 422 Unprocessable Entity
"""

from typing import Optional


class DomainValidationError(Exception):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
