"""
RecordStoreError - Raised when the record store cannot serve a read or write.
Maps to: HTTP 503 Service Unavailable (caller may retry)
"""


class RecordStoreError(Exception):
    """Transient failure talking to the record store."""

    def __init__(self, message: str = "Record store unavailable"):
        super().__init__(message)


class SendFailedError(RecordStoreError):
    """The store rejected an append; nothing was written."""

    def __init__(self, message: str = "Message could not be sent"):
        super().__init__(message)
