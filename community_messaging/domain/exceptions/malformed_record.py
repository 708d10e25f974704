"""
MalformedRecordError - A record could not be normalized into a thread entry.

Never escapes a merge: the Timeline drops the record and logs it.
"""


class MalformedRecordError(Exception):
    def __init__(self, message: str = "Malformed record"):
        super().__init__(message)
