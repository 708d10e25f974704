"""
ConversationKey Value Object - identity of one thread.

Two shapes:
- direct:  unordered participant pair, stored sorted so (a, b) == (b, a)
- inquiry: the inquiry id

String form is "direct:<low>:<high>" or "inquiry:<id>" and is what the
HTTP surface and the realtime stream names use.
"""

from __future__ import annotations

from dataclasses import dataclass

DIRECT = "direct"
INQUIRY = "inquiry"
_SEPARATOR = ":"


@dataclass(frozen=True)
class ConversationKey:
    kind: str
    parts: tuple[str, ...]

    def __post_init__(self):
        if self.kind == DIRECT:
            if len(self.parts) != 2 or not all(self.parts):
                raise ValueError("Direct conversation key needs two participants")
            if self.parts[0] == self.parts[1]:
                raise ValueError("Direct conversation participants must differ")
            if list(self.parts) != sorted(self.parts):
                raise ValueError("Direct conversation participants must be sorted")
        elif self.kind == INQUIRY:
            if len(self.parts) != 1 or not self.parts[0]:
                raise ValueError("Inquiry conversation key needs an inquiry id")
        else:
            raise ValueError(f"Invalid conversation kind: {self.kind}")
        if any(_SEPARATOR in part for part in self.parts):
            raise ValueError("Conversation key parts cannot contain ':'")

    @classmethod
    def direct(cls, first_user_id: str, second_user_id: str) -> ConversationKey:
        return cls(DIRECT, tuple(sorted((str(first_user_id), str(second_user_id)))))

    @classmethod
    def inquiry(cls, inquiry_id: str) -> ConversationKey:
        return cls(INQUIRY, (str(inquiry_id),))

    @classmethod
    def parse(cls, value: str) -> ConversationKey:
        """Parse the string form; raises ValueError if malformed."""
        kind, _, rest = (value or "").partition(_SEPARATOR)
        if kind == DIRECT:
            first, _, second = rest.partition(_SEPARATOR)
            return cls.direct(first, second)
        if kind == INQUIRY:
            return cls.inquiry(rest)
        raise ValueError(f"Invalid conversation key: {value}")

    @property
    def is_direct(self) -> bool:
        return self.kind == DIRECT

    @property
    def is_inquiry(self) -> bool:
        return self.kind == INQUIRY

    @property
    def participants(self) -> tuple[str, str]:
        if not self.is_direct:
            raise ValueError("Only direct conversations have a fixed participant pair")
        return self.parts[0], self.parts[1]

    @property
    def inquiry_id(self) -> str:
        if not self.is_inquiry:
            raise ValueError("Only inquiry conversations have an inquiry id")
        return self.parts[0]

    def counterpart_of(self, user_id: str) -> str:
        first, second = self.participants
        if user_id == first:
            return second
        if user_id == second:
            return first
        raise ValueError(f"{user_id} is not a participant of {self}")

    def __str__(self) -> str:
        return _SEPARATOR.join((self.kind, *self.parts))
