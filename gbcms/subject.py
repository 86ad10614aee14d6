"""The SIP Subject header used in INVITE requests."""

from __future__ import annotations

from dataclasses import dataclass

HEADER_NAME = "Subject"


@dataclass(frozen=True)
class Subject:
    """A Subject header, e.g. ``channel:ssrc,device:0``."""

    content: str = ""

    def name(self) -> str:
        return HEADER_NAME

    def value(self) -> str:
        return self.content

    def clone(self) -> "Subject":
        """Return the header itself; it is immutable."""
        return self

    def equals(self, other: object) -> bool:
        """True if ``other`` is a Subject header with the same value."""
        if isinstance(other, Subject):
            return other.content == self.content
        return False

    def __str__(self) -> str:
        return f"{self.name()}: {self.value()}"