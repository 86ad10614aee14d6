"""SDP media section (m= line with its rtpmap attributes)."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import Codec

DEFAULT_PROTO = "RTP/AVP"


@dataclass
class Media:
    """A single audio or video stream description."""

    proto: str = ""  # RTP/AVP, TCP/IP, UDP, ...
    port: int = 0
    codecs: list[Codec] = field(default_factory=list)

    def format(self, kind: str) -> str:
        """Return the ``m=`` line of the given kind and one rtpmap block per codec."""
        parts = [f"m={kind}", str(self.port), self.proto or DEFAULT_PROTO]
        parts.extend(str(codec.pt) for codec in self.codecs)
        return " ".join(parts) + "\r\n" + "".join(codec.format() for codec in self.codecs)