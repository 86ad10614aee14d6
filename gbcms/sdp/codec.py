"""RTP codec descriptions and the IANA static payload type table."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass


@dataclass
class Codec:
    """One codec offered in an SDP media section."""

    pt: int = 0  # 7-bit RTP payload type
    name: str = ""  # e.g. PCMU, G729, telephone-event
    rate: int = 0  # clock rate in hertz
    param: str = ""  # optional encoding parameter, e.g. channel count
    fmtp: str = ""  # optional format parameters, e.g. "0-16" for DTMF

    def format(self) -> str:
        """Return the ``a=rtpmap`` line, followed by ``a=fmtp`` if set."""
        rtpmap = f"a=rtpmap:{self.pt} {self.name}/{self.rate}"
        if self.param:
            rtpmap += f"/{self.param}"
        lines = [rtpmap]
        if self.fmtp:
            lines.append(f"a=fmtp:{self.pt} {self.fmtp}")
        return "".join(line + "\r\n" for line in lines)


ULAW_CODEC = Codec(pt=0, name="PCMU", rate=8000)
DTMF_CODEC = Codec(pt=101, name="telephone-event", rate=8000, fmtp="0-16")
OPUS = Codec(pt=111, name="opus", rate=48000, param="2")

# IANA static payload types; their rtpmap lines may be omitted from an SDP.
STANDARD_CODECS: dict[int, Codec] = {
    0: ULAW_CODEC,
    3: Codec(pt=3, name="GSM", rate=8000),
    4: Codec(pt=4, name="G723", rate=8000),
    5: Codec(pt=5, name="DVI4", rate=8000),
    6: Codec(pt=6, name="DVI4", rate=16000),
    7: Codec(pt=7, name="LPC", rate=8000),
    8: Codec(pt=8, name="PCMA", rate=8000),
    9: Codec(pt=9, name="G722", rate=8000),
    10: Codec(pt=10, name="L16", rate=44100, param="2"),
    11: Codec(pt=11, name="L16", rate=44100),
    12: Codec(pt=12, name="QCELP", rate=8000),
    13: Codec(pt=13, name="CN", rate=8000),
    14: Codec(pt=14, name="MPA", rate=90000),
    15: Codec(pt=15, name="G728", rate=8000),
    16: Codec(pt=16, name="DVI4", rate=11025),
    17: Codec(pt=17, name="DVI4", rate=22050),
    18: Codec(pt=18, name="G729", rate=8000),
    25: Codec(pt=25, name="CelB", rate=90000),
    26: Codec(pt=26, name="JPEG", rate=90000),
    28: Codec(pt=28, name="nv", rate=90000),
    31: Codec(pt=31, name="H261", rate=90000),
    32: Codec(pt=32, name="MPV", rate=90000),
    33: Codec(pt=33, name="MP2T", rate=90000),
    34: Codec(pt=34, name="H263", rate=90000),
}


def standard_codec(pt: int) -> Codec | None:
    """Return a fresh copy of the IANA codec for a static payload type, or None."""
    codec = STANDARD_CODECS.get(pt)
    return dataclasses.replace(codec) if codec is not None else None