"""Session Description Protocol payloads: parsing and formatting."""

from __future__ import annotations

import dataclasses
import ipaddress
import logging
import re
from dataclasses import dataclass, field

from .codec import Codec, standard_codec
from .media import Media
from .origin import FALLBACK_ADDR, Origin
from .util import generate_origin_id, is_ipv6

CONTENT_TYPE = "application/sdp"
MAX_LENGTH = 1450

DEFAULT_SESSION = "pokémon"
FALLBACK_SESSION = "my people call themselves dark angels"
DEFAULT_TIME = "0 0"

_log = logging.getLogger(__name__)

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"[0-9]+")


class SdpError(ValueError):
    """Raised when an SDP payload cannot be parsed."""


@dataclass
class SDP:
    """A Session Description Protocol payload as carried in SIP messages."""

    origin: Origin = field(default_factory=Origin)
    addr: str = ""  # address from the c= line
    audio: Media | None = None
    video: Media | None = None
    session: str = ""  # s= session name
    time: str = ""  # t= active time
    ptime: int = 0  # packet time in milliseconds
    send_only: bool = False
    recv_only: bool = False
    attrs: list[tuple[str, str]] = field(default_factory=list)  # unrecognised a= lines
    other: list[tuple[str, str]] = field(default_factory=list)  # unrecognised fields

    def content_type(self) -> str:
        """Return the MIME type of an SDP body."""
        return CONTENT_TYPE

    def data(self) -> bytes:
        """Return the formatted SDP encoded as UTF-8."""
        return self.format().encode("utf-8")

    def format(self) -> str:
        """Return the SDP text, filling in defaults for empty fields."""
        lines = ["v=0\r\n", self.origin.format()]
        lines.append(f"s={self.session or FALLBACK_SESSION}\r\n")
        net = "IP6" if is_ipv6(self.addr) else "IP4"
        lines.append(f"c=IN {net} {self.addr or FALLBACK_ADDR}\r\n")
        lines.append(f"t={self.time or DEFAULT_TIME}\r\n")
        if self.audio is not None:
            lines.append(self.audio.format("audio"))
        if self.video is not None:
            lines.append(self.video.format("video"))
        for name, value in self.attrs:
            lines.append(f"a={name}:{value}\r\n" if value else f"a={name}\r\n")
        if self.ptime > 0:
            lines.append(f"a=ptime:{self.ptime}\r\n")
        if self.send_only:
            lines.append("a=sendonly\r\n")
        elif self.recv_only:
            lines.append("a=recvonly\r\n")
        else:
            lines.append("a=sendrecv\r\n")
        lines.extend(f"{name}={value}\r\n" for name, value in self.other)
        return "".join(lines)

    def __str__(self) -> str:
        return self.format()


def create_sdp(host: str, port: int, *args: Codec) -> SDP:
    """Create a basic audio SDP for the given address and codecs."""
    addr = str(ipaddress.ip_address(host))
    port = int(port)
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    origin_id = generate_origin_id()
    return SDP(
        origin=Origin(id=origin_id, version=origin_id, addr=addr),
        addr=addr,
        audio=Media(
            proto="RTP/AVP",
            port=port,
            codecs=[dataclasses.replace(codec) for codec in args],
        ),
    )


def _atoi(text: str) -> int | None:
    return int(text) if _SIGNED_INT.fullmatch(text) else None


def _parse_uint(text: str, bits: int) -> int | None:
    if not _UNSIGNED_INT.fullmatch(text):
        return None
    value = int(text)
    return value if value < (1 << bits) else None


def parse(text: str) -> SDP:
    """Parse SDP text into an :class:`SDP`; raise :class:`SdpError` if invalid."""
    sdp = SDP(session=DEFAULT_SESSION, time=DEFAULT_TIME)

    if not text.startswith("v=0\r\n"):
        raise SdpError("sdp must start with v=0\\r\\n")
    lines = text[5:].split("\r\n")
    if len(lines) < 2:
        raise SdpError("too few lines in sdp")

    audio_info = ""
    video_info = ""
    rtpmaps: list[str] = []
    fmtps: list[str] = []
    ok_origin = False
    ok_conn = False

    for line in lines:
        if line == "":
            continue
        if len(line) < 3 or line[1] != "=":
            _log.warning("Bad line in SDP: %s", line)
            continue
        kind, value = line[0], line[2:]
        if kind == "m":
            if value.startswith("audio "):
                audio_info = value[6:]
            elif value.startswith("video "):
                video_info = value[6:]
            else:
                _log.warning("Unsupported SDP media line: %s", value)
        elif kind == "s":
            sdp.session = value
        elif kind == "t":
            sdp.time = value
        elif kind == "c":
            if ok_conn:
                _log.warning("Dropping extra c= line in sdp: %s", line)
                continue
            sdp.addr = _parse_conn_line(line)
            ok_conn = True
        elif kind == "o":
            sdp.origin = _parse_origin_line(line)
            ok_origin = True
        elif kind == "a":
            _parse_attribute(sdp, value, rtpmaps, fmtps)
        else:
            sdp.other.append((kind, value))

    if not ok_conn or not ok_origin:
        raise SdpError("sdp missing mandatory information")

    if audio_info:
        sdp.audio = _build_media(audio_info, rtpmaps, fmtps)
    if video_info:
        sdp.video = _build_media(video_info, rtpmaps, fmtps)

    if sdp.audio is None and sdp.video is None:
        raise SdpError("sdp has no audio or video information")
    return sdp


def _parse_attribute(sdp: SDP, value: str, rtpmaps: list[str], fmtps: list[str]) -> None:
    if value.startswith("rtpmap:"):
        rtpmaps.append(value[7:])
    elif value.startswith("fmtp:"):
        fmtps.append(value[5:])
    elif value.startswith("ptime:"):
        ptime = _atoi(value[6:])
        if ptime is not None and ptime > 0:
            sdp.ptime = ptime
        else:
            _log.warning("Invalid SDP Ptime value %s", value[6:])
    elif value == "sendrecv":
        pass
    elif value == "sendonly":
        sdp.send_only = True
    elif value == "recvonly":
        sdp.recv_only = True
    else:
        name, sep, rest = value.partition(":")
        if sep and not name:
            _log.warning("Evil SDP attribute: %s", value)
        else:
            sdp.attrs.append((name, rest))


def _build_media(info: str, rtpmaps: list[str], fmtps: list[str]) -> Media:
    port, proto, pts = _parse_media_info(info)
    return Media(proto=proto, port=port, codecs=_populate_codecs(pts, rtpmaps, fmtps))


def _populate_codecs(pts: list[int], rtpmaps: list[str], fmtps: list[str]) -> list[Codec]:
    """Turn m= payload types into codecs, using IANA defaults where rtpmap is missing."""
    codecs = []
    for pt in pts:
        codec = Codec(pt=pt)
        prefix = f"{pt} "
        rtpmap = next((entry for entry in rtpmaps if entry.startswith(prefix)), None)
        if rtpmap is not None:
            _parse_rtpmap_info(codec, rtpmap[len(prefix):])
        if not codec.name:
            if pt >= 96:
                raise SdpError("dynamic codec missing rtpmap")
            known = standard_codec(pt)
            if known is None:
                raise SdpError(f"unknown iana codec id: {pt}")
            codec = known
        fmtp = next((entry for entry in fmtps if entry.startswith(prefix)), None)
        if fmtp is not None:
            codec.fmtp = fmtp[len(prefix):]
        codecs.append(codec)
    return codecs


def _parse_rtpmap_info(codec: Codec, text: str) -> None:
    """Fill a codec from text such as ``PCMU/8000`` or ``L16/16000/2``."""
    tokens = text.split("/")
    if len(tokens) < 2:
        raise SdpError("invalid rtpmap")
    codec.name = tokens[0]
    rate = _atoi(tokens[1])
    if rate is None:
        raise SdpError("invalid rtpmap rate")
    codec.rate = rate
    if len(tokens) >= 3:
        codec.param = tokens[2]


def _parse_media_info(text: str) -> tuple[int, str, list[int]]:
    """Parse the part of an m= line such as ``30126 RTP/AVP 0 101``."""
    tokens = text.split(" ")
    if len(tokens) < 3:
        raise SdpError("invalid m= line")
    port_text = tokens[0]
    slash = port_text.find("/")
    if slash > 0:
        port_text = port_text[:slash]
    port = _parse_uint(port_text, 16)
    if port is None:
        raise SdpError("invalid m= port")
    pts = []
    for token in tokens[2:]:
        pt = _parse_uint(token, 8)
        if pt is None:
            raise SdpError("invalid pt in m= line")
        pts.append(pt)
    return port, tokens[1], pts


def _parse_conn_line(line: str) -> str:
    """Parse a line such as ``c=IN IP4 10.0.0.38`` and return the address."""
    tokens = line[2:].split(" ")
    if len(tokens) != 3:
        raise SdpError("invalid conn line")
    if tokens[0] != "IN" or tokens[1] not in ("IP4", "IP6"):
        raise SdpError("unsupported conn net type")
    if "/" in tokens[2]:
        raise SdpError("multicast address in c= line D:")
    return tokens[2]


def _parse_origin_line(line: str) -> Origin:
    """Parse a line such as ``o=root 31589 31589 IN IP4 10.0.0.38``."""
    tokens = line[2:].split(" ")
    if len(tokens) != 6:
        raise SdpError("invalid origin line")
    if tokens[3] != "IN" or tokens[4] not in ("IP4", "IP6"):
        raise SdpError("unsupported origin net type")
    if "/" in tokens[5]:
        raise SdpError("multicast address in o= line D:")
    return Origin(user=tokens[0], id=tokens[1], version=tokens[2], addr=tokens[5])