"""Helpers for SIP/SDP identifiers and socket error checks."""

from __future__ import annotations

import errno
import secrets

_CLOSED_SOCKET_MESSAGE = "use of closed network connection"
_MAX_PORT = 0xFFFF


def is_refused(err: BaseException) -> bool:
    """Return True if the error is a refused connection (ICMP port unreachable)."""
    if isinstance(err, ConnectionRefusedError):
        return True
    return isinstance(err, OSError) and err.errno == errno.ECONNREFUSED


def is_use_of_closed(err: BaseException) -> bool:
    """Return True if the error came from using an already closed socket."""
    return _CLOSED_SOCKET_MESSAGE in str(err)


def is_ipv6(ip: str) -> bool:
    """Return True if the address contains a colon."""
    return ":" in ip


def generate_cseq() -> int:
    """Return a random CSeq number in the range [0, 50000)."""
    return secrets.randbelow(50000)


def generate_tag() -> str:
    """Return a 48-bit random hex string such as ``27c97271d363``."""
    return secrets.token_hex(6)


def generate_branch() -> str:
    """Return a SIP 2.0 Via branch value carrying the RFC 3261 magic cookie."""
    return "z9hG4bK-" + generate_tag()


def generate_call_id() -> str:
    """Return a random UUID4-shaped Call-ID, e.g. ``f47ac10b-58cc-4372-a567-0e02b2c3d479``."""
    digits = secrets.token_hex(15)
    return (
        f"{digits[:8]}-{digits[8:12]}-4{digits[12:15]}"
        f"-a{digits[15:18]}-{digits[18:]}"
    )


def generate_origin_id() -> str:
    """Return a random unsigned 32-bit number as a string, for the SDP o= line."""
    return str(secrets.randbits(32))


def portstr(port: int) -> str:
    """Format a port number, which must fit in 16 bits."""
    value = int(port)
    if not 0 <= value <= _MAX_PORT:
        raise ValueError(f"port out of range: {port}")
    return str(value)