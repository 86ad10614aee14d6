"""SDP session origin (o= line)."""

from __future__ import annotations

from dataclasses import dataclass

from .util import generate_origin_id, is_ipv6

FALLBACK_ADDR = "69.28.157.198"


@dataclass
class Origin:
    """The o= line: user, session id, version and originating address."""

    user: str = ""
    id: str = ""
    version: str = ""
    addr: str = ""

    def format(self) -> str:
        """Return the o= line, filling in defaults for empty fields."""
        session_id = self.id or generate_origin_id()
        user = self.user or "-"
        version = self.version or session_id
        net = "IP6" if is_ipv6(self.addr) else "IP4"
        addr = self.addr or FALLBACK_ADDR
        return f"o={user} {session_id} {version} IN {net} {addr}\r\n"