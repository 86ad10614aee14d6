"""Serial numbers for MANSCDP requests and the callbacks waiting on them."""

from __future__ import annotations

import threading
from typing import Any, Callable

EventCallback = Callable[[Any], None]

_SN_MODULUS = 0xFFFFFF


class SNManager:
    """Hands out serial numbers and keeps callbacks keyed by them."""

    def __init__(self) -> None:
        self._events: dict[int, EventCallback] = {}
        self._value = 0
        self._lock = threading.RLock()

    def add_event(self, sn: int, callback: EventCallback) -> None:
        """Register the callback for responses carrying ``sn``."""
        with self._lock:
            self._events[sn] = callback

    def find_event(self, sn: int) -> EventCallback | None:
        """Return the callback registered for ``sn``, or None."""
        with self._lock:
            return self._events.get(sn)

    def remove_event(self, sn: int) -> None:
        """Forget the callback for ``sn`` if there is one."""
        with self._lock:
            self._events.pop(sn, None)

    def next_sn(self) -> int:
        """Return the next serial number that has no callback registered."""
        with self._lock:
            for _ in range(_SN_MODULUS):
                self._value = (self._value + 1) % _SN_MODULUS
                if self._value not in self._events:
                    return self._value
        raise RuntimeError("no free serial number")