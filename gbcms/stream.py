"""Media streams pulled from devices and the wait for their publish event."""

from __future__ import annotations

import json
import logging
import queue
import re
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable

from .stream_id import StreamID

_log = logging.getLogger(__name__)

_REQUEST_LINE = re.compile(r"[A-Z]+ \S+ SIP/2\.0")
_CALL_ID_NAMES = ("call-id", "i")


class SetupType(IntEnum):
    """How the media connection is set up."""

    UDP = 0
    PASSIVE = 1
    ACTIVE = 2

    def __str__(self) -> str:
        return self.name.lower()


DEFAULT_SETUP_TYPE = SetupType.PASSIVE


def _header_lines(dialog: str) -> list[str]:
    lines = dialog.replace("\r\n", "\n").split("\n")
    headers = []
    for line in lines[1:]:
        if line == "":
            break
        headers.append(line)
    return headers


def dialog_call_id(dialog: str | None) -> str | None:
    """Return the Call-ID of a SIP dialog request, or None if it has none."""
    if dialog is None:
        return None
    for line in _header_lines(dialog):
        name, sep, value = line.partition(":")
        if sep and name.strip().lower() in _CALL_ID_NAMES:
            return value.strip()
    return None


def _parse_dialog(text: str) -> str | None:
    """Return the dialog text if it holds a SIP request, otherwise None."""
    if len(text) <= 1:
        return None
    first_line = text.replace("\r\n", "\n").split("\n", 1)[0]
    if not _REQUEST_LINE.fullmatch(first_line):
        _log.error("failed to parse dialog from json: %s", text)
        return None
    return text


def _load_object(data: str | bytes) -> dict[str, Any]:
    value = json.loads(data)
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    return value


def _dump(value: dict[str, Any]) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


@dataclass
class StreamWaiting:
    """Lets one thread wait for the media server to report a publish."""

    _waiter: "queue.SimpleQueue[int] | None" = field(
        default=None, init=False, repr=False, compare=False
    )
    _waiter_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def wait_for_publish_event(self, seconds: float) -> int:
        """Block until a publish code arrives; return -1 on timeout or cancel."""
        waiter: queue.SimpleQueue[int] = queue.SimpleQueue()
        with self._waiter_lock:
            self._waiter = waiter
        try:
            return waiter.get(timeout=seconds)
        except queue.Empty:
            return -1
        finally:
            with self._waiter_lock:
                if self._waiter is waiter:
                    self._waiter = None

    def _deliver(self, code: int) -> bool:
        with self._waiter_lock:
            waiter, self._waiter = self._waiter, None
        if waiter is None:
            return False
        waiter.put(code)
        return True

    def notify_publish(self, code: int) -> bool:
        """Hand ``code`` to the waiting thread; return False if none waits."""
        return self._deliver(code)

    def cancel_waiting(self) -> bool:
        """Wake the waiting thread with -1; return False if none waits."""
        return self._deliver(-1)


@dataclass
class Stream(StreamWaiting):
    """A stream published to the media server, usually from a device channel."""

    id: StreamID = StreamID("")
    protocol: str = ""  # rtmp/28181/1078/gb_talk
    dialog: str | None = None  # SIP request of the session carrying the stream
    create_time: int = 0
    sink_count: int = 0  # pulling sinks, cascaded forwards included
    setup_type: SetupType = SetupType.UDP
    urls: list[str] = field(default_factory=list)
    on_sink_count_changed: Callable[["Stream"], None] | None = field(
        default=None, repr=False, compare=False
    )
    _count_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def to_json(self) -> str:
        """Return the JSON record of the stream."""
        value: dict[str, Any] = {"id": str(self.id)}
        if self.protocol:
            value["protocol"] = self.protocol
        value["create_time"] = self.create_time
        value["sink_count"] = self.sink_count
        value["SetupType"] = int(self.setup_type)
        if self.dialog:
            value["dialog"] = self.dialog
        return _dump(value)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Stream":
        """Build a stream from its JSON record; an unparsable dialog is dropped."""
        value = _load_object(data)
        return cls(
            id=StreamID(value.get("id", "")),
            protocol=value.get("protocol", ""),
            dialog=_parse_dialog(value.get("dialog", "")),
            create_time=int(value.get("create_time", 0)),
            sink_count=int(value.get("sink_count", 0)),
            setup_type=SetupType(value.get("SetupType", 0)),
        )

    def _change_sink_count(self, delta: int) -> int:
        with self._count_lock:
            self.sink_count += delta
            count = self.sink_count
        _log.info("sink count: %d stream: %s", count, self.id)
        if self.on_sink_count_changed is not None:
            self.on_sink_count_changed(self)
        return count

    def increase_sink_count(self) -> int:
        """Add one sink and return the new count."""
        return self._change_sink_count(1)

    def decrease_sink_count(self) -> int:
        """Remove one sink and return the new count."""
        return self._change_sink_count(-1)