"""Registry of live streams, keyed by stream id and by SIP Call-ID."""

from __future__ import annotations

import threading

from .stream import Stream, dialog_call_id
from .stream_id import StreamID


class StreamManager:
    """Thread-safe lookup of streams by id and by the Call-IDs bound to them."""

    def __init__(self) -> None:
        self._streams: dict[StreamID, Stream] = {}
        self._call_ids: dict[str, Stream] = {}
        self._lock = threading.RLock()

    def add(self, stream: Stream) -> tuple[Stream | None, bool]:
        """Add a stream; if one with the same id exists return (old, False)."""
        with self._lock:
            old = self._streams.get(stream.id)
            if old is not None:
                return old, False
            self._streams[stream.id] = stream
            return None, True

    def add_with_call_id(self, call_id: str, stream: Stream) -> bool:
        """Bind a Call-ID to a stream; return False if it is already bound."""
        with self._lock:
            if call_id in self._call_ids:
                return False
            self._call_ids[call_id] = stream
            return True

    def find(self, stream_id: StreamID) -> Stream | None:
        """Return the stream with this id, or None."""
        with self._lock:
            return self._streams.get(stream_id)

    def find_with_call_id(self, call_id: str) -> Stream | None:
        """Return the stream bound to this Call-ID, or None."""
        with self._lock:
            return self._call_ids.get(call_id)

    def remove(self, stream_id: StreamID) -> Stream | None:
        """Remove a stream and its dialog's Call-ID.

        The stream is returned only when it had a dialog; a stream without
        one is still removed but None is returned.
        """
        with self._lock:
            stream = self._streams.pop(stream_id, None)
            if stream is None or stream.dialog is None:
                return None
            call_id = dialog_call_id(stream.dialog)
            if call_id is not None:
                self._call_ids.pop(call_id, None)
            return stream

    def remove_with_call_id(self, call_id: str) -> Stream | None:
        """Remove the stream bound to this Call-ID and return it, or None."""
        with self._lock:
            stream = self._call_ids.pop(call_id, None)
            if stream is None:
                return None
            self._streams.pop(stream.id, None)
            return stream

    def all(self) -> list[Stream]:
        """Return every registered stream."""
        with self._lock:
            return list(self._streams.values())

    def pop_all(self) -> list[Stream]:
        """Return every registered stream and clear the registry."""
        with self._lock:
            streams = list(self._streams.values())
            self._streams = {}
            self._call_ids = {}
            return streams