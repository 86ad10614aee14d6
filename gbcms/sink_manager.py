"""Registry of forwarding sinks by stream, Call-ID and broadcast stream id."""

from __future__ import annotations

import threading

from .sink import Sink
from .stream import dialog_call_id
from .stream_id import StreamID


class SinkManager:
    """Thread-safe lookup of sinks."""

    def __init__(self) -> None:
        self._stream_sinks: dict[StreamID, dict[str, Sink]] = {}
        self._call_ids: dict[str, Sink] = {}
        self._sink_stream_ids: dict[StreamID, Sink] = {}
        self._lock = threading.RLock()

    def add(self, sink: Sink) -> bool:
        """Register a sink under its stream and dialog Call-ID.

        Returns False if the sink has no dialog, or its Call-ID or id is
        already taken. Raises ValueError if the dialog has no Call-ID.
        """
        with self._lock:
            stream_sinks = self._stream_sinks.setdefault(sink.stream, {})
            if sink.dialog is None:
                return False
            call_id = dialog_call_id(sink.dialog)
            if call_id is None:
                raise ValueError("sink dialog has no Call-ID")
            if call_id in self._call_ids or sink.id in stream_sinks:
                return False
            self._call_ids[call_id] = sink
            stream_sinks[sink.id] = sink
            return True

    def add_with_sink_stream_id(self, sink: Sink) -> bool:
        """Register a broadcast sink by its sink stream id; False if taken."""
        with self._lock:
            if sink.sink_stream in self._sink_stream_ids:
                return False
            self._sink_stream_ids[sink.sink_stream] = sink
            return True

    def _remove_sink(self, sink: Sink) -> None:
        self._stream_sinks.get(sink.stream, {}).pop(sink.id, None)
        call_id = dialog_call_id(sink.dialog)
        if call_id is not None:
            self._call_ids.pop(call_id, None)
        if sink.sink_stream:
            self._sink_stream_ids.pop(sink.sink_stream, None)

    def remove(self, stream: StreamID, sink_id: str) -> Sink | None:
        """Remove and return the sink with this id on the stream, or None."""
        with self._lock:
            sink = self._stream_sinks.get(stream, {}).get(sink_id)
            if sink is not None:
                self._remove_sink(sink)
            return sink

    def remove_with_call_id(self, call_id: str) -> Sink | None:
        """Remove and return the sink whose dialog has this Call-ID, or None."""
        with self._lock:
            sink = self._call_ids.get(call_id)
            if sink is not None:
                self._remove_sink(sink)
            return sink

    def remove_with_sink_stream_id(self, sink_stream_id: StreamID) -> Sink | None:
        """Remove and return the broadcast sink with this id, or None."""
        with self._lock:
            sink = self._sink_stream_ids.get(sink_stream_id)
            if sink is not None:
                self._remove_sink(sink)
            return sink

    def find(self, stream: StreamID, sink_id: str) -> Sink | None:
        """Return the sink with this id on the stream, or None."""
        with self._lock:
            return self._stream_sinks.get(stream, {}).get(sink_id)

    def find_with_call_id(self, call_id: str) -> Sink | None:
        """Return the sink whose dialog has this Call-ID, or None."""
        with self._lock:
            return self._call_ids.get(call_id)

    def find_with_sink_stream_id(self, sink_stream_id: StreamID) -> Sink | None:
        """Return the broadcast sink with this id, or None."""
        with self._lock:
            return self._sink_stream_ids.get(sink_stream_id)

    def pop_sinks(self, stream: StreamID) -> list[Sink]:
        """Remove and return every sink of a stream."""
        with self._lock:
            stream_sinks = self._stream_sinks.get(stream)
            if stream_sinks is None:
                return []
            sinks = list(stream_sinks.values())
            for sink in sinks:
                self._remove_sink(sink)
            del self._stream_sinks[stream]
            return sinks