"""Forwarding sinks: copies of a stream sent to a parent platform or a talk peer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .stream import SetupType, StreamWaiting, _dump, _load_object, _parse_dialog
from .stream_id import StreamID


@dataclass
class Sink(StreamWaiting):
    """A cascaded or broadcast forward of a stream."""

    id: str = ""  # sink id on the media server
    stream: StreamID = StreamID("")  # id of the stream being forwarded
    sink_stream: StreamID = StreamID("")  # broadcast only: unique id per device
    protocol: str = ""  # gb_cascaded_forward/gb_talk_forward
    dialog: str | None = None  # SIP request of the forwarding session
    server_addr: str = ""  # address of the parent platform
    create_time: int = 0
    setup_type: SetupType = SetupType.UDP

    def to_json(self) -> str:
        """Return the JSON record of the sink."""
        value: dict[str, Any] = {
            "id": self.id,
            "stream": str(self.stream),
            "sink_stream": str(self.sink_stream),
        }
        if self.protocol:
            value["protocol"] = self.protocol
        if self.server_addr:
            value["server_addr"] = self.server_addr
        value["create_time"] = self.create_time
        value["SetupType"] = int(self.setup_type)
        if self.dialog:
            value["dialog"] = self.dialog
        return _dump(value)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Sink":
        """Build a sink from its JSON record; an unparsable dialog is dropped."""
        value = _load_object(data)
        return cls(
            id=value.get("id", ""),
            stream=StreamID(value.get("stream", "")),
            sink_stream=StreamID(value.get("sink_stream", "")),
            protocol=value.get("protocol", ""),
            dialog=_parse_dialog(value.get("dialog", "")),
            server_addr=value.get("server_addr", ""),
            create_time=int(value.get("create_time", 0)),
            setup_type=SetupType(value.get("SetupType", 0)),
        )