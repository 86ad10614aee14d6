# gbcms

Building blocks for a GB/T 28181 video management platform. It is a
library: it has no command-line program.

- `gbcms.sdp.session` – parse and format Session Description Protocol
  bodies (`parse`, `create_sdp`, `SDP`, `SdpError`), with `gbcms.sdp.media`
  (`Media`), `gbcms.sdp.codec` (`Codec`, `standard_codec`, the IANA static
  payload type table) and `gbcms.sdp.origin` (`Origin`).
- `gbcms.sdp.util` – random SIP identifiers (`generate_call_id`,
  `generate_tag`, `generate_branch`, `generate_cseq`,
  `generate_origin_id`) and small socket error checks.
- `gbcms.messages` – MANSCDP message bodies as dataclasses
  (`BaseMessage`, `CatalogResponse`, `DeviceInfoResponse`,
  `DeviceStatusResponse`, `QueryRecordInfoResponse`, `Channel`,
  `RecordInfo`, ...) and the record query / seek bodies
  (`format_record_query`, `format_seek_body`).
- `gbcms.xmlutil` – `decode_xml` for UTF-8 or GB2312/GBK encoded bodies
  (retrying as GBK when the first attempt fails), plus
  `get_root_element_name` and `get_cmd_type` to route a body before
  decoding it.
- `gbcms.stream_id` – `StreamID`, a `str` of the form
  `device/channel[.suffix]` with `device_id()` and `channel_id()`.
- `gbcms.stream` and `gbcms.sink` – `Stream` and `Sink` records with
  `to_json` / `from_json`, sink counting, and `StreamWaiting`, which lets a
  thread block in `wait_for_publish_event(seconds)` until another calls
  `notify_publish(code)` or `cancel_waiting()`.
- `gbcms.stream_manager`, `gbcms.sink_manager`, `gbcms.sn` – thread-safe
  registries of streams (by id and Call-ID), sinks (by stream, Call-ID and
  broadcast stream id) and callbacks waiting on query serial numbers
  (`SNManager.next_sn`).
- `gbcms.redis_store` – `RedisUtils` and a key-scoped `RedisExecutor`
  over a Redis connection, and `start_expired_keys_subscription`.
- `gbcms.subject` – the SIP `Subject` header value.

## Installation

```
pip install .
```

## Parsing and formatting SDP

```python
from gbcms.sdp.session import parse

sdp = parse(
    "v=0\r\n"
    "o=- 2950 2950 IN IP4 192.168.1.64\r\n"
    "s=Play\r\n"
    "c=IN IP4 192.168.1.64\r\n"
    "t=0 0\r\n"
    "m=video 15066 RTP/AVP 96\r\n"
    "a=rtpmap:96 PS/90000\r\n"
    "a=recvonly\r\n"
)
print(sdp.video.port, sdp.video.codecs[0].name)   # 15066 PS
print(sdp.format())
```

Malformed input raises `SdpError` (a `ValueError`). Payload types below 96
without an `a=rtpmap` line are filled in from the IANA table.

## Decoding device messages

```python
from gbcms.messages import CatalogResponse
from gbcms.xmlutil import decode_xml, get_cmd_type, get_root_element_name

body = (
    '<?xml version="1.0" encoding="GB2312"?>\r\n'
    "<Response>\r\n"
    "<CmdType>Catalog</CmdType>\r\n"
    "<SN>1</SN>\r\n"
    "<DeviceID>00000000000000000001</DeviceID>\r\n"
    "<SumNum>1</SumNum>\r\n"
    '<DeviceList Num="1">\r\n'
    "<Item><DeviceID>00000000000000000002</DeviceID><Status>ON</Status></Item>\r\n"
    "</DeviceList>\r\n"
    "</Response>\r\n"
)

print(get_root_element_name(body), get_cmd_type(body))  # Response Catalog
catalog = decode_xml(body.encode("gbk"), CatalogResponse)
print(catalog.sn, catalog.device_list.devices[0].online())  # 1 True
```

`decode_xml` raises `ValueError` if the body cannot be decoded.

## Streams and sinks

```python
from gbcms.stream import Stream
from gbcms.stream_id import StreamID
from gbcms.stream_manager import StreamManager

streams = StreamManager()
stream = Stream(id=StreamID("00000000000000000001/00000000000000000002"))
streams.add(stream)                 # (None, True)
streams.add_with_call_id("call-1", stream)
stream.increase_sink_count()        # 1
restored = Stream.from_json(stream.to_json())
```

A dialog is kept as the text of its SIP request; its Call-ID is read from
the `Call-ID` (or `i`) header.

## Redis

```python
from gbcms.redis_store import RedisUtils

with RedisUtils("localhost:6379").create_executor() as executor:
    executor.db(1).key("devices").hset("name", "value")
    print(executor.hgetall())
```

Each call to `do` selects the executor's db first. Failed commands raise
`redis.exceptions.RedisError`.

## What the package does not do

It has no SIP server or user agent: it does not send or receive SIP
requests, register with parent platforms, or answer device registrations.
It does not talk to a media server, serve an HTTP API, or decide what to
store in Redis; `Stream` and `Sink` only report sink-count changes through
an optional `on_sink_count_changed` callback.

## Running the tests

```
pip install .[test]
pytest
```