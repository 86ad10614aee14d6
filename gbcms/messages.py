"""MANSCDP message bodies exchanged in SIP MESSAGE requests."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Callable
from xml.etree.ElementTree import Element

STATUS_ON = "ON"
STATUS_OFF = "OFF"

RTSP_MESSAGE_TYPE = "application/RTSP"

QUERY_RECORD_FORMAT = (
    '<?xml version="1.0"?>\r\n'
    "<Query>\r\n"
    "<CmdType>RecordInfo</CmdType>\r\n"
    "<SN>%d</SN>\r\n"
    "<DeviceID>%s</DeviceID>\r\n"
    "<StartTime>%s</StartTime>\r\n"
    "<EndTime>%s</EndTime>\r\n"
    "<Type>%s</Type>\r\n"
    "</Query>\r\n"
)

SEEK_BODY_FORMAT = "PLAY RTSP/1.0\r\nCSeq: %d\r\nRange: npt=%d-\r\n"

_INT = re.compile(r"[+-]?[0-9]+")
_UINT = re.compile(r"[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_LIMIT = 1 << 63
_UINT64_LIMIT = 1 << 64


def _parse_int(text: str) -> int:
    if text == "":
        return 0
    stripped = text.strip()
    if not _INT.fullmatch(stripped):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(stripped)
    if not _INT64_MIN <= value < _INT64_LIMIT:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_uint(text: str) -> int:
    if text == "":
        return 0
    stripped = text.strip()
    if not _UINT.fullmatch(stripped):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(stripped)
    if value >= _UINT64_LIMIT:
        raise ValueError(f"unsigned integer out of range: {text!r}")
    return value


def _text(element: Element) -> str:
    """Return the character data directly inside an element."""
    return (element.text or "") + "".join(child.tail or "" for child in element)


@dataclass(frozen=True)
class _Spec:
    tag: str
    convert: Any = str
    attr: bool = False
    many: bool = False


class _XmlNode:
    """Base for dataclasses that are filled from an XML element."""

    xml_root = ""

    @classmethod
    def _from_element(cls, element: Element):
        if cls.xml_root and element.tag != cls.xml_root:
            raise ValueError(
                f"expected element type <{cls.xml_root}> but have <{element.tag}>"
            )
        last: dict[str, Element] = {}
        grouped: dict[str, list[Element]] = {}
        for child in element:
            last[child.tag] = child
            grouped.setdefault(child.tag, []).append(child)

        values: dict[str, Any] = {}
        for item in dataclasses.fields(cls):
            spec = item.metadata.get("xml")
            if spec is None:
                continue
            if spec.attr:
                raw = element.get(spec.tag)
                if raw is not None:
                    values[item.name] = spec.convert(raw)
            elif spec.many:
                values[item.name] = [
                    _decode_child(spec.convert, child)
                    for child in grouped.get(spec.tag, ())
                ]
            elif spec.tag in last:
                values[item.name] = _decode_child(spec.convert, last[spec.tag])
        return cls(**values)


def _is_node(convert: Any) -> bool:
    return isinstance(convert, type) and issubclass(convert, _XmlNode)


def _decode_child(convert: Callable[..., Any], child: Element) -> Any:
    if _is_node(convert):
        return convert._from_element(child)
    return convert(_text(child))


def _xml(tag: str, convert: Callable[..., Any] = str, *, attr: bool = False, many: bool = False):
    metadata = {"xml": _Spec(tag, convert, attr, many)}
    if many:
        return field(default_factory=list, metadata=metadata)
    if _is_node(convert):
        return field(default_factory=convert, metadata=metadata)
    default = 0 if convert in (_parse_int, _parse_uint) else ""
    return field(default=default, metadata=metadata)


@dataclass
class Channel(_XmlNode):
    """A channel (camera, alarm input, ...) listed in a catalog."""

    device_id: str = _xml("DeviceID")
    name: str = _xml("Name")
    manufacturer: str = _xml("Manufacturer")
    model: str = _xml("Model")
    owner: str = _xml("Owner")
    civil_code: str = _xml("CivilCode")
    block: str = _xml("Block")
    address: str = _xml("Address")
    parental: str = _xml("Parental")
    parent_id: str = _xml("ParentID")
    safety_way: str = _xml("SafetyWay")
    register_way: str = _xml("RegisterWay")
    cert_num: str = _xml("CertNum")
    certifiable: str = _xml("Certifiable")
    err_code: str = _xml("ErrCode")
    end_time: str = _xml("EndTime")
    secrecy: str = _xml("Secrecy")
    ip_address: str = _xml("IPAddress")
    port: str = _xml("Port")
    password: str = _xml("Password")
    status: str = _xml("Status")
    longitude: str = _xml("Longitude")
    latitude: str = _xml("Latitude")
    setup_type: int = 0

    def online(self) -> bool:
        """Return True if the channel reports itself as on line."""
        return self.status == STATUS_ON


@dataclass
class BaseMessage(_XmlNode):
    """The fields shared by every query, notification and response."""

    cmd_type: str = _xml("CmdType")
    sn: int = _xml("SN", _parse_int)
    device_id: str = _xml("DeviceID")


@dataclass
class DeviceList(_XmlNode):
    """The list of channels in a catalog response."""

    num: int = _xml("Num", _parse_int, attr=True)
    devices: list[Channel] = _xml("Item", Channel, many=True)


@dataclass
class _Response(BaseMessage):
    xml_root = "Response"

    result: str = _xml("Result")
    info: str = _xml("Info")


@dataclass
class CatalogResponse(_Response):
    """Answer to a catalog query."""

    sum_num: int = _xml("SumNum", _parse_int)
    device_list: DeviceList = _xml("DeviceList", DeviceList)


@dataclass
class DeviceInfoResponse(_Response):
    """Answer to a device information query."""

    device_name: str = _xml("DeviceName")
    manufacturer: str = _xml("Manufacturer")
    model: str = _xml("Model")
    firmware: str = _xml("Firmware")
    channel: str = _xml("Channel")


@dataclass
class DeviceStatusResponse(_Response):
    """Answer to a device status query."""

    online: str = _xml("Online")
    status: str = _xml("Status")
    reason: str = _xml("Reason")
    encode: str = _xml("Encode")
    record: str = _xml("Record")
    device_time: str = _xml("DeviceTime")


@dataclass
class RecordInfo(_XmlNode):
    """One recording found by a record query."""

    file_size: int = _xml("FileSize", _parse_uint)
    start_time: str = _xml("StartTime")
    end_time: str = _xml("EndTime")
    file_path: str = _xml("FilePath")
    resource_type: str = _xml("ResourceType")
    resource_id: str = _xml("ResourceId")
    recorder_id: str = _xml("RecorderId")
    user_id: str = _xml("UserId")
    user_name: str = _xml("UserName")
    resource_name: str = _xml("ResourceName")
    resource_length: str = _xml("ResourceLength")
    import_time: str = _xml("ImportTime")
    resource_url: str = _xml("ResourceUrl")
    remark: str = _xml("Remark")
    level: str = _xml("Level")
    boot_time: str = _xml("BootTime")
    shutdown_time: str = _xml("ShutdownTime")


@dataclass
class RecordList(_XmlNode):
    """The list of recordings in a record query response."""

    num: int = _xml("Num", _parse_int, attr=True)
    records: list[RecordInfo] = _xml("Item", RecordInfo, many=True)


@dataclass
class QueryRecordInfoResponse(BaseMessage):
    """Answer to a record query."""

    xml_root = "Response"

    sum_num: int = _xml("SumNum", _parse_int)
    record_list: RecordList = _xml("RecordList", RecordList)


def format_record_query(
    sn: int, channel_id: str, start_time: str, end_time: str, record_type: str
) -> str:
    """Return the body of a RecordInfo query for a channel and time range."""
    return QUERY_RECORD_FORMAT % (sn, channel_id, start_time, end_time, record_type)


def format_seek_body(cseq: int, seconds: int) -> str:
    """Return the RTSP body of a playback seek sent in an INFO request."""
    return SEEK_BODY_FORMAT % (cseq, seconds)