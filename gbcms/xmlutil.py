"""Decoding of XML message bodies that may be GB2312/GBK encoded."""

from __future__ import annotations

import codecs
import re
import xml.etree.ElementTree as ET
from typing import TypeVar

CMD_TAG_START = "<CmdType>"
CMD_TAG_END = "</CmdType>"

_ENCODING_DECL = re.compile(
    rb"""\A\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z0-9._:-]+)["']"""
)
_DECLARATION = re.compile(r"\A\s*<\?xml.*?\?>", re.DOTALL)
_CHARSET_ALIASES = {
    "gb2312": "gbk",
    "gb_2312": "gbk",
    "gb_2312-80": "gbk",
    "csgb2312": "gbk",
    "chinese": "gbk",
    "x-gbk": "gbk",
    "gbk": "gbk",
    "utf8": "utf-8",
}

T = TypeVar("T")


def gbk_to_utf8(data: bytes) -> bytes:
    """Re-encode GBK bytes as UTF-8, replacing invalid sequences."""
    return bytes(data).decode("gbk", errors="replace").encode("utf-8")


def _codec_name(label: str) -> str:
    name = _CHARSET_ALIASES.get(label.lower(), label)
    try:
        return codecs.lookup(name).name
    except LookupError as exc:
        raise ValueError(f"unsupported charset: {label}") from exc


def _decode(data: bytes, message_type: type[T], encoding: str | None) -> T:
    if encoding is None:
        match = _ENCODING_DECL.match(data)
        encoding = _codec_name(match.group(1).decode("ascii")) if match else "utf-8-sig"
    text = _DECLARATION.sub("", data.decode(encoding), count=1)
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ValueError(f"malformed XML: {exc}") from exc
    return message_type._from_element(root)


def decode_xml(data: bytes | str, message_type: type[T]) -> T:
    """Decode an XML body into ``message_type``, retrying as GBK on failure.

    Raises ValueError if the body cannot be decoded either way.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        return _decode(raw, message_type, None)
    except ValueError:
        return _decode(gbk_to_utf8(raw), message_type, "utf-8")


def get_root_element_name(data: str) -> str:
    """Return the root element name, read from the second line of the body.

    Lines are taken in pairs and the second of each pair is used, so an
    empty second line moves on to the fourth line.
    """
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    pairs = iter(lines)
    for _first, line in zip(pairs, pairs):
        if not line:
            continue
        return line[1:-1]
    return ""


def get_cmd_type(data: str) -> str:
    """Return the text between <CmdType> and </CmdType>, or an empty string."""
    start = data.find(CMD_TAG_START)
    end = data.find(CMD_TAG_END)
    if start <= 0 or end <= 0 or end + len(CMD_TAG_START) <= start:
        return ""
    return data[start + len(CMD_TAG_START):end]