import pytest

from gbcms.messages import (
    STATUS_OFF,
    STATUS_ON,
    BaseMessage,
    CatalogResponse,
    Channel,
    DeviceInfoResponse,
    DeviceStatusResponse,
    QueryRecordInfoResponse,
    format_record_query,
    format_seek_body,
)
from gbcms.xmlutil import decode_xml

DEVICE = "00001111222233334444"
CHANNEL = "00001111222233335555"


def test_format_record_query_matches_wire_format():
    body = format_record_query(7, CHANNEL, "2024-01-01T00:00:00", "2024-01-01T01:00:00", "all")
    assert body == (
        '<?xml version="1.0"?>\r\n'
        "<Query>\r\n"
        "<CmdType>RecordInfo</CmdType>\r\n"
        "<SN>7</SN>\r\n"
        f"<DeviceID>{CHANNEL}</DeviceID>\r\n"
        "<StartTime>2024-01-01T00:00:00</StartTime>\r\n"
        "<EndTime>2024-01-01T01:00:00</EndTime>\r\n"
        "<Type>all</Type>\r\n"
        "</Query>\r\n"
    )


def test_record_query_decodes_back():
    body = format_record_query(42, CHANNEL, "a", "b", "time")
    message = decode_xml(body.encode(), BaseMessage)
    assert message.sn == 42
    assert message.device_id == CHANNEL
    assert message.cmd_type == "RecordInfo"


def test_format_seek_body():
    assert format_seek_body(3, 10) == "PLAY RTSP/1.0\r\nCSeq: 3\r\nRange: npt=10-\r\n"


def test_channel_online():
    assert Channel(status=STATUS_ON).online() is True
    assert Channel(status=STATUS_OFF).online() is False
    assert Channel().online() is False


def test_catalog_response_fields():
    body = (
        "<?xml version=\"1.0\"?>\r\n<Response>\r\n<CmdType>Catalog</CmdType>\r\n"
        f"<SN>5</SN>\r\n<DeviceID>{DEVICE}</DeviceID>\r\n<SumNum>2</SumNum>\r\n"
        "<DeviceList Num=\"2\">\r\n"
        f"<Item><DeviceID>{CHANNEL}</DeviceID><Name>first</Name><Status>ON</Status></Item>\r\n"
        "<Item><DeviceID>other</DeviceID><Name>second</Name><Status>OFF</Status></Item>\r\n"
        "</DeviceList>\r\n</Response>\r\n"
    )
    response = decode_xml(body.encode(), CatalogResponse)
    assert response.sn == 5
    assert response.device_id == DEVICE
    assert response.sum_num == 2
    assert response.device_list.num == 2
    assert [c.name for c in response.device_list.devices] == ["first", "second"]
    assert [c.online() for c in response.device_list.devices] == [True, False]
    assert response.device_list.devices[0].device_id == CHANNEL


def test_device_info_response():
    body = (
        "<Response><CmdType>DeviceInfo</CmdType><SN>9</SN>"
        f"<DeviceID>{DEVICE}</DeviceID><DeviceName>cam</DeviceName>"
        "<Manufacturer>maker</Manufacturer><Model>m1</Model>"
        "<Firmware>1.0</Firmware><Result>OK</Result></Response>"
    )
    response = decode_xml(body.encode(), DeviceInfoResponse)
    assert (response.device_name, response.manufacturer, response.model, response.firmware) == (
        "cam",
        "maker",
        "m1",
        "1.0",
    )
    assert response.result == "OK"


def test_missing_elements_keep_defaults():
    response = decode_xml(b"<Response><CmdType>DeviceStatus</CmdType></Response>", DeviceStatusResponse)
    assert response.cmd_type == "DeviceStatus"
    assert response.sn == 0
    assert response.online == ""


def test_record_response_items_in_order():
    body = (
        "<Response><CmdType>RecordInfo</CmdType><SN>3</SN>"
        f"<DeviceID>{CHANNEL}</DeviceID><SumNum>2</SumNum><RecordList Num=\"2\">"
        "<Item><FileSize>1024</FileSize><StartTime>s1</StartTime><EndTime>e1</EndTime></Item>"
        "<Item><StartTime>s2</StartTime><EndTime>e2</EndTime></Item>"
        "</RecordList></Response>"
    )
    response = decode_xml(body.encode(), QueryRecordInfoResponse)
    assert response.record_list.num == 2
    assert [r.start_time for r in response.record_list.records] == ["s1", "s2"]
    assert response.record_list.records[0].file_size == 1024
    assert response.record_list.records[1].file_size == 0


def test_base_message_accepts_any_root():
    body = f"<Notify><CmdType>Keepalive</CmdType><SN>11</SN><DeviceID>{DEVICE}</DeviceID></Notify>"
    message = decode_xml(body.encode(), BaseMessage)
    assert (message.cmd_type, message.sn, message.device_id) == ("Keepalive", 11, DEVICE)


def test_repeated_element_keeps_last():
    message = decode_xml(b"<Query><SN>1</SN><SN>2</SN></Query>", BaseMessage)
    assert message.sn == 2


def test_response_root_is_required():
    with pytest.raises(ValueError, match="Response"):
        decode_xml(b"<Query><CmdType>Catalog</CmdType></Query>", CatalogResponse)


def test_invalid_integer_rejected():
    with pytest.raises(ValueError):
        decode_xml(b"<Query><SN>abc</SN></Query>", BaseMessage)


def test_negative_file_size_rejected():
    body = b"<Response><RecordList><Item><FileSize>-1</FileSize></Item></RecordList></Response>"
    with pytest.raises(ValueError):
        decode_xml(body, QueryRecordInfoResponse)