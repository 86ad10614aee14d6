import pytest

from gbcms.messages import BaseMessage, CatalogResponse
from gbcms.xmlutil import decode_xml, gbk_to_utf8, get_cmd_type, get_root_element_name

DEVICE = "00001111222233334444"
CHANNEL = "00001111222233335555"

CATALOG_GB2312 = (
    '<?xml version="1.0" encoding="GB2312"?>\r\n'
    "<Response>\r\n"
    "<CmdType>Catalog</CmdType>\r\n"
    "<SN>1</SN>\r\n"
    f"<DeviceID>{DEVICE}</DeviceID>\r\n"
    "<SumNum>1</SumNum>\r\n"
    '<DeviceList Num="1">\r\n'
    "<Item>\r\n"
    f"<DeviceID>{CHANNEL}</DeviceID>\r\n"
    "<Name>GB28181Client</Name>\r\n"
    "<Manufacturer>HaiXin</Manufacturer>\r\n"
    "<Model>GB28181_Android</Model>\r\n"
    "<Owner>Owner</Owner>\r\n"
    "<Address>Address</Address>\r\n"
    "<Parental>0</Parental>\r\n"
    f"<ParentID>{DEVICE}</ParentID>\r\n"
    "<SafetyWay>0</SafetyWay>\r\n"
    "<RegisterWay>1</RegisterWay>\r\n"
    "<Secrecy>0</Secrecy>\r\n"
    "<Status>ON</Status>\r\n"
    "</Item>\r\n"
    "</DeviceList>\r\n"
    "</Response>\r\n"
)


def test_decode_catalog_declared_gb2312():
    response = decode_xml(CATALOG_GB2312.encode("ascii"), CatalogResponse)
    assert response.cmd_type == "Catalog"
    assert response.sn == 1
    assert response.device_id == DEVICE
    assert response.sum_num == 1
    assert response.device_list.num == 1
    channel = response.device_list.devices[0]
    assert channel.device_id == CHANNEL
    assert channel.name == "GB28181Client"
    assert channel.manufacturer == "HaiXin"
    assert channel.model == "GB28181_Android"
    assert channel.parent_id == DEVICE
    assert channel.register_way == "1"
    assert channel.online()


def test_decode_chinese_text_in_declared_charset():
    body = CATALOG_GB2312.replace("GB28181Client", "测试通道").encode("gbk")
    response = decode_xml(body, CatalogResponse)
    assert response.device_list.devices[0].name == "测试通道"


def test_decode_undeclared_gbk_falls_back():
    body = f"<Notify><CmdType>Keepalive</CmdType><DeviceID>{DEVICE}</DeviceID><Info>设备</Info></Notify>"
    message = decode_xml(body.encode("gbk"), BaseMessage)
    assert message.device_id == DEVICE
    assert message.cmd_type == "Keepalive"


def test_decode_accepts_text():
    message = decode_xml(f"<Query><DeviceID>{DEVICE}</DeviceID></Query>", BaseMessage)
    assert message.device_id == DEVICE


def test_decode_malformed_raises():
    with pytest.raises(ValueError):
        decode_xml(b"<Response><SN>", CatalogResponse)


def test_gbk_to_utf8_round_trip():
    assert gbk_to_utf8("测试 abc".encode("gbk")) == "测试 abc".encode("utf-8")


def test_root_element_name_from_second_line():
    assert get_root_element_name(CATALOG_GB2312) == "Response"
    body = '<?xml version="1.0"?>\n<Query>\n<CmdType>Catalog</CmdType>\n</Query>\n'
    assert get_root_element_name(body) == "Query"


def test_root_element_name_skips_pair_after_blank_line():
    body = "<?xml?>\n\n<Ignored>\n<Notify>\n"
    assert get_root_element_name(body) == "Notify"


def test_root_element_name_single_line():
    assert get_root_element_name("<Response></Response>") == ""


def test_cmd_type():
    assert get_cmd_type(CATALOG_GB2312) == "Catalog"


def test_cmd_type_missing_or_at_start():
    assert get_cmd_type("<Query></Query>") == ""
    assert get_cmd_type("<CmdType>Catalog</CmdType>") == ""