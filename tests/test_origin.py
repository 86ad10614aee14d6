from gbcms.sdp.origin import FALLBACK_ADDR, Origin


def test_format_full_origin():
    origin = Origin(user="root", id="31589", version="31589", addr="10.0.0.38")
    assert origin.format() == "o=root 31589 31589 IN IP4 10.0.0.38\r\n"


def test_format_ipv6_origin():
    origin = Origin(user="-", id="3366701332", version="3366701332", addr="dead:beef::666")
    assert origin.format() == "o=- 3366701332 3366701332 IN IP6 dead:beef::666\r\n"


def test_distinct_version_is_kept():
    origin = Origin(user="-", id="3366701332", version="3366701334", addr="10.11.34.37")
    assert origin.format() == "o=- 3366701332 3366701334 IN IP4 10.11.34.37\r\n"


def test_empty_user_becomes_dash():
    origin = Origin(id="2950", version="2950", addr="192.168.1.64")
    assert origin.format() == "o=- 2950 2950 IN IP4 192.168.1.64\r\n"


def test_empty_version_reuses_id():
    origin = Origin(user="root", id="31589", addr="10.0.0.38")
    assert origin.format() == "o=root 31589 31589 IN IP4 10.0.0.38\r\n"


def test_empty_id_is_generated_and_used_as_version():
    origin = Origin(user="root", addr="10.0.0.38")
    line = origin.format()
    assert line.endswith("\r\n")
    tokens = line[2:-2].split(" ")
    assert tokens[0] == "root"
    assert tokens[1].isdigit()
    assert tokens[1] == tokens[2]
    assert tokens[3:] == ["IN", "IP4", "10.0.0.38"]
    assert origin.id == ""


def test_empty_addr_uses_fallback():
    origin = Origin(user="root", id="31589", version="31589")
    assert origin.format() == f"o=root 31589 31589 IN IP4 {FALLBACK_ADDR}\r\n"