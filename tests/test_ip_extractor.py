import pytest

from extraction.ip_extractor import classify, extract_addresses, extract_ips, is_private_ip


@pytest.mark.parametrize("ip, expected", [
    ("10.255.255.255", "private"),
    ("100.63.0.1", "public"),
    ("100.64.0.1", "private"),
    ("100.127.255.255", "private"),
    ("100.128.0.1", "public"),
    ("172.15.0.1", "public"),
    ("172.16.0.1", "private"),
    ("172.31.255.255", "private"),
    ("172.32.0.1", "public"),
    ("192.168.1.1", "private"),
    ("127.0.0.1", "private"),
    ("169.254.10.20", "private"),
    ("0.0.0.0", "private"),
    ("0.1.2.3", "private"),
    ("8.8.8.8", "public"),
])
def test_classify_ipv4_boundaries(ip, expected):
    """测试 IPv4 规则表边界"""
    assert classify(ip) == expected


@pytest.mark.parametrize("ip, expected", [
    ("::1", "private"),
    ("0:0:0:0:0:0:0:1", "private"),
    ("fe80::1", "private"),
    ("FE80::ABCD", "private"),
    ("febf::1", "private"),
    ("fec0::1", "public"),
    ("fc00::1", "private"),
    ("fd12:3456::1", "private"),
    ("fe00::1", "public"),
    ("2001:db8::1", "public"),
])
def test_classify_ipv6(ip, expected):
    """测试 IPv6 规则表（大小写不敏感）"""
    assert classify(ip) == expected


def test_extract_rejects_out_of_range_octets():
    """测试超出 255 的段不被识别"""
    assert extract_ips("256.1.1.1") == []
    assert extract_ips("1.2.3.999") == []
    assert extract_ips("connect from 256.1.1.1 and 1.2.3.999 failed") == []


def test_extract_ipv4_before_ipv6():
    """测试先 IPv4 后 IPv6，各自按出现顺序"""
    line = "peer 2001:db8::1 relayed 203.0.113.5 then fe80::2 and 198.51.100.7"
    assert extract_ips(line) == ["203.0.113.5", "198.51.100.7", "2001:db8::1", "fe80::2"]

    addresses = extract_addresses(line)
    assert [a.family for a in addresses] == ["ipv4", "ipv4", "ipv6", "ipv6"]


def test_extract_no_matches():
    """测试无地址的行返回空列表"""
    assert extract_ips("") == []
    assert extract_ips("Oct 19 12:34:56 host sshd[123]: Connection closed") == []
    assert extract_ips("link 00:1a:2b:3c:4d:5e up") == []
    assert extract_ips("key :: value") == []


@pytest.mark.parametrize("ip", [
    "2001:0db8:85a3:0000:0000:8a2e:0370:7334",
    "2001:db8::8a2e:370:7334",
    "2001:db8:0:0:1::1",
    "fe80::1ff:fe23:4567:890a",
    "::1",
    "2001:DB8::ABCD",
])
def test_extract_ipv6_forms(ip):
    """测试 IPv6 完整与压缩写法完整匹配"""
    assert extract_ips(f"client [{ip}] connected") == [ip]
    assert extract_ips(f"from {ip} port 22") == [ip]


def test_extract_ipv6_trailing_compression():
    """测试以 :: 结尾的地址"""
    assert extract_ips("route 2001:db8:: via gw") == ["2001:db8::"]


def test_extract_ipv6_embedded_ipv4():
    """测试内嵌 IPv4 写法（内嵌部分同时作为 IPv4 被提取）"""
    assert extract_ips("client ::ffff:192.0.2.128 connected") == ["192.0.2.128", "::ffff:192.0.2.128"]
    assert extract_ips("nat64 64:ff9b::192.0.2.33 seen") == ["192.0.2.33", "64:ff9b::192.0.2.33"]


def test_extract_deduplicates_within_line():
    """测试同一行重复地址只返回一次"""
    assert extract_ips("1.1.1.1 -> 1.1.1.1 -> 9.9.9.9") == ["1.1.1.1", "9.9.9.9"]


def test_extract_then_classify_private_excluded():
    """测试提取后按规则表分类"""
    line = "10.0.0.1 192.168.0.1 203.0.113.9 ::1 2001:db8::5"
    public = [ip for ip in extract_ips(line) if not is_private_ip(ip)]
    assert public == ["203.0.113.9", "2001:db8::5"]
