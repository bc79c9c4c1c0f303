"""
Tests for SNMP value parsers - strings, TruthValue, CDP address and capabilities.
"""

import pytest

from cdp_topology.exceptions import MalformedAttribute
from cdp_topology.oids import CDP, CDP_DUPLEXES, CDP_ADDRESS_TYPES
from cdp_topology.snmp.parsers import (
    decode_string,
    decode_int,
    truth_value,
    truth_values,
    translate,
    decode_cdp_address,
    raw_address,
    decode_capability_bits,
    parse_cdp_capabilities,
)


class FakeOctetString:
    """Mimics pysnmp OctetString.asOctets()."""

    def __init__(self, octets: bytes):
        self._octets = octets

    def asOctets(self) -> bytes:
        return self._octets


class TestDecodeString:

    @pytest.mark.parametrize("value,expected", [
        ("Gi1/0/1", "Gi1/0/1"),
        (b"GigabitEthernet0/1", "GigabitEthernet0/1"),
        (b"sw01\x00", "sw01"),
        ("  padded  ", "padded"),
        (None, ""),
    ])
    def test_plain_values(self, value, expected):
        assert decode_string(value) == expected

    def test_octet_string(self):
        assert decode_string(FakeOctetString(b"core-sw01.example.net")) == "core-sw01.example.net"

    def test_latin1_fallback(self):
        assert decode_string(b"caf\xe9") == "caf\xe9"

    def test_hex_rendering(self):
        assert decode_string("0x7377303100") == "sw01"


class TestDecodeInt:

    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        ("42", 42),
        (None, None),
        ("abc", None),
    ])
    def test_values(self, value, expected):
        assert decode_int(value) == expected


class TestTruthValue:

    @pytest.mark.parametrize("value,expected", [
        (1, True),
        (2, False),
        ("1", True),
        (0, False),
        (None, False),
    ])
    def test_truth_value(self, value, expected):
        assert truth_value(value) is expected

    def test_truth_values_keeps_indexes(self):
        assert truth_values({10101: 1, 10102: 2}) == {10101: True, 10102: False}


class TestTranslate:

    def test_known_values(self):
        assert translate({10101: 3, 10102: 2}, CDP_DUPLEXES) == {
            10101: "full-duplex",
            10102: "half-duplex",
        }

    def test_unknown_value_kept_as_text(self):
        assert translate({1: 9}, CDP_ADDRESS_TYPES) == {1: "9"}


class TestDecodeCdpAddress:

    def test_four_octets(self):
        assert decode_cdp_address(b"\x0a\x00\x00\x01", CDP.ADDRESS_TYPE_IP) == "10.0.0.1"

    def test_octet_string(self):
        value = FakeOctetString(b"\xc0\xa8\x01\xfe")
        assert decode_cdp_address(value, CDP.ADDRESS_TYPE_IP) == "192.168.1.254"

    @pytest.mark.parametrize("value", ["0a000001", "0x0a000001"])
    def test_hex_text(self, value):
        assert decode_cdp_address(value, CDP.ADDRESS_TYPE_IP) == "10.0.0.1"

    def test_wrong_type_raises(self):
        with pytest.raises(MalformedAttribute) as exc:
            decode_cdp_address(b"\x0a\x00\x00\x01", 20)
        assert exc.value.raw_value == b"\x0a\x00\x00\x01"

    @pytest.mark.parametrize("value", [b"\x0a\x00\x01", "0a0000", "zzzzzzzz"])
    def test_wrong_length_or_encoding_raises(self, value):
        with pytest.raises(MalformedAttribute):
            decode_cdp_address(value, CDP.ADDRESS_TYPE_IP)

    def test_raw_address_passthrough(self):
        assert raw_address(b"\x20\x01\x0d\xb8") == "20010db8"
        assert raw_address("opaque") == "opaque"


class TestCapabilities:

    @pytest.mark.parametrize("value,expected", [
        (b"\x00\x00\x00\x29", 0x29),
        (FakeOctetString(b"\x00\x00\x00\x08"), 0x08),
        ("0x00000001", 0x01),
        ("00000028", 0x28),
        (0x0A, 0x0A),
        (b"", 0),
    ])
    def test_decode_bits(self, value, expected):
        assert decode_capability_bits(value) == expected

    def test_decode_bits_rejects_garbage(self):
        with pytest.raises(MalformedAttribute):
            decode_capability_bits("router")

    def test_parse_masks(self):
        assert parse_cdp_capabilities(0x29) == [CDP.CAP_ROUTER, CDP.CAP_SWITCH, CDP.CAP_IGMP]

    def test_parse_names(self):
        assert parse_cdp_capabilities(0x0A, names=True) == ["Transparent Bridge", "Switch"]

    def test_parse_empty(self):
        assert parse_cdp_capabilities(0) == []
