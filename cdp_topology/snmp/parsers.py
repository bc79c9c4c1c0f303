"""
CDP Topology - SNMP Value Parsers.

Functions for decoding raw SNMP values into Python types.

Handles:
- Text value extraction from OctetString / DisplayString
- Integer and TruthValue decoding
- CDP cache address decoding (4-octet IPv4 by address type)
- CDP capability bitmaps (octet string, hex string or int)
- Dictionary translation of enumerated values

Text and integer helpers return fallbacks instead of raising. The
address and capability decoders raise MalformedAttribute so callers
can decide to pass the raw value through.
"""

import binascii
import ipaddress
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import MalformedAttribute
from ..oids import CDP, CDP_CAPABILITIES


# =============================================================================
# Generic Values
# =============================================================================

def to_octets(value: Any) -> Optional[bytes]:
    """Raw bytes of an OctetString-like value, or None if not binary."""
    if hasattr(value, 'asOctets'):
        return bytes(value.asOctets())
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return None


def decode_string(value: Any) -> str:
    """
    Safely convert SNMP value to string.

    Strips null bytes and surrounding whitespace. Hex-rendered
    values ("0x...") are decoded back to text where possible.
    """
    if value is None:
        return ""
    try:
        octets = to_octets(value)
        if octets is not None:
            try:
                result = octets.decode('utf-8')
            except UnicodeDecodeError:
                result = octets.decode('latin-1')
        elif hasattr(value, 'prettyPrint'):
            result = value.prettyPrint()
        else:
            result = str(value)

        result = result.replace('\x00', '').strip()

        if result.startswith('0x'):
            try:
                result = bytes.fromhex(result[2:]).decode('utf-8').replace('\x00', '').strip()
            except (ValueError, UnicodeDecodeError):
                pass

        return result

    except Exception:
        return str(value)


def decode_int(value: Any) -> Optional[int]:
    """
    Safely convert SNMP value to integer.

    Returns:
        Integer value or None on failure
    """
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        pass
    try:
        if hasattr(value, 'prettyPrint'):
            return int(value.prettyPrint())
    except (ValueError, TypeError):
        pass
    return None


def truth_value(value: Any) -> bool:
    """
    Decode an SNMPv2-TC TruthValue.

    1 is true, 2 (and anything else) is false.
    """
    return decode_int(value) == 1


def truth_values(values: Mapping[int, Any]) -> Dict[int, bool]:
    """Decode every TruthValue in an indexed walk result."""
    return {index: truth_value(v) for index, v in values.items()}


def translate(values: Mapping[Any, Any], dictionary: Mapping[Any, str]) -> Dict[Any, str]:
    """
    Map enumerated values to their text representation.

    Values missing from the dictionary are kept as their str() form.

    Example:
        >>> translate({10101: 3}, CDP_DUPLEXES)
        {10101: 'full-duplex'}
    """
    result = {}
    for index, value in values.items():
        key = decode_int(value)
        if key is not None and key in dictionary:
            result[index] = dictionary[key]
        else:
            result[index] = str(value)
    return result


# =============================================================================
# CDP Specific
# =============================================================================

def decode_cdp_address(value: Any, address_type: Optional[int]) -> str:
    """
    Decode cdpCacheAddress to dotted IPv4.

    Only 'ip' address types holding exactly four octets are decoded.
    Accepts raw octets or an 8 character hex rendering.

    Raises:
        MalformedAttribute: wrong address type or length
    """
    if address_type != CDP.ADDRESS_TYPE_IP:
        raise MalformedAttribute(
            f"Unsupported CDP address type: {address_type}", raw_value=value
        )

    octets = to_octets(value)
    if octets is None:
        text = str(value).strip()
        if text.startswith('0x'):
            text = text[2:]
        if len(text) != 8:
            raise MalformedAttribute(
                f"Expected 8 hex characters, got {text!r}", raw_value=value
            )
        try:
            octets = binascii.unhexlify(text)
        except (binascii.Error, ValueError):
            raise MalformedAttribute(f"Not a hex address: {text!r}", raw_value=value)

    if len(octets) != 4:
        raise MalformedAttribute(
            f"Expected 4 address octets, got {len(octets)}", raw_value=value
        )

    return str(ipaddress.IPv4Address(octets))


def raw_address(value: Any) -> str:
    """Printable form of an undecodable cdpCacheAddress."""
    octets = to_octets(value)
    if octets is not None:
        return binascii.hexlify(octets).decode()
    return str(value)


def decode_capability_bits(value: Any) -> int:
    """
    Decode cdpCacheCapabilities into an integer bitmap.

    The agent reports a 4 octet string; some tooling renders it as hex.

    Raises:
        MalformedAttribute: value is not a bitmap
    """
    if isinstance(value, int):
        return value

    octets = to_octets(value)
    if octets is not None:
        return int.from_bytes(octets, 'big') if octets else 0

    text = str(value).strip()
    if text.startswith('0x'):
        text = text[2:]
    if not text:
        return 0
    try:
        return int(text, 16)
    except ValueError:
        raise MalformedAttribute(f"Not a capability bitmap: {value!r}", raw_value=value)


def parse_cdp_capabilities(cap_value: int, names: bool = False) -> List:
    """
    Split a CDP capability bitmap into individual capability masks.

    Args:
        cap_value: Capability bitmap
        names: Return text names instead of masks
    """
    masks = [mask for mask in CDP_CAPABILITIES if cap_value & mask]
    if names:
        return [CDP_CAPABILITIES[mask] for mask in masks]
    return masks
