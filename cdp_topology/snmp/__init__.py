"""
CDP Topology - SNMP Access.

Components:
- walker: pysnmp GETBULK/GET with typed failures
- client: SNMPCapability protocol and the pysnmp SNMPClient
- parsers: Value decoding (strings, TruthValue, CDP address/capabilities)
- collectors: MIB-specific data collection
  - interfaces: ifName, ifDescr
  - lag: dot3adAggPortTable
  - cdp: CISCO-CDP-MIB

Usage:
    from cdp_topology.snmp import SNMPClient
    from cdp_topology.snmp.collectors import get_cdp_neighbors

    client = SNMPClient("192.168.1.1", "public")
    neighbors = await get_cdp_neighbors(client)
"""

from .walker import SNMPWalker, AuthData
from .client import SNMPCapability, SNMPClient
from .parsers import (
    decode_string,
    decode_int,
    truth_value,
    translate,
    decode_cdp_address,
    decode_capability_bits,
    parse_cdp_capabilities,
)


__all__ = [
    # Transport
    'SNMPWalker',
    'AuthData',
    'SNMPCapability',
    'SNMPClient',
    # Parsers
    'decode_string',
    'decode_int',
    'truth_value',
    'translate',
    'decode_cdp_address',
    'decode_capability_bits',
    'parse_cdp_capabilities',
]
