"""
CDP Topology - SNMP OID Constants.

Numeric OIDs for the MIB objects used by topology discovery.

Organization:
- IF-MIB: ifName / ifDescr for local port naming
- IEEE8023-LAG-MIB: aggregation port table for LAG membership
- CISCO-CDP-MIB: global settings, interface table, neighbor cache

Usage:
    from cdp_topology.oids import CDP, INTERFACES

    ids = await client.walk_sub_indexed(CDP.CACHE_DEVICE_ID)
    run = await client.get(CDP.GLOBAL_RUN)

Notes:
- Cache table rows are indexed by cdpCacheIfIndex.cdpCacheDeviceIndex.
  Only the leading ifIndex is kept when walking sub-indexed.
- Scalars carry their trailing .0 instance.
"""

from typing import Dict


class INTERFACES:
    """
    IF-MIB OIDs for port naming.

    Index: ifIndex
    """
    IF_DESCR = "1.3.6.1.2.1.2.2.1.2"           # e.g. "GigabitEthernet1/0/1"
    IF_NAME = "1.3.6.1.2.1.31.1.1.1.1"         # e.g. "Gi1/0/1"


class LAG:
    """
    IEEE8023-LAG-MIB dot3adAggPortTable.

    Base: 1.2.840.10006.300.43.1.2.1.1 (dot3adAggPortEntry)
    Index: ifIndex of the physical member port
    """
    AGG_PORT_ENTRY = "1.2.840.10006.300.43.1.2.1.1"
    ATTACHED_AGG_ID = "1.2.840.10006.300.43.1.2.1.1.13"          # ifIndex of aggregator
    AGGREGATE_OR_INDIVIDUAL = "1.2.840.10006.300.43.1.2.1.1.24"  # TruthValue


class CDP:
    """
    CISCO-CDP-MIB OIDs.

    Base: 1.3.6.1.4.1.9.9.23 (enterprises.cisco.ciscoMgmt.ciscoCdpMIB)
    """
    BASE = "1.3.6.1.4.1.9.9.23"

    # cdpInterfaceTable, indexed by ifIndex
    INTERFACE_ENABLED = "1.3.6.1.4.1.9.9.23.1.1.1.1.2"   # TruthValue
    INTERFACE_NAME = "1.3.6.1.4.1.9.9.23.1.1.1.1.6"      # Port-ID TLV advertised

    # cdpCacheTable columns, indexed by ifIndex.deviceIndex
    CACHE_ENTRY = "1.3.6.1.4.1.9.9.23.1.2.1.1"
    CACHE_ADDRESS_TYPE = "1.3.6.1.4.1.9.9.23.1.2.1.1.3"
    CACHE_ADDRESS = "1.3.6.1.4.1.9.9.23.1.2.1.1.4"
    CACHE_VERSION = "1.3.6.1.4.1.9.9.23.1.2.1.1.5"
    CACHE_DEVICE_ID = "1.3.6.1.4.1.9.9.23.1.2.1.1.6"
    CACHE_DEVICE_PORT = "1.3.6.1.4.1.9.9.23.1.2.1.1.7"
    CACHE_PLATFORM = "1.3.6.1.4.1.9.9.23.1.2.1.1.8"
    CACHE_CAPABILITIES = "1.3.6.1.4.1.9.9.23.1.2.1.1.9"
    CACHE_VTP_MGMT_DOMAIN = "1.3.6.1.4.1.9.9.23.1.2.1.1.10"
    CACHE_NATIVE_VLAN = "1.3.6.1.4.1.9.9.23.1.2.1.1.11"
    CACHE_DUPLEX = "1.3.6.1.4.1.9.9.23.1.2.1.1.12"
    CACHE_LAST_CHANGE = "1.3.6.1.4.1.9.9.23.1.2.1.1.24"

    # cdpGlobal scalars
    GLOBAL_RUN = "1.3.6.1.4.1.9.9.23.1.3.1.0"            # TruthValue
    GLOBAL_MESSAGE_INTERVAL = "1.3.6.1.4.1.9.9.23.1.3.2.0"
    GLOBAL_HOLDTIME = "1.3.6.1.4.1.9.9.23.1.3.3.0"
    GLOBAL_DEVICE_ID = "1.3.6.1.4.1.9.9.23.1.3.4.0"
    GLOBAL_LAST_CHANGE = "1.3.6.1.4.1.9.9.23.1.3.5.0"

    # cdpCacheAddressType
    ADDRESS_TYPE_IP = 1

    # cdpCacheCapabilities bitmap
    CAP_ROUTER = 0x01
    CAP_TRANSPARENT_BRIDGE = 0x02
    CAP_SOURCE_ROUTE_BRIDGE = 0x04
    CAP_SWITCH = 0x08
    CAP_HOST = 0x10
    CAP_IGMP = 0x20
    CAP_REPEATER = 0x40

    # cdpCacheDuplex
    DUPLEX_UNKNOWN = 1
    DUPLEX_HALF = 2
    DUPLEX_FULL = 3


# Translation tables for CDP.translate-style lookups
CDP_ADDRESS_TYPES: Dict[int, str] = {
    CDP.ADDRESS_TYPE_IP: "ip",
}

CDP_CAPABILITIES: Dict[int, str] = {
    CDP.CAP_ROUTER: "Router",
    CDP.CAP_TRANSPARENT_BRIDGE: "Transparent Bridge",
    CDP.CAP_SOURCE_ROUTE_BRIDGE: "Source Route Bridge",
    CDP.CAP_SWITCH: "Switch",
    CDP.CAP_HOST: "Host",
    CDP.CAP_IGMP: "IGMP Capable",
    CDP.CAP_REPEATER: "Repeater",
}

CDP_DUPLEXES: Dict[int, str] = {
    CDP.DUPLEX_UNKNOWN: "unknown",
    CDP.DUPLEX_HALF: "half-duplex",
    CDP.DUPLEX_FULL: "full-duplex",
}
