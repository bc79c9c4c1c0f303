"""
CDP Topology - CDP Collector.

Reads CISCO-CDP-MIB: global settings, the per-interface table and
the neighbor cache. Cache getters return values keyed by the local
ifIndex the neighbor was heard on.

get_cdp_neighbors() assembles the cache into NeighborLink records
grouped by neighbor device id, which is the unit the crawler works on.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ...exceptions import MalformedAttribute, NoSuchObject, SNMPError
from ...models import LagMembership, NeighborLink
from ...oids import CDP, CDP_ADDRESS_TYPES, CDP_DUPLEXES
from ..client import SNMPCapability
from ..parsers import (
    decode_capability_bits,
    decode_cdp_address,
    decode_int,
    decode_string,
    parse_cdp_capabilities,
    raw_address,
)
from .interfaces import get_interface_descriptions, get_interface_names
from .lag import get_lag_membership

logger = logging.getLogger(__name__)

# Device ids some platforms report for half-populated cache rows
INVALID_DEVICE_IDS = ('', '(', 'CW_')


# =============================================================================
# Global Settings
# =============================================================================

async def get_global_run(client: SNMPCapability) -> bool:
    """True if CDP is running on the device."""
    return client.truth_value(await client.get(CDP.GLOBAL_RUN))


async def get_message_interval(client: SNMPCapability) -> Optional[int]:
    """Interval in seconds between CDP advertisements."""
    return decode_int(await client.get(CDP.GLOBAL_MESSAGE_INTERVAL))


async def get_holdtime(client: SNMPCapability) -> Optional[int]:
    """Seconds a receiver keeps our advertisements."""
    return decode_int(await client.get(CDP.GLOBAL_HOLDTIME))


async def get_global_last_change(client: SNMPCapability) -> Optional[int]:
    """sysUpTime (timeticks) of the last neighbor cache change."""
    return decode_int(await client.get(CDP.GLOBAL_LAST_CHANGE))


async def get_device_id(client: SNMPCapability) -> str:
    """The device id this device advertises in CDP."""
    return decode_string(await client.get(CDP.GLOBAL_DEVICE_ID))


# =============================================================================
# Interface Table
# =============================================================================

async def get_interface_enabled(client: SNMPCapability) -> Dict[int, bool]:
    """Per-interface CDP enabled flag keyed by ifIndex."""
    values = await client.walk_indexed(CDP.INTERFACE_ENABLED)
    return {index: client.truth_value(v) for index, v in values.items()}


async def get_cdp_interface_names(client: SNMPCapability) -> Dict[int, str]:
    """Interface names as advertised in the Port-ID TLV, keyed by ifIndex."""
    values = await client.walk_indexed(CDP.INTERFACE_NAME)
    return {index: decode_string(v) for index, v in values.items()}


# =============================================================================
# Neighbor Cache
# =============================================================================

async def _cache_column(client: SNMPCapability, oid: str) -> Dict[Any, Any]:
    return await client.walk_sub_indexed(oid, 1)


async def _cache_strings(client: SNMPCapability, oid: str) -> Dict[Any, str]:
    values = await _cache_column(client, oid)
    return {index: decode_string(v) for index, v in values.items()}


async def get_neighbor_address_types(client: SNMPCapability, translate: bool = False) -> Dict[Any, Any]:
    """cdpCacheAddressType per local port, optionally as text ('ip')."""
    types = await _cache_column(client, CDP.CACHE_ADDRESS_TYPE)
    if translate:
        return client.translate(types, CDP_ADDRESS_TYPES)
    return {index: decode_int(v) for index, v in types.items()}


async def get_neighbor_addresses(client: SNMPCapability) -> Dict[Any, str]:
    """
    Neighbor addresses per local port.

    IPv4 addresses are rendered dotted. Anything else is passed
    through in raw hex form.
    """
    addresses = await _cache_column(client, CDP.CACHE_ADDRESS)
    types = await get_neighbor_address_types(client)

    result = {}
    for index, value in addresses.items():
        try:
            result[index] = decode_cdp_address(value, types.get(index))
        except MalformedAttribute as e:
            logger.debug("%s: leaving address on port %s undecoded: %s", client.host, index, e)
            result[index] = raw_address(value)
    return result


async def get_neighbor_versions(client: SNMPCapability) -> Dict[Any, str]:
    """Software version strings per local port."""
    return await _cache_strings(client, CDP.CACHE_VERSION)


async def get_neighbor_ids(client: SNMPCapability) -> Dict[Any, str]:
    """Neighbor device ids per local port."""
    return await _cache_strings(client, CDP.CACHE_DEVICE_ID)


async def get_neighbor_ports(client: SNMPCapability) -> Dict[Any, str]:
    """
    Neighbor port descriptions per local port.

    e.g. {10101: "GigabitEthernet0/1"}: our port 10101 connects to the
    neighbor's GigabitEthernet0/1.
    """
    return await _cache_strings(client, CDP.CACHE_DEVICE_PORT)


async def get_neighbor_platforms(client: SNMPCapability) -> Dict[Any, str]:
    """Hardware platform strings per local port."""
    return await _cache_strings(client, CDP.CACHE_PLATFORM)


async def get_neighbor_capability(client: SNMPCapability) -> Dict[Any, int]:
    """Capability bitmaps per local port. Undecodable values become 0."""
    values = await _cache_column(client, CDP.CACHE_CAPABILITIES)
    result = {}
    for index, value in values.items():
        try:
            result[index] = decode_capability_bits(value)
        except MalformedAttribute as e:
            logger.debug("%s: bad capability value on port %s: %s", client.host, index, e)
            result[index] = 0
    return result


async def neighbor_has_capability(client: SNMPCapability, port_id: int, capability: int) -> bool:
    """
    True if the neighbor on port_id advertises capability.

    Example:
        await neighbor_has_capability(client, 10101, CDP.CAP_SWITCH)
    """
    bits = (await get_neighbor_capability(client)).get(port_id, 0)
    return bool(bits & capability)


async def get_neighbor_capabilities(
    client: SNMPCapability,
    port_id: int,
    translate: bool = False,
) -> List:
    """
    Individual capabilities of the neighbor on port_id.

    Returns masks (e.g. [1, 8]) or with translate names
    (e.g. ['Router', 'Switch']).
    """
    bits = (await get_neighbor_capability(client)).get(port_id, 0)
    return parse_cdp_capabilities(bits, names=translate)


async def get_neighbor_vtp_domains(client: SNMPCapability) -> Dict[Any, str]:
    """VTP management domain per local port."""
    return await _cache_strings(client, CDP.CACHE_VTP_MGMT_DOMAIN)


async def get_neighbor_native_vlans(client: SNMPCapability) -> Dict[Any, Optional[int]]:
    """Native VLAN reported by the neighbor per local port."""
    values = await _cache_column(client, CDP.CACHE_NATIVE_VLAN)
    return {index: decode_int(v) for index, v in values.items()}


async def get_neighbor_duplex(client: SNMPCapability, translate: bool = False) -> Dict[Any, Any]:
    """Duplex reported by the neighbor per local port, optionally as text."""
    values = await _cache_column(client, CDP.CACHE_DUPLEX)
    if translate:
        return client.translate(values, CDP_DUPLEXES)
    return {index: decode_int(v) for index, v in values.items()}


async def get_neighbor_last_change(client: SNMPCapability) -> Dict[Any, Optional[int]]:
    """sysUpTime (timeticks) when each cache row last changed."""
    values = await _cache_column(client, CDP.CACHE_LAST_CHANGE)
    return {index: decode_int(v) for index, v in values.items()}


# =============================================================================
# Neighbor Records
# =============================================================================

def build_neighbors(
    neighbor_ids: Mapping[Any, str],
    remote_ports: Mapping[Any, str],
    if_names: Mapping[int, str],
    if_descriptions: Mapping[int, str],
    lag: LagMembership,
) -> Dict[str, List[NeighborLink]]:
    """
    Group per-port CDP observations by neighbor device id.

    Links are appended in the order ports appear in neighbor_ids, so
    parallel links to one neighbor keep a stable position.
    """
    neighbors: Dict[str, List[NeighborLink]] = {}

    for port_id, neighbor_id in neighbor_ids.items():
        if neighbor_id in INVALID_DEVICE_IDS:
            continue

        local_port_id = decode_int(port_id)
        if local_port_id is None:
            continue

        link = NeighborLink(
            local_port_id=local_port_id,
            local_port_name=if_names.get(local_port_id, ""),
            local_port=if_descriptions.get(local_port_id, ""),
            remote_port=remote_ports.get(port_id, ""),
        )

        lag_port_id = lag.attached_lag(local_port_id)
        if lag_port_id is not None:
            link.is_lag = True
            link.lag_port_id = lag_port_id
            link.lag_port_name = if_names.get(lag_port_id, "")

        neighbors.setdefault(neighbor_id, []).append(link)

    return neighbors


async def get_cdp_neighbors(client: SNMPCapability) -> Dict[str, List[NeighborLink]]:
    """
    Get one device's CDP neighbors as NeighborLink records.

    Returns:
        Dict mapping neighbor device id to its links, {} when CDP is
        disabled or the cache is empty

    Raises:
        DeviceUnreachable: the neighbor id walk itself failed

    Example:
        neighbors = await get_cdp_neighbors(client)
        for neighbor_id, links in neighbors.items():
            for link in links:
                print(f"{link.local_port} -> {neighbor_id} {link.remote_port}")
    """
    try:
        neighbor_ids = await get_neighbor_ids(client)
    except NoSuchObject:
        logger.info("%s: CDP MIB not available", client.host)
        return {}

    neighbor_ids = {
        port: device_id for port, device_id in neighbor_ids.items()
        if device_id not in INVALID_DEVICE_IDS
    }
    if not neighbor_ids:
        logger.info("%s: no CDP neighbors", client.host)
        return {}

    logger.debug("%s: %d CDP cache entries", client.host, len(neighbor_ids))

    try:
        remote_ports = await get_neighbor_ports(client)
    except SNMPError as e:
        logger.warning("%s: cdpCacheDevicePort walk failed: %s", client.host, e)
        remote_ports = {}

    if_names = await get_interface_names(client)
    if_descriptions = await get_interface_descriptions(client)
    lag = await get_lag_membership(client)

    neighbors = build_neighbors(neighbor_ids, remote_ports, if_names, if_descriptions, lag)
    logger.debug("%s: %d CDP neighbors", client.host, len(neighbors))
    return neighbors
