"""
CDP Topology - SNMP Collectors.

Individual collectors for the MIBs used by discovery:
- interfaces: IF-MIB ifName / ifDescr
- lag: IEEE8023-LAG-MIB aggregation membership
- cdp: CISCO-CDP-MIB settings, cache getters and neighbor records
"""

from .interfaces import (
    get_interface_names,
    get_interface_descriptions,
)

from .lag import get_lag_membership

from .cdp import (
    get_cdp_neighbors,
    build_neighbors,
    get_global_run,
    get_message_interval,
    get_holdtime,
    get_global_last_change,
    get_device_id,
    get_interface_enabled,
    get_cdp_interface_names,
    get_neighbor_address_types,
    get_neighbor_addresses,
    get_neighbor_versions,
    get_neighbor_ids,
    get_neighbor_ports,
    get_neighbor_platforms,
    get_neighbor_capability,
    neighbor_has_capability,
    get_neighbor_capabilities,
    get_neighbor_vtp_domains,
    get_neighbor_native_vlans,
    get_neighbor_duplex,
    get_neighbor_last_change,
)


__all__ = [
    # Interfaces
    'get_interface_names',
    'get_interface_descriptions',
    # LAG
    'get_lag_membership',
    # CDP records
    'get_cdp_neighbors',
    'build_neighbors',
    # CDP globals
    'get_global_run',
    'get_message_interval',
    'get_holdtime',
    'get_global_last_change',
    'get_device_id',
    # CDP interfaces
    'get_interface_enabled',
    'get_cdp_interface_names',
    # CDP cache
    'get_neighbor_address_types',
    'get_neighbor_addresses',
    'get_neighbor_versions',
    'get_neighbor_ids',
    'get_neighbor_ports',
    'get_neighbor_platforms',
    'get_neighbor_capability',
    'neighbor_has_capability',
    'get_neighbor_capabilities',
    'get_neighbor_vtp_domains',
    'get_neighbor_native_vlans',
    'get_neighbor_duplex',
    'get_neighbor_last_change',
]
