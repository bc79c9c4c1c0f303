"""
CDP Topology - Link Deduplication.

Collapses the directed DeviceGraph, where each physical link is seen
once from each end, into a LinkTopology holding every link once.

Example output (as dicts):
    {
        'core-sw01': {
            'access-sw02': {
                'GigabitEthernet1/0/3': {'remote_port': 'FastEthernet0/1', 'is_lag': False, ...},
            },
        },
    }
"""

import logging

from .models import DeviceGraph, LinkDetail, LinkTopology

logger = logging.getLogger(__name__)


def link_topology(graph: DeviceGraph) -> LinkTopology:
    """
    Build the deduplicated link topology.

    A link A->B at local port p with remote port q is skipped when B->A
    has already been recorded at port q. LAG links report the remote
    aggregator as remote_port_id. Missing remote ids (uncorrelated
    graph, neighbor not crawled) stay None. Links with an unknown
    remote port are never folded into another entry.
    """
    links: LinkTopology = {}
    skipped = 0

    for device, neighbors in graph.items():
        for neighbor, neighbor_links in neighbors.items():
            for link in neighbor_links:
                if link.remote_port and link.remote_port in links.get(neighbor, {}).get(device, {}):
                    skipped += 1
                    continue

                if link.is_lag:
                    detail = LinkDetail(
                        remote_port=link.remote_port,
                        is_lag=True,
                        local_port_id=link.local_port_id,
                        remote_port_id=link.remote_lag_port_id,
                        local_lag_port_id=link.lag_port_id,
                        local_lag_port_name=link.lag_port_name,
                        remote_lag_port_id=link.remote_lag_port_id,
                        remote_lag_port_name=link.remote_lag_port_name,
                    )
                else:
                    detail = LinkDetail(
                        remote_port=link.remote_port,
                        is_lag=False,
                        local_port_id=link.local_port_id,
                        remote_port_id=link.remote_port_id,
                    )

                links.setdefault(device, {}).setdefault(neighbor, {})[link.local_port] = detail

    logger.debug("Link topology: %d devices, %d reverse observations folded",
                 len(links), skipped)
    return links
