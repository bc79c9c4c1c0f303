"""
CDP Topology - Reverse-Link Correlation.

Fills the remote-side identifiers of every NeighborLink by finding
the same physical link as observed from the other end.

CDP is advertised in both directions, so for a link A->B whose remote
port is q, B's adjacency toward A holds an entry whose local port is
q. Matching is by port description within the (A, B) device pair.

Fields are written only while unset, so correlating an already
correlated graph is a no-op.
"""

import logging
from typing import List, Optional

from .models import DeviceGraph, NeighborLink

logger = logging.getLogger(__name__)


def find_reverse_link(
    graph: DeviceGraph,
    device: str,
    neighbor: str,
    link: NeighborLink,
) -> Optional[NeighborLink]:
    """
    Find neighbor's observation of the same physical link back to device.

    Returns None if the neighbor was not crawled or does not report it,
    or when the remote port is unknown.
    """
    if not link.remote_port:
        return None
    reverse_links: List[NeighborLink] = graph.get(neighbor, {}).get(device, [])
    for candidate in reverse_links:
        if candidate.local_port == link.remote_port:
            return candidate
    return None


def correlate_links(graph: DeviceGraph) -> DeviceGraph:
    """
    Populate remote port and remote LAG fields across the graph.

    Mutates the NeighborLink objects in place and returns the graph.

    For a matched pair:
    - remote_member_port_id / remote_port_name are the remote physical port
    - when both ends are LAG members, remote_lag_port_id / _name are set
      on both links and remote_port_id is the remote aggregator
    - otherwise remote_port_id is the remote physical port
    """
    matched = 0
    unmatched = 0

    for device, neighbors in graph.items():
        for neighbor, links in neighbors.items():
            if neighbor == device:
                continue
            for link in links:
                if link.is_correlated and (not link.is_lag or link.remote_lag_port_id is not None):
                    continue

                reverse = find_reverse_link(graph, device, neighbor, link)
                if reverse is None:
                    unmatched += 1
                    continue
                matched += 1

                if link.is_lag and reverse.is_lag and link.remote_lag_port_id is None:
                    link.remote_lag_port_id = reverse.lag_port_id
                    link.remote_lag_port_name = reverse.lag_port_name
                    if reverse.remote_lag_port_id is None:
                        reverse.remote_lag_port_id = link.lag_port_id
                        reverse.remote_lag_port_name = link.lag_port_name

                if link.remote_member_port_id is None:
                    link.remote_member_port_id = reverse.local_port_id
                    link.remote_port_name = reverse.local_port_name

                if link.remote_port_id is None:
                    if link.is_lag and link.remote_lag_port_id is not None:
                        link.remote_port_id = link.remote_lag_port_id
                    else:
                        link.remote_port_id = reverse.local_port_id

    logger.debug("Correlated %d links, %d without a reverse entry", matched, unmatched)
    return graph
