"""
CDP Topology - Layer 2 Topology Discovery.

Discovers Layer 2 topology from the Cisco Discovery Protocol cache
exposed over SNMP, crawling neighbor to neighbor and folding the
two-sided observations into one list of physical links.

Architecture:
    cdp_topology/
    ├── models.py      # NeighborLink, LinkDetail, CrawlResult, LagMembership
    ├── oids.py        # SNMP OID constants
    ├── exceptions.py  # Error taxonomy
    ├── config.py      # CrawlConfig (YAML + environment)
    ├── events.py      # Crawl progress events
    ├── engine.py      # TopologyEngine: neighbors, crawl, link topology
    ├── correlate.py   # Reverse-link and LAG correlation
    ├── topology.py    # Link deduplication
    └── snmp/
        ├── walker.py  # Async SNMP GETBULK
        ├── client.py  # SNMPCapability protocol, SNMPClient
        ├── parsers.py # Value decoding
        └── collectors/
            ├── interfaces.py # IF-MIB names
            ├── lag.py        # IEEE8023-LAG-MIB
            └── cdp.py        # CISCO-CDP-MIB

Quick Start:
    from cdp_topology import TopologyEngine, CrawlConfig

    config = CrawlConfig.from_yaml("crawl.yaml")
    engine = TopologyEngine.from_config("10.0.0.1", config)

    graph = await engine.crawl(ignore=["oob-sw01"])
    topology = await engine.link_topology(graph)
"""

from .models import (
    NeighborLink,
    DeviceGraph,
    LinkDetail,
    LinkTopology,
    LagMembership,
    LagStatus,
    CrawlResult,
    graph_to_dict,
    graph_from_dict,
    topology_to_dict,
    count_links,
)

from .exceptions import (
    CDPTopologyError,
    SNMPError,
    DeviceUnreachable,
    NoSuchObject,
    MalformedAttribute,
    ConfigError,
)

from .oids import INTERFACES, LAG, CDP

from .config import CrawlConfig
from .events import EventEmitter, EventType, CrawlEvent, LoggingEventHandler
from .correlate import correlate_links
from .topology import link_topology
from .engine import TopologyEngine, discover_topology


__version__ = "0.1.0"

__all__ = [
    # Engine
    'TopologyEngine',
    'discover_topology',
    'correlate_links',
    'link_topology',
    # Config / events
    'CrawlConfig',
    'EventEmitter',
    'EventType',
    'CrawlEvent',
    'LoggingEventHandler',
    # Models
    'NeighborLink',
    'DeviceGraph',
    'LinkDetail',
    'LinkTopology',
    'LagMembership',
    'LagStatus',
    'CrawlResult',
    'graph_to_dict',
    'graph_from_dict',
    'topology_to_dict',
    'count_links',
    # Errors
    'CDPTopologyError',
    'SNMPError',
    'DeviceUnreachable',
    'NoSuchObject',
    'MalformedAttribute',
    'ConfigError',
    # OID groups
    'INTERFACES',
    'LAG',
    'CDP',
]
