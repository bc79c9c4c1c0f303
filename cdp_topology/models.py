"""
CDP Topology - Data Models.

Dataclasses for neighbor observations, crawl results and the
deduplicated link topology.

Design Principles:
- Remote-side fields are Optional and default to None, so "not yet
  correlated" is distinct from any reported value
- Device identities are plain strings used as map keys
- Serializable to JSON-friendly dicts for export by callers
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class LagStatus(str, Enum):
    """Outcome of a LAG membership lookup."""
    MEMBERS = "members"              # table read, memberships known
    NOT_SUPPORTED = "not_supported"  # agent lacks IEEE8023-LAG-MIB
    QUERY_FAILED = "query_failed"    # transient or transport failure


@dataclass
class LagMembership:
    """
    LAG membership of a device's ports.

    Populated from dot3adAggPortTable. A port is a LAG member when its
    AggregateOrIndividual flag is true and it reports an attached
    aggregator ifIndex. Any status other than MEMBERS means every port
    is treated as individual.
    """
    status: LagStatus = LagStatus.MEMBERS
    aggregate: Dict[int, bool] = field(default_factory=dict)   # ifIndex -> aggregatable
    attached: Dict[int, int] = field(default_factory=dict)     # ifIndex -> aggregator ifIndex
    error: Optional[str] = None

    @classmethod
    def not_supported(cls, error: Optional[str] = None) -> 'LagMembership':
        return cls(status=LagStatus.NOT_SUPPORTED, error=error)

    @classmethod
    def query_failed(cls, error: Optional[str] = None) -> 'LagMembership':
        return cls(status=LagStatus.QUERY_FAILED, error=error)

    def attached_lag(self, if_index: int) -> Optional[int]:
        """Aggregator ifIndex for a member port, or None if not a member."""
        if self.status != LagStatus.MEMBERS:
            return None
        if not self.aggregate.get(if_index):
            return None
        lag_id = self.attached.get(if_index)
        if not lag_id:
            return None
        return lag_id


@dataclass
class NeighborLink:
    """
    One CDP adjacency as observed by the local device.

    Local fields come from the device's own ifTable and LAG table.
    Remote fields are filled by correlate_links() once the neighbor
    has been crawled and reports the reverse link.

    remote_port_id is the effective remote endpoint: the remote
    aggregator when both ends are LAG members, otherwise the remote
    physical port. remote_member_port_id and remote_port_name always
    describe the remote physical port.
    """
    # Local side
    local_port_id: int                           # ifIndex
    local_port_name: str = ""                    # ifName
    local_port: str = ""                         # ifDescr
    remote_port: str = ""                        # cdpCacheDevicePort

    # Local LAG membership
    is_lag: bool = False
    lag_port_id: Optional[int] = None            # aggregator ifIndex
    lag_port_name: Optional[str] = None          # aggregator ifName

    # Remote side, populated by correlation
    remote_port_id: Optional[int] = None
    remote_port_name: Optional[str] = None
    remote_member_port_id: Optional[int] = None
    remote_lag_port_id: Optional[int] = None
    remote_lag_port_name: Optional[str] = None

    @property
    def is_correlated(self) -> bool:
        """True once the reverse link has been found."""
        return self.remote_port_id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NeighborLink':
        """Create from dictionary."""
        return cls(**data)


# device id -> neighbor device id -> parallel links in discovery order
DeviceGraph = Dict[str, Dict[str, List[NeighborLink]]]


@dataclass(frozen=True)
class LinkDetail:
    """
    One physical link in the deduplicated topology.

    For LAG links remote_port_id carries the remote aggregator id.
    """
    remote_port: str
    is_lag: bool
    local_port_id: int
    remote_port_id: Optional[int] = None
    local_lag_port_id: Optional[int] = None
    local_lag_port_name: Optional[str] = None
    remote_lag_port_id: Optional[int] = None
    remote_lag_port_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting LAG fields for individual links."""
        d = {
            'remote_port': self.remote_port,
            'is_lag': self.is_lag,
            'local_port_id': self.local_port_id,
            'remote_port_id': self.remote_port_id,
        }
        if self.is_lag:
            d['local_lag_port_id'] = self.local_lag_port_id
            d['local_lag_port_name'] = self.local_lag_port_name
            d['remote_lag_port_id'] = self.remote_lag_port_id
            d['remote_lag_port_name'] = self.remote_lag_port_name
        return d


# device A -> device B -> A's local port description -> link detail
LinkTopology = Dict[str, Dict[str, Dict[str, LinkDetail]]]


def graph_to_dict(graph: DeviceGraph) -> Dict[str, Any]:
    """Convert a DeviceGraph to nested dicts/lists of primitives."""
    return {
        device: {
            neighbor: [link.to_dict() for link in links]
            for neighbor, links in neighbors.items()
        }
        for device, neighbors in graph.items()
    }


def graph_from_dict(data: Dict[str, Any]) -> DeviceGraph:
    """Rebuild a DeviceGraph from graph_to_dict() output."""
    return {
        device: {
            neighbor: [NeighborLink.from_dict(dict(link)) for link in links]
            for neighbor, links in neighbors.items()
        }
        for device, neighbors in data.items()
    }


def topology_to_dict(topology: LinkTopology) -> Dict[str, Any]:
    """Convert a LinkTopology to nested dicts of primitives."""
    return {
        device: {
            neighbor: {port: detail.to_dict() for port, detail in ports.items()}
            for neighbor, ports in neighbors.items()
        }
        for device, neighbors in topology.items()
    }


def count_links(topology: LinkTopology) -> int:
    """Total number of physical links in a LinkTopology."""
    return sum(
        len(ports)
        for neighbors in topology.values()
        for ports in neighbors.values()
    )


@dataclass
class CrawlResult:
    """
    Summary of one crawl.

    The DeviceGraph itself is returned by crawl(); this records what
    happened along the way.
    """
    seed: str = ""
    max_depth: Optional[int] = None

    # Statistics
    total_attempted: int = 0
    successful: int = 0
    failed: int = 0
    ignored: int = 0
    skipped: int = 0

    # device id -> error message
    failures: Dict[str, str] = field(default_factory=dict)
    depths: Dict[str, int] = field(default_factory=dict)

    # Timing
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get crawl duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'seed': self.seed,
            'max_depth': self.max_depth,
            'total_attempted': self.total_attempted,
            'successful': self.successful,
            'failed': self.failed,
            'ignored': self.ignored,
            'skipped': self.skipped,
            'failures': dict(self.failures),
            'depths': dict(self.depths),
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
        }
