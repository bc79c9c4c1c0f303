"""
CDP Topology - Concurrent Topology Engine.

Crawls a network over CDP starting from one seed device and turns the
per-device observations into a link topology.

Features:
- Single-hop neighbor tables
- Multi-hop crawl, breadth-first by depth
- CONCURRENT device queries within each depth (bounded by a semaphore)
- Claimed-set deduplication, each device queried at most once
- Ignore list pruning, optional depth limit
- Per-device timeout, treated as unreachable
- Resumable: a partially built graph can be passed back in
- Structured event emission

All graph mutation happens in the crawl coroutine. Device workers only
return the neighbor table they fetched, so the result does not depend
on the order sibling queries complete in.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from pysnmp.hlapi.v3arch.asyncio import SnmpEngine

from .config import CrawlConfig
from .correlate import correlate_links
from .events import EventEmitter
from .exceptions import DeviceUnreachable, NoSuchObject, SNMPError
from .models import CrawlResult, DeviceGraph, LinkTopology, NeighborLink
from .snmp.client import SNMPCapability, SNMPClient
from .snmp.collectors.cdp import get_cdp_neighbors, get_device_id
from .topology import link_topology as build_link_topology

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], SNMPCapability]
NeighborTable = Dict[str, List[NeighborLink]]


class TopologyEngine:
    """
    CDP topology discovery engine.

    Usage:
        engine = TopologyEngine.from_config("10.0.0.1", CrawlConfig(community="public"))

        graph = await engine.crawl()
        topology = await engine.link_topology(graph)

    Attributes:
        client: SNMP access to the seed device
        events: EventEmitter for crawl progress
        last_result: CrawlResult of the most recent crawl
    """

    def __init__(
        self,
        client: SNMPCapability,
        client_factory: Optional[ClientFactory] = None,
        max_concurrent: int = 10,
        device_timeout: float = 60.0,
        max_depth: Optional[int] = None,
        ignore: Optional[Iterable[str]] = None,
        event_emitter: Optional[EventEmitter] = None,
    ):
        """
        Initialize topology engine.

        Args:
            client: SNMP client for the seed device
            client_factory: Opens a client for a neighbor id (defaults
                to client.for_host, reusing the seed's community)
            max_concurrent: Device queries allowed in flight at once
            device_timeout: Seconds allowed for one device's neighbor table
            max_depth: Hops from the seed to crawl, None for unlimited
            ignore: Default ignore list for crawl()
            event_emitter: Shared emitter (created if not provided)
        """
        self.client = client
        self.client_factory = client_factory or client.for_host
        self.max_concurrent = max_concurrent
        self.device_timeout = device_timeout
        self.max_depth = max_depth
        self.ignore = self._normalize_ignore(ignore) if ignore is not None else set()
        self.events = event_emitter or EventEmitter()
        self.last_result: Optional[CrawlResult] = None

    @classmethod
    def from_config(
        cls,
        seed_host: str,
        config: CrawlConfig,
        snmp_engine: Optional[SnmpEngine] = None,
        event_emitter: Optional[EventEmitter] = None,
    ) -> 'TopologyEngine':
        """Build an engine backed by pysnmp from a CrawlConfig."""
        client = SNMPClient(
            seed_host,
            config.community,
            port=config.port,
            timeout=config.timeout,
            retries=config.retries,
            bulk_size=config.bulk_size,
            engine=snmp_engine,
        )
        return cls(
            client,
            max_concurrent=config.max_concurrent,
            device_timeout=config.device_timeout,
            max_depth=config.max_depth,
            ignore=config.ignore,
            event_emitter=event_emitter,
        )

    # =========================================================================
    # Single Device
    # =========================================================================

    async def neighbors(self, client: Optional[SNMPCapability] = None) -> NeighborTable:
        """
        Get one device's CDP neighbors.

        Args:
            client: Device to query (defaults to the seed)

        Returns:
            Dict mapping neighbor device id to links, {} if CDP is off
        """
        return await get_cdp_neighbors(client or self.client)

    async def device_id(self) -> str:
        """
        CDP device id of the seed.

        Falls back to the seed's host when the agent does not report one.
        """
        try:
            device_id = await get_device_id(self.client)
        except NoSuchObject:
            device_id = ""
        if not device_id:
            logger.warning("%s: no cdpGlobalDeviceId, using host as device id", self.client.host)
            return self.client.host
        return device_id

    # =========================================================================
    # Crawl
    # =========================================================================

    @staticmethod
    def _normalize_ignore(ignore: Iterable[str]) -> Set[str]:
        if isinstance(ignore, (str, bytes)):
            raise TypeError("ignore must be a collection of device ids, not a single string")
        try:
            items = set(ignore)
        except TypeError:
            raise TypeError(f"ignore must be a collection of device ids, got {type(ignore).__name__}")
        for item in items:
            if not isinstance(item, str):
                raise TypeError(f"ignore entries must be device id strings, got {item!r}")
        return items

    async def _query_device(
        self,
        target: str,
        depth: int,
        semaphore: asyncio.Semaphore,
        client: Optional[SNMPCapability] = None,
    ) -> Tuple[NeighborTable, float]:
        """
        Rate-limited, time-limited neighbor table fetch for one device.

        Opens the client through client_factory when none is given, so a
        connect failure is reported as this device's outcome.
        """
        self.events.device_started(target, depth)

        async with semaphore:
            if client is None:
                client = self.client_factory(target)
            start = time.monotonic()
            try:
                neighbors = await asyncio.wait_for(
                    get_cdp_neighbors(client),
                    timeout=self.device_timeout
                )
            except asyncio.TimeoutError:
                raise DeviceUnreachable(target, f"no answer within {self.device_timeout}s")
            return neighbors, (time.monotonic() - start) * 1000

    def _expand(
        self,
        device: str,
        graph: DeviceGraph,
        claimed: Set[str],
        ignore: Set[str],
        depth: int,
        max_depth: Optional[int],
        result: CrawlResult,
    ) -> List[str]:
        """
        Prune device's adjacency and claim its unvisited neighbors.

        Removes self-loops and ignored neighbors from the adjacency.
        Returns the neighbor ids to query at depth + 1.
        """
        adjacency = graph[device]
        queued: List[str] = []

        for neighbor in list(adjacency):
            if neighbor == device:
                del adjacency[neighbor]
                result.skipped += 1
                self.events.neighbor_skipped(neighbor, "self-loop", device)
                continue

            if neighbor in ignore:
                del adjacency[neighbor]
                result.ignored += 1
                self.events.neighbor_ignored(neighbor, device)
                continue

            if neighbor in claimed:
                result.skipped += 1
                self.events.neighbor_skipped(neighbor, "already claimed", device)
                continue

            if max_depth is not None and depth >= max_depth:
                result.skipped += 1
                self.events.neighbor_skipped(neighbor, "depth limit", device)
                continue

            claimed.add(neighbor)
            queued.append(neighbor)
            self.events.neighbor_queued(neighbor, device, depth + 1)

        return queued

    async def crawl(
        self,
        seed_device_id: Optional[str] = None,
        ignore: Optional[Iterable[str]] = None,
        graph: Optional[DeviceGraph] = None,
        max_depth: Optional[int] = None,
        correlate: bool = True,
    ) -> DeviceGraph:
        """
        Crawl the CDP topology reachable from the seed device.

        Devices at one depth are queried concurrently; depths proceed
        breadth-first. Each device id is queried at most once.

        Args:
            seed_device_id: CDP id of the seed (read from the device if None)
            ignore: Device ids to prune and never query (engine default if None)
            graph: Partial graph to resume; its keys are not re-queried and
                it is extended in place. Ignored ids are removed from it.
                Resumed devices are expanded at depth 0, so max_depth
                counts hops from each of them rather than from the seed.
            max_depth: Override the engine's depth limit
            correlate: Fill remote port / LAG fields when done

        Returns:
            DeviceGraph keyed by device id. Neighbors that were ignored are
            absent everywhere; neighbors that failed or lie past max_depth
            appear only in their parent's adjacency.

        Raises:
            DeviceUnreachable: the seed device could not be queried
            TypeError: ignore is a string or not a collection
        """
        ignore_set = self._normalize_ignore(ignore) if ignore is not None else set(self.ignore)
        if graph is not None and not isinstance(graph, dict):
            raise TypeError(f"graph must be a dict, got {type(graph).__name__}")
        max_depth = max_depth if max_depth is not None else self.max_depth

        if seed_device_id is None:
            seed_device_id = await self.device_id()
        if seed_device_id in ignore_set:
            raise ValueError(f"Seed device {seed_device_id} is in the ignore list")

        graph = graph if graph is not None else {}
        for device in ignore_set.intersection(graph):
            logger.info("Dropping ignored device %s from resumed graph", device)
            del graph[device]
        claimed: Set[str] = set(graph)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        result = CrawlResult(
            seed=seed_device_id,
            max_depth=max_depth,
            started_at=datetime.now(),
        )
        self.last_result = result
        self.events.crawl_started(
            seed_device_id, max_depth, sorted(ignore_set), self.max_concurrent
        )

        # Seed
        if seed_device_id not in graph:
            claimed.add(seed_device_id)
            result.total_attempted += 1
            try:
                neighbors, duration_ms = await self._query_device(
                    seed_device_id, 0, semaphore, client=self.client
                )
            except SNMPError as e:
                result.failed += 1
                result.failures[seed_device_id] = str(e)
                self.events.device_failed(seed_device_id, str(e), 0)
                if isinstance(e, DeviceUnreachable):
                    raise
                raise DeviceUnreachable(seed_device_id, str(e)) from e

            graph[seed_device_id] = neighbors
            result.successful += 1
            self.events.device_complete(seed_device_id, len(neighbors), duration_ms, 0)
        else:
            logger.info("Resuming crawl with %d known devices", len(graph))

        result.depths[seed_device_id] = 0

        # Expand the seed first, then any pre-seeded devices
        frontier = [seed_device_id] + [d for d in graph if d != seed_device_id]
        for device in frontier:
            result.depths.setdefault(device, 0)
        depth = 0

        while frontier:
            batch: List[str] = []
            for device in frontier:
                batch.extend(
                    self._expand(device, graph, claimed, ignore_set, depth, max_depth, result)
                )

            if not batch:
                break

            depth += 1
            self.events.depth_started(depth, len(batch))

            tasks = [
                self._query_device(target, depth, semaphore)
                for target in batch
            ]

            # Gather with exception handling - one failure must not stop others
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)

            frontier = []
            depth_discovered = 0
            depth_failed = 0

            for target, outcome in zip(batch, outcomes):
                result.total_attempted += 1
                result.depths[target] = depth

                if isinstance(outcome, Exception):
                    result.failed += 1
                    result.failures[target] = str(outcome)
                    depth_failed += 1
                    logger.warning("Skipping %s: %s", target, outcome)
                    self.events.device_failed(target, str(outcome), depth)
                    continue
                if isinstance(outcome, BaseException):
                    raise outcome

                neighbors, duration_ms = outcome
                graph[target] = neighbors
                result.successful += 1
                depth_discovered += 1
                frontier.append(target)
                self.events.device_complete(target, len(neighbors), duration_ms, depth)

            self.events.depth_complete(depth, depth_discovered, depth_failed)

        if correlate:
            correlate_links(graph)

        result.completed_at = datetime.now()
        self.events.crawl_complete(result.duration_seconds or 0, len(graph))
        logger.info(
            "Crawl from %s complete: %d devices, %d failed",
            seed_device_id, len(graph), result.failed
        )
        return graph

    async def link_topology(self, graph: Optional[DeviceGraph] = None) -> LinkTopology:
        """
        Deduplicated link topology.

        Crawls (and correlates) from the seed with the engine defaults
        when no graph is given. A supplied graph is used as is, so links
        it holds without remote ids keep remote_port_id None.
        """
        if graph is None:
            graph = await self.crawl()
        return build_link_topology(graph)


# =============================================================================
# Convenience Functions
# =============================================================================

async def discover_topology(
    seed_host: str,
    config: Optional[CrawlConfig] = None,
    event_emitter: Optional[EventEmitter] = None,
) -> LinkTopology:
    """
    Crawl from seed_host and return the deduplicated link topology.

    Example:
        topology = await discover_topology("10.0.0.1", CrawlConfig.from_env())
    """
    engine = TopologyEngine.from_config(
        seed_host, config or CrawlConfig.from_env(), event_emitter=event_emitter
    )
    return await engine.link_topology()
