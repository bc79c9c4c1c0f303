"""
Shared fixtures: an in-memory SNMP network.

FakeNetwork holds one OID table per device, keyed by the device's CDP
id, which doubles as its host name. FakeSNMPClient answers get/walk
requests from those tables the same way SNMPClient does against a
real agent.
"""

import asyncio
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

import pytest

from cdp_topology.exceptions import DeviceUnreachable, NoSuchObject
from cdp_topology.oids import CDP, INTERFACES, LAG
from cdp_topology.snmp import parsers
from cdp_topology.snmp.client import make_index


def _oid_key(oid: str) -> Tuple[int, ...]:
    return tuple(int(p) for p in oid.split('.'))


class FakeNetwork:
    """Devices, reachability and injected failures."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, Any]] = {}
        self.unreachable = set()
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.delays: Dict[str, float] = {}
        self.cdp_walks: Dict[str, int] = defaultdict(int)

    def add_device(
        self,
        device_id: str,
        ports: Dict[int, Tuple[str, str]],
        neighbors: List[Tuple[int, str, str]] = (),
        lags: Optional[Dict[int, int]] = None,
        cdp: bool = True,
        lag_mib: bool = True,
    ) -> Dict[str, Any]:
        """
        Register a device.

        Args:
            ports: ifIndex -> (ifName, ifDescr)
            neighbors: (local ifIndex, neighbor id, neighbor port description)
            lags: member ifIndex -> aggregator ifIndex
            cdp: False leaves the CDP MIB out entirely
            lag_mib: False leaves IEEE8023-LAG-MIB out entirely
        """
        lags = lags or {}
        table: Dict[str, Any] = {}

        for if_index, (name, descr) in ports.items():
            table[f"{INTERFACES.IF_NAME}.{if_index}"] = name
            table[f"{INTERFACES.IF_DESCR}.{if_index}"] = descr

        if cdp:
            table[CDP.GLOBAL_DEVICE_ID] = device_id
            table[CDP.GLOBAL_RUN] = 1
            for row, (if_index, neighbor_id, remote_port) in enumerate(neighbors, start=1):
                table[f"{CDP.CACHE_DEVICE_ID}.{if_index}.{row}"] = neighbor_id
                table[f"{CDP.CACHE_DEVICE_PORT}.{if_index}.{row}"] = remote_port

        if lag_mib:
            for if_index in ports:
                member = if_index in lags
                table[f"{LAG.AGGREGATE_OR_INDIVIDUAL}.{if_index}"] = 1 if member else 2
                table[f"{LAG.ATTACHED_AGG_ID}.{if_index}"] = lags.get(if_index, 0)

        self.tables[device_id] = table
        return table

    def client(self, host: str, community: str = "public") -> 'FakeSNMPClient':
        return FakeSNMPClient(self, host, community)


class FakeSNMPClient:
    """SNMPCapability backed by a FakeNetwork."""

    def __init__(self, network: FakeNetwork, host: str, community: str = "public"):
        self.network = network
        self._host = host
        self._community = community

    @property
    def host(self) -> str:
        return self._host

    @property
    def community(self) -> str:
        return self._community

    async def _agent(self, oid: str) -> Dict[str, Any]:
        delay = self.network.delays.get(self._host)
        if delay:
            await asyncio.sleep(delay)
        if self._host in self.network.unreachable or self._host not in self.network.tables:
            raise DeviceUnreachable(self._host, "No SNMP response received before timeout", oid)
        failure = self.network.failures.get((self._host, oid))
        if failure is not None:
            raise failure
        return self.network.tables[self._host]

    async def get(self, oid: str) -> Any:
        table = await self._agent(oid)
        if oid not in table:
            raise NoSuchObject(self._host, "no such object", oid)
        return table[oid]

    async def _walk(self, oid: str) -> List[Tuple[List[str], Any]]:
        if oid == CDP.CACHE_DEVICE_ID:
            self.network.cdp_walks[self._host] += 1
        table = await self._agent(oid)
        prefix = oid + '.'
        rows = sorted(
            ((key, value) for key, value in table.items() if key.startswith(prefix)),
            key=lambda kv: _oid_key(kv[0])
        )
        return [(key[len(prefix):].split('.'), value) for key, value in rows]

    async def walk_indexed(self, oid: str) -> Dict[Any, Any]:
        return {make_index(parts): value for parts, value in await self._walk(oid)}

    async def walk_sub_indexed(self, oid: str, index_length: int = 1) -> Dict[Any, Any]:
        return {
            make_index(parts[:index_length]): value
            for parts, value in await self._walk(oid)
        }

    def translate(self, values, dictionary):
        return parsers.translate(values, dictionary)

    def truth_value(self, value) -> bool:
        return parsers.truth_value(value)

    def for_host(self, host: str) -> 'FakeSNMPClient':
        return FakeSNMPClient(self.network, host, self._community)


# ---------------------------------------------------------------------------
# Helper factories
# ---------------------------------------------------------------------------

def gi(n: int) -> Tuple[str, str]:
    """(ifName, ifDescr) for GigabitEthernet1/0/n."""
    return f"Gi1/0/{n}", f"GigabitEthernet1/0/{n}"


def po(n: int) -> Tuple[str, str]:
    """(ifName, ifDescr) for Port-channel n."""
    return f"Po{n}", f"Port-channel{n}"


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def linear_chain(network) -> FakeNetwork:
    """R1 Gi1/0/1 -- Gi1/0/1 R2 Gi1/0/2 -- Gi1/0/1 R3"""
    network.add_device(
        "R1", ports={1: gi(1)},
        neighbors=[(1, "R2", "GigabitEthernet1/0/1")],
    )
    network.add_device(
        "R2", ports={1: gi(1), 2: gi(2)},
        neighbors=[
            (1, "R1", "GigabitEthernet1/0/1"),
            (2, "R3", "GigabitEthernet1/0/1"),
        ],
    )
    network.add_device(
        "R3", ports={1: gi(1)},
        neighbors=[(1, "R2", "GigabitEthernet1/0/2")],
    )
    return network


@pytest.fixture
def lag_pair(network) -> FakeNetwork:
    """R1 Gi1/0/1+Gi1/0/2 (Po1) == R2 Gi1/0/3+Gi1/0/4 (Po7)"""
    network.add_device(
        "R1", ports={1: gi(1), 2: gi(2), 101: po(1)},
        neighbors=[
            (1, "R2", "GigabitEthernet1/0/3"),
            (2, "R2", "GigabitEthernet1/0/4"),
        ],
        lags={1: 101, 2: 101},
    )
    network.add_device(
        "R2", ports={3: gi(3), 4: gi(4), 107: po(7)},
        neighbors=[
            (3, "R1", "GigabitEthernet1/0/1"),
            (4, "R1", "GigabitEthernet1/0/2"),
        ],
        lags={3: 107, 4: 107},
    )
    return network


@pytest.fixture
def ring(network) -> FakeNetwork:
    """A -- B -- C -- A"""
    network.add_device(
        "A", ports={1: gi(1), 2: gi(2)},
        neighbors=[(1, "B", "GigabitEthernet1/0/1"), (2, "C", "GigabitEthernet1/0/2")],
    )
    network.add_device(
        "B", ports={1: gi(1), 2: gi(2)},
        neighbors=[(1, "A", "GigabitEthernet1/0/1"), (2, "C", "GigabitEthernet1/0/1")],
    )
    network.add_device(
        "C", ports={1: gi(1), 2: gi(2)},
        neighbors=[(1, "B", "GigabitEthernet1/0/2"), (2, "A", "GigabitEthernet1/0/2")],
    )
    return network
