"""
CDP Topology - SNMP Client.

The query surface the collectors and crawler depend on, and its
pysnmp-backed implementation.

SNMPCapability is a structural Protocol: anything providing these
methods can drive discovery, which is how the unit tests substitute
an in-memory network for real agents.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from pysnmp.hlapi.v3arch.asyncio import SnmpEngine, CommunityData

from . import parsers
from .walker import SNMPWalker

logger = logging.getLogger(__name__)

Index = Union[int, str]


class SNMPCapability(Protocol):
    """
    Per-device SNMP access used by topology discovery.

    get/walk methods raise DeviceUnreachable when the agent does not
    answer and NoSuchObject when a scalar is not implemented. An empty
    walk result is valid and means the table has no rows.
    """

    @property
    def host(self) -> str: ...

    @property
    def community(self) -> str: ...

    async def get(self, oid: str) -> Any: ...

    async def walk_indexed(self, oid: str) -> Dict[Index, Any]: ...

    async def walk_sub_indexed(self, oid: str, index_length: int = 1) -> Dict[Index, Any]: ...

    def translate(self, values: Mapping[Any, Any], dictionary: Mapping[Any, str]) -> Dict[Any, str]: ...

    def truth_value(self, value: Any) -> bool: ...

    def for_host(self, host: str) -> 'SNMPCapability': ...


def make_index(parts) -> Index:
    """Single component indexes become ints, compound ones stay dotted."""
    if len(parts) == 1:
        try:
            return int(parts[0])
        except ValueError:
            return parts[0]
    return '.'.join(parts)


class SNMPClient:
    """
    SNMPv2c client for one device.

    Attributes:
        host: Hostname or IP address queried
        community: Community string, reused for neighbors
        walker: Underlying SNMPWalker
    """

    def __init__(
        self,
        host: str,
        community: str,
        port: int = 161,
        timeout: float = 3.0,
        retries: int = 1,
        bulk_size: int = 25,
        engine: Optional[SnmpEngine] = None,
    ):
        self._host = host
        self._community = community
        self.port = port
        self.timeout = timeout
        self.retries = retries
        self.bulk_size = bulk_size
        self.walker = SNMPWalker(
            engine=engine,
            auth=CommunityData(community, mpModel=1),
            port=port,
            default_timeout=timeout,
            default_retries=retries,
            bulk_size=bulk_size,
        )

    def __repr__(self) -> str:
        return f"SNMPClient({self._host!r}, port={self.port})"

    @property
    def host(self) -> str:
        return self._host

    @property
    def community(self) -> str:
        return self._community

    async def get(self, oid: str) -> Any:
        return await self.walker.get(self._host, oid)

    async def walk_indexed(self, oid: str) -> Dict[Index, Any]:
        """Walk a table, keyed by the full index below the column OID."""
        prefix = oid.strip('.') + '.'
        results = {}
        for oid_str, value in await self.walker.walk(self._host, oid):
            results[make_index(oid_str[len(prefix):].split('.'))] = value
        return results

    async def walk_sub_indexed(self, oid: str, index_length: int = 1) -> Dict[Index, Any]:
        """
        Walk a table with a compound index, keeping only the leading
        index_length components as the key.

        Rows sharing a leading index collapse to the last one walked.
        """
        prefix = oid.strip('.') + '.'
        results = {}
        for oid_str, value in await self.walker.walk(self._host, oid):
            parts = oid_str[len(prefix):].split('.')
            results[make_index(parts[:index_length])] = value
        return results

    def translate(self, values: Mapping[Any, Any], dictionary: Mapping[Any, str]) -> Dict[Any, str]:
        return parsers.translate(values, dictionary)

    def truth_value(self, value: Any) -> bool:
        return parsers.truth_value(value)

    def for_host(self, host: str) -> 'SNMPClient':
        """Open a client to another device with the same credentials and engine."""
        logger.debug("Opening SNMP client for %s via %s", host, self._host)
        return SNMPClient(
            host,
            self._community,
            port=self.port,
            timeout=self.timeout,
            retries=self.retries,
            bulk_size=self.bulk_size,
            engine=self.walker.engine,
        )
