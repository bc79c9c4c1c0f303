"""
CDP Topology - SNMP Table Walker.

Async SNMP GETBULK/GET over pysnmp.hlapi.v3arch.asyncio.

Features:
- Prefix-based table boundary detection
- Configurable bulk size and iteration limits
- Typed failures: DeviceUnreachable for transport/auth problems,
  NoSuchObject for OIDs the agent does not implement

Usage:
    from cdp_topology.snmp.walker import SNMPWalker

    walker = SNMPWalker(auth=CommunityData("public", mpModel=1))

    # Walk a table
    results = await walker.walk("192.168.1.1", "1.3.6.1.2.1.31.1.1.1.1")

    # Get a single value
    value = await walker.get("192.168.1.1", "1.3.6.1.4.1.9.9.23.1.3.4.0")
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Tuple, Optional, Any, Union

from pysnmp.hlapi.v3arch.asyncio import (
    bulk_cmd, get_cmd,
    SnmpEngine, CommunityData, UsmUserData,
    UdpTransportTarget, ContextData,
    ObjectType, ObjectIdentity,
)
from pysnmp.proto import rfc1905

from ..exceptions import DeviceUnreachable, NoSuchObject, SNMPError

logger = logging.getLogger(__name__)

# Type aliases
AuthData = Union[CommunityData, UsmUserData]
WalkResult = List[Tuple[str, Any]]

# SNMP PDU error-status values
ERR_NO_SUCH_NAME = 2
ERR_AUTHORIZATION = 16

_MISSING_VALUE_TYPES = (
    rfc1905.NoSuchObject,
    rfc1905.NoSuchInstance,
    rfc1905.EndOfMibView,
)


def is_missing_value(value: Any) -> bool:
    """True for noSuchObject / noSuchInstance / endOfMibView exceptions."""
    return isinstance(value, _MISSING_VALUE_TYPES)


class SNMPWalker:
    """
    Async SNMP table walker.

    Wraps pysnmp's bulk_cmd/get_cmd with boundary detection and
    translation of pysnmp error indications into exceptions.

    Attributes:
        engine: pysnmp SnmpEngine instance
        auth: CommunityData (v2c) or UsmUserData (v3)
        port: UDP port of the agent
        default_timeout: Default timeout in seconds
        default_retries: Default retry count
        bulk_size: Number of OIDs per GETBULK request
        max_iterations: Safety limit for walk iterations
    """

    def __init__(
        self,
        engine: Optional[SnmpEngine] = None,
        auth: Optional[AuthData] = None,
        port: int = 161,
        default_timeout: float = 3.0,
        default_retries: int = 1,
        bulk_size: int = 25,
        max_iterations: int = 1500,
    ):
        self.engine = engine or SnmpEngine()
        self.auth = auth
        self.port = port
        self.default_timeout = default_timeout
        self.default_retries = default_retries
        self.bulk_size = bulk_size
        self.max_iterations = max_iterations

    def _raise_for_status(self, target: str, oid: str, error_status: Any) -> None:
        """Convert a non-zero PDU error-status to an exception."""
        status = int(error_status)
        message = error_status.prettyPrint()
        if status == ERR_NO_SUCH_NAME:
            raise NoSuchObject(target, message, oid)
        if status == ERR_AUTHORIZATION:
            raise DeviceUnreachable(target, message, oid)
        raise SNMPError(target, message, oid)

    async def walk(
        self,
        target: str,
        oid: str,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
    ) -> WalkResult:
        """
        Walk an SNMP table using GETBULK.

        Walks all OIDs under the given base OID until leaving the
        subtree. An absent table yields an empty list.

        Args:
            target: Target IP address or hostname
            oid: Base OID (numeric string)
            timeout: Override timeout
            retries: Override retries

        Returns:
            List of (oid_string, value) tuples

        Raises:
            DeviceUnreachable: no response, timeout or auth failure
        """
        if not self.auth:
            raise ValueError("No auth data provided")

        timeout = timeout or self.default_timeout
        retries = retries if retries is not None else self.default_retries

        base_oid = oid.strip('.')
        prefix = base_oid + '.'
        results: WalkResult = []

        logger.debug("Walking %s on %s", base_oid, target)
        start_time = datetime.now()

        transport = await self._transport(target, timeout, retries)
        last_oid = ObjectIdentity(base_oid)

        for iteration in range(self.max_iterations):
            try:
                error_indication, error_status, error_index, var_binds = await asyncio.wait_for(
                    bulk_cmd(
                        self.engine,
                        self.auth,
                        transport,
                        ContextData(),
                        0,  # non-repeaters
                        self.bulk_size,  # max-repetitions
                        ObjectType(last_oid),
                        lexicographicMode=False
                    ),
                    timeout=timeout * (retries + 1) + 2
                )
            except asyncio.TimeoutError:
                raise DeviceUnreachable(target, "request timed out", base_oid)

            if error_indication:
                raise DeviceUnreachable(target, str(error_indication), base_oid)

            if error_status:
                if int(error_status) == ERR_NO_SUCH_NAME:
                    # SNMPv1 style end of view
                    break
                self._raise_for_status(target, base_oid, error_status)

            if not var_binds:
                break

            in_table = False
            for name, value in var_binds:
                oid_str = str(name)
                if not oid_str.startswith(prefix) or is_missing_value(value):
                    in_table = False
                    break
                results.append((oid_str, value))
                last_oid = name
                in_table = True

            if not in_table or len(var_binds) < self.bulk_size:
                break

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.debug(
            "Walk of %s on %s complete: %d results in %.2fs (%d iterations)",
            base_oid, target, len(results), elapsed, iteration + 1
        )

        return results

    async def get(
        self,
        target: str,
        oid: str,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
    ) -> Any:
        """
        Get a single SNMP value.

        Args:
            target: Target IP address
            oid: OID to get (should end in .0 for scalars)
            timeout: Override timeout
            retries: Override retries

        Returns:
            The raw pysnmp value

        Raises:
            DeviceUnreachable: no response, timeout or auth failure
            NoSuchObject: the agent does not implement the OID
        """
        if not self.auth:
            raise ValueError("No auth data provided")

        timeout = timeout or self.default_timeout
        retries = retries if retries is not None else self.default_retries

        transport = await self._transport(target, timeout, retries)

        try:
            error_indication, error_status, error_index, var_binds = await asyncio.wait_for(
                get_cmd(
                    self.engine,
                    self.auth,
                    transport,
                    ContextData(),
                    ObjectType(ObjectIdentity(oid))
                ),
                timeout=timeout * (retries + 1) + 2
            )
        except asyncio.TimeoutError:
            raise DeviceUnreachable(target, "request timed out", oid)

        if error_indication:
            raise DeviceUnreachable(target, str(error_indication), oid)

        if error_status:
            self._raise_for_status(target, oid, error_status)

        if not var_binds or is_missing_value(var_binds[0][1]):
            raise NoSuchObject(target, "no such object", oid)

        return var_binds[0][1]

    async def _transport(self, target: str, timeout: float, retries: int) -> UdpTransportTarget:
        """Create the UDP transport, mapping resolution failures to unreachable."""
        try:
            return await UdpTransportTarget.create(
                (target, self.port),
                timeout=timeout,
                retries=retries
            )
        except Exception as e:
            raise DeviceUnreachable(target, f"{type(e).__name__}: {e}")
