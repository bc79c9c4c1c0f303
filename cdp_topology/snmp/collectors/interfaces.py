"""
CDP Topology - Interface Name Collector.

Collects ifName and ifDescr from IF-MIB, used to name the local
ends of CDP adjacencies and the LAG aggregators they belong to.
"""

import logging
from typing import Dict

from ...exceptions import SNMPError
from ...oids import INTERFACES
from ..client import SNMPCapability
from ..parsers import decode_string

logger = logging.getLogger(__name__)


async def _walk_strings(client: SNMPCapability, oid: str, label: str) -> Dict[int, str]:
    try:
        results = await client.walk_indexed(oid)
    except SNMPError as e:
        logger.warning("%s: %s walk failed, names unavailable: %s", client.host, label, e)
        return {}

    names: Dict[int, str] = {}
    for if_index, value in results.items():
        if isinstance(if_index, int):
            names[if_index] = decode_string(value)
    logger.debug("%s: got %d %s entries", client.host, len(names), label)
    return names


async def get_interface_names(client: SNMPCapability) -> Dict[int, str]:
    """
    Get ifName keyed by ifIndex (e.g. {10101: "Gi1/0/1"}).

    A failed walk yields an empty mapping.
    """
    return await _walk_strings(client, INTERFACES.IF_NAME, "ifName")


async def get_interface_descriptions(client: SNMPCapability) -> Dict[int, str]:
    """
    Get ifDescr keyed by ifIndex (e.g. {10101: "GigabitEthernet1/0/1"}).

    A failed walk yields an empty mapping.
    """
    return await _walk_strings(client, INTERFACES.IF_DESCR, "ifDescr")
