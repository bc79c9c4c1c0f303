"""
CDP Topology - LAG Membership Collector.

Reads IEEE8023-LAG-MIB dot3adAggPortTable to find which physical
ports are bundled into an aggregator.

Lookup failures never propagate. They are reported through
LagMembership.status so callers can tell an agent without the MIB
(NOT_SUPPORTED) from a failed query (QUERY_FAILED). Both are treated
as "no LAG members" and neither is retried.
"""

import logging

from ...exceptions import NoSuchObject, SNMPError
from ...models import LagMembership
from ...oids import LAG
from ..client import SNMPCapability
from ..parsers import decode_int

logger = logging.getLogger(__name__)


async def get_lag_membership(client: SNMPCapability) -> LagMembership:
    """
    Get LAG membership for every port of a device.

    Returns:
        LagMembership with status MEMBERS on success
    """
    try:
        aggregate = await client.walk_indexed(LAG.AGGREGATE_OR_INDIVIDUAL)
        attached = await client.walk_indexed(LAG.ATTACHED_AGG_ID)
    except NoSuchObject as e:
        logger.debug("%s: LAG MIB not supported: %s", client.host, e)
        return LagMembership.not_supported(str(e))
    except SNMPError as e:
        logger.warning("%s: LAG membership query failed, treating ports as individual: %s",
                       client.host, e)
        return LagMembership.query_failed(str(e))

    if not aggregate and not attached:
        logger.debug("%s: dot3adAggPortTable empty", client.host)
        return LagMembership.not_supported("dot3adAggPortTable empty")

    membership = LagMembership()
    for if_index, value in aggregate.items():
        if isinstance(if_index, int):
            membership.aggregate[if_index] = client.truth_value(value)
    for if_index, value in attached.items():
        lag_id = decode_int(value)
        if isinstance(if_index, int) and lag_id:
            membership.attached[if_index] = lag_id

    logger.debug(
        "%s: %d LAG member ports",
        client.host,
        sum(1 for i in membership.aggregate if membership.attached_lag(i) is not None)
    )
    return membership
