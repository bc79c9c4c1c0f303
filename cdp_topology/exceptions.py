"""
CDP Topology - Exceptions.

Error taxonomy for SNMP access and topology discovery.

Hierarchy:
    CDPTopologyError
    ├── SNMPError
    │   ├── DeviceUnreachable   # transport/auth failure, no response
    │   └── NoSuchObject        # OID not present on the agent
    ├── MalformedAttribute      # value does not match expected encoding
    └── ConfigError             # invalid crawl configuration

Feature-disabled conditions (CDP off, empty cache table) are never
raised; they surface as empty results. LAG lookup failures are
reported through LagMembership.status rather than raised.
"""


class CDPTopologyError(Exception):
    """Base exception for topology discovery."""
    pass


class SNMPError(CDPTopologyError):
    """Base exception for SNMP queries."""

    def __init__(self, host: str, message: str, oid: str = ""):
        self.host = host
        self.oid = oid
        detail = f" ({oid})" if oid else ""
        super().__init__(f"{host}{detail}: {message}")


class DeviceUnreachable(SNMPError):
    """Raised when a device does not respond or rejects our credentials."""
    pass


class NoSuchObject(SNMPError):
    """Raised when the requested OID is not implemented by the agent."""
    pass


class MalformedAttribute(CDPTopologyError):
    """Raised when an SNMP value cannot be decoded as expected."""

    def __init__(self, message: str, raw_value=None):
        self.raw_value = raw_value
        super().__init__(message)


class ConfigError(CDPTopologyError):
    """Raised when crawl configuration is invalid."""
    pass
