"""
Error hierarchy for device discovery.

Only fatal conditions are exceptions. Degraded matches (unresolved bus
address correction, unparsable class ids, missing correlation entries or
drivers) are logged and the affected device is skipped.
"""

from typing import List


class DiscoveryError(Exception):
    """Base class for fatal discovery errors."""
    pass


class AcquisitionError(DiscoveryError):
    """Raised when neither the config drive nor the metadata service yields the documents."""
    pass


class AmbiguousMACError(DiscoveryError):
    """Raised when more than one device reports the same MAC address."""
    
    def __init__(self, mac: str, addresses: List[str]):
        self.mac = mac
        self.addresses = addresses
        super().__init__(
            f"more than one device found with MAC address {mac} is unsupported "
            f"(addresses: {', '.join(addresses)})"
        )


class DiscoveryEnvironmentError(DiscoveryError):
    """Raised when the hardware inventory cannot be queried or reports no devices."""
    pass
