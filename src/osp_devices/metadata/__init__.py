"""
OpenStack metadata acquisition.

Reads meta_data.json and network_data.json from the config drive, falling
back to the metadata service, and corrects device bus addresses against the
live host.
"""

from .models import DeviceDescriptor, InstanceMetadata, Link, Network, NetworkTopology
from .client import MetadataServiceClient
from .acquirer import MetadataAcquirer

__all__ = [
    "DeviceDescriptor",
    "InstanceMetadata",
    "Link",
    "Network",
    "NetworkTopology",
    "MetadataServiceClient",
    "MetadataAcquirer",
]
