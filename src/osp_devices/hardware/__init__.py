"""
Hardware inventory and host introspection facilities.
"""

from .models import NetworkInterface, PciDevice
from .facilities import HardwareInventory, HostIntrospection, NET_CLASS, is_network_device
from .sysfs import SysfsHardwareInventory, SysfsHostIntrospection

__all__ = [
    "NetworkInterface",
    "PciDevice",
    "HardwareInventory",
    "HostIntrospection",
    "NET_CLASS",
    "is_network_device",
    "SysfsHardwareInventory",
    "SysfsHostIntrospection",
]
