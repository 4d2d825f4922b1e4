"""
Interfaces of the external facilities consumed by discovery.

HardwareInventory enumerates devices and their static attributes;
HostIntrospection interrogates live network devices. Either can be swapped
for a fake in tests.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Protocol

from .models import NetworkInterface, PciDevice

if TYPE_CHECKING:
    from osp_devices.inventory.models import DeviceInventoryRecord

logger = logging.getLogger(__name__)

# PCI base class of network controllers
NET_CLASS = 0x02


class HardwareInventory(Protocol):
    """Enumerates network interfaces and PCI devices."""

    def list_network_interfaces(self) -> List[NetworkInterface]:
        ...

    def list_pci_devices(self) -> List[PciDevice]:
        ...


class HostIntrospection(Protocol):
    """Resolves live attributes of network devices."""

    def try_get_virtual_interface_name(self, pci_address: str) -> Optional[str]:
        ...

    def get_netdev_mac(self, name: str) -> Optional[str]:
        ...

    def get_netdev_mtu(self, pci_address: str) -> int:
        ...

    def get_netdev_link_speed(self, name: str) -> str:
        ...

    def get_link_type(self, record: "DeviceInventoryRecord") -> str:
        ...

    def get_driver_name(self, pci_address: str) -> Optional[str]:
        ...


def is_network_device(device: PciDevice) -> bool:
    """
    Check whether a PCI device is a network controller.
    
    An unparsable class id is logged and treated as not a network device.
    
    Args:
        device: PCI device
        
    Returns:
        True if the device class decodes to the network class
    """
    try:
        device_class = int(device.class_id, 16)
    except ValueError as e:
        logger.error(
            f"Unable to parse device class {device.class_id!r} for device {device.address}, skipping: {e}"
        )
        return False
    return device_class == NET_CLASS
