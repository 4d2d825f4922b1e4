"""
Sysfs-backed hardware facilities.

Reads /sys/class/net and /sys/bus/pci/devices. The sysfs root is
configurable so the same code runs against a host mount or a test tree.
"""

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from osp_devices.core.config import get_config

from .models import NetworkInterface, PciDevice

if TYPE_CHECKING:
    from osp_devices.inventory.models import DeviceInventoryRecord

logger = logging.getLogger(__name__)

PCI_ADDRESS_RE = re.compile(r"^[0-9a-fA-F]{4}:[0-9a-fA-F]{2}:[0-9a-fA-F]{2}\.[0-7]$")

# ARPHRD_* values from /sys/class/net/<name>/type
ARPHRD_ETHER = 1
ARPHRD_INFINIBAND = 32

LINK_TYPE_ETH = "ETH"
LINK_TYPE_IB = "IB"


def _read_attr(path: Path) -> Optional[str]:
    """Read a sysfs attribute, None if it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.debug(f"Failed to read {path}: {e}")
        return None


def _strip_hex_prefix(value: Optional[str]) -> str:
    if not value:
        return ""
    return value[2:] if value.lower().startswith("0x") else value


def pci_address_from_path(path: Path) -> Optional[str]:
    """
    Find the PCI address in a resolved sysfs device path.

    Walks from the leaf upwards so a virtio netdev
    (.../0000:00:03.0/virtio0) maps to its PCI parent.
    """
    for part in [path, *path.parents]:
        if PCI_ADDRESS_RE.match(part.name):
            return part.name
    return None


class SysfsHardwareInventory:
    """
    Hardware inventory read from sysfs.
    """

    def __init__(self, root: Optional[str] = None):
        """
        Initialize sysfs hardware inventory.

        Args:
            root: Sysfs mount point (default: from config)
        """
        self.root = Path(root or get_config().sysfs.root)
        self.net_path = self.root / "class" / "net"
        self.pci_path = self.root / "bus" / "pci" / "devices"

    def list_network_interfaces(self) -> List[NetworkInterface]:
        """
        List interfaces with their MAC and backing PCI address.

        Interfaces without a device link (bridges, loopback, ...) are omitted.

        Raises:
            OSError: If the net class directory cannot be listed
        """
        interfaces = []
        for name in sorted(os.listdir(self.net_path)):
            device_path = self.net_path / name / "device"
            if not device_path.exists():
                continue
            interfaces.append(
                NetworkInterface(
                    name=name,
                    mac=_read_attr(self.net_path / name / "address") or "",
                    pci_address=pci_address_from_path(device_path.resolve()),
                )
            )
        return interfaces

    def list_pci_devices(self) -> List[PciDevice]:
        """
        List PCI devices with class, vendor and product ids.

        Raises:
            OSError: If the PCI devices directory cannot be listed
        """
        devices = []
        for address in sorted(os.listdir(self.pci_path)):
            device_dir = self.pci_path / address
            # class is 0xCCSSPP; keep the base class byte
            device_class = _strip_hex_prefix(_read_attr(device_dir / "class"))
            devices.append(
                PciDevice(
                    address=address,
                    class_id=device_class[:2],
                    vendor_id=_strip_hex_prefix(_read_attr(device_dir / "vendor")),
                    product_id=_strip_hex_prefix(_read_attr(device_dir / "device")),
                )
            )
        return devices


class SysfsHostIntrospection:
    """
    Live network device attributes read from sysfs.
    """

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or get_config().sysfs.root)
        self.net_path = self.root / "class" / "net"
        self.pci_path = self.root / "bus" / "pci" / "devices"

    def try_get_virtual_interface_name(self, pci_address: str) -> Optional[str]:
        """
        Resolve the netdev name of a PCI device.

        Looks at the device's own net/ directory, then at the net/ directory
        of any virtio child device.
        """
        device_dir = self.pci_path / pci_address
        candidates = [device_dir / "net", *sorted(device_dir.glob("virtio*/net"))]
        for net_dir in candidates:
            try:
                names = sorted(os.listdir(net_dir))
            except OSError:
                continue
            if names:
                return names[0]
        return None

    def get_netdev_mac(self, name: str) -> Optional[str]:
        return _read_attr(self.net_path / name / "address") or None

    def get_netdev_mtu(self, pci_address: str) -> int:
        """MTU of the device's netdev, 0 when unknown."""
        name = self.try_get_virtual_interface_name(pci_address)
        if not name:
            return 0
        value = _read_attr(self.net_path / name / "mtu")
        try:
            return int(value) if value else 0
        except ValueError:
            logger.warning(f"Invalid MTU {value!r} for {name}")
            return 0

    def get_netdev_link_speed(self, name: str) -> str:
        """Link speed as "<n> Mb/s", empty when the link is down or unknown."""
        value = _read_attr(self.net_path / name / "speed")
        if not value or value.startswith("-"):
            return ""
        return f"{value} Mb/s"

    def get_link_type(self, record: "DeviceInventoryRecord") -> str:
        """Link type of a record's interface (ETH or IB), empty without a name."""
        if not record.name:
            return ""
        value = _read_attr(self.net_path / record.name / "type")
        if value == str(ARPHRD_ETHER):
            return LINK_TYPE_ETH
        if value == str(ARPHRD_INFINIBAND):
            return LINK_TYPE_IB
        return ""

    def get_driver_name(self, pci_address: str) -> Optional[str]:
        """Name of the driver bound to a PCI device, None if unbound."""
        driver_path = self.pci_path / pci_address / "driver"
        if not driver_path.is_symlink():
            return None
        return os.path.basename(os.readlink(driver_path))
