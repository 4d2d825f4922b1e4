"""
Virtual function synthesis for devices without SR-IOV.

Virtual NICs have no virtual functions, so each correlated device is
reported as its own single function (totalvfs = numVfs = 1, function 0)
and downstream consumers can treat every device the same way.
"""

import logging
from typing import List

from osp_devices.core.errors import DiscoveryEnvironmentError
from osp_devices.hardware.facilities import (
    HardwareInventory,
    HostIntrospection,
    is_network_device,
)

from .models import CorrelationMap, DeviceInventoryRecord, VirtualFunction

logger = logging.getLogger(__name__)


class VirtualFunctionSynthesizer:
    """
    Produces DeviceInventoryRecords from a correlation map and the live host.
    """

    def __init__(self, hardware: HardwareInventory, host: HostIntrospection):
        self.hardware = hardware
        self.host = host

    def synthesize(self, correlation_map: CorrelationMap) -> List[DeviceInventoryRecord]:
        """
        Build one record per correlated network device.

        Devices missing from the map or without a driver are logged and
        skipped.

        Args:
            correlation_map: PCI address -> {MAC, network}

        Returns:
            Inventory records, in PCI enumeration order

        Raises:
            DiscoveryEnvironmentError: If PCI devices cannot be listed or none exist
        """
        try:
            devices = self.hardware.list_pci_devices()
        except OSError as e:
            raise DiscoveryEnvironmentError(f"error getting PCI info: {e}") from e
        if not devices:
            raise DiscoveryEnvironmentError("could not retrieve PCI devices")

        records = []
        for device in devices:
            if not is_network_device(device):
                continue

            association = correlation_map.get(device.address)
            if association is None:
                logger.error(
                    f"Unable to find device {device.address} in correlation map, skipping"
                )
                continue

            try:
                driver = self.host.get_driver_name(device.address)
            except OSError as e:
                logger.error(f"Unable to read driver for device {device.address}, skipping: {e}")
                continue
            if not driver:
                logger.error(f"No driver bound to device {device.address}, skipping")
                continue

            record = DeviceInventoryRecord(
                pci_address=device.address,
                driver=driver,
                vendor=device.vendor_id,
                device_id=device.product_id,
                net_filter=association.network_id,
            )

            mtu = self.host.get_netdev_mtu(device.address)
            if mtu > 0:
                record.mtu = mtu

            name = self.host.try_get_virtual_interface_name(device.address)
            if name:
                record.name = name
                record.mac = self.host.get_netdev_mac(name) or association.mac
                record.link_speed = self.host.get_netdev_link_speed(name)
            record.link_type = self.host.get_link_type(record)

            record.total_vfs = 1
            record.num_vfs = 1
            record.vfs.append(
                VirtualFunction(
                    pci_address=device.address,
                    driver=driver,
                    vf_id=0,
                    vendor=record.vendor,
                    device_id=record.device_id,
                    mtu=record.mtu,
                    mac=record.mac,
                )
            )

            records.append(record)

        logger.debug(f"Synthesized {len(records)} device records")
        return records
