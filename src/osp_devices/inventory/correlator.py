"""
Correlation of OpenStack metadata with live devices.
"""

import logging
from typing import Dict

from osp_devices.core.errors import AmbiguousMACError, DiscoveryEnvironmentError
from osp_devices.hardware.facilities import (
    HardwareInventory,
    HostIntrospection,
    is_network_device,
)
from osp_devices.metadata.models import InstanceMetadata, NetworkTopology

from .models import CorrelationMap, DeviceAssociation, openstack_network_id

logger = logging.getLogger(__name__)


def _claim_mac(seen: Dict[str, str], mac: str, address: str) -> None:
    """Record MAC -> address for one pass; a second address for the MAC is ambiguous."""
    mac_key = mac.lower()
    previous = seen.get(mac_key)
    if previous is not None and previous.lower() != address.lower():
        raise AmbiguousMACError(mac, [previous, address])
    seen[mac_key] = address


class DeviceCorrelator:
    """
    Builds the PCI address -> {MAC, network} map.

    Pass 1 uses the metadata devices directly (passthrough NICs). Pass 2
    scans live network-class PCI devices not resolved by pass 1 and asks the
    host for their MAC; this covers vhost-user devices, whose netdev only
    shows up when probed.
    """

    def __init__(self, hardware: HardwareInventory, host: HostIntrospection):
        """
        Initialize device correlator.

        Args:
            hardware: Hardware inventory for the live PCI scan
            host: Host introspection for netdev name and MAC lookups
        """
        self.hardware = hardware
        self.host = host

    def correlate(
        self, meta_data: InstanceMetadata, network_data: NetworkTopology
    ) -> CorrelationMap:
        """
        Build a fresh correlation map.

        Args:
            meta_data: Instance metadata (addresses already corrected)
            network_data: Network topology

        Returns:
            New CorrelationMap

        Raises:
            AmbiguousMACError: If one pass places one MAC at two addresses
            DiscoveryEnvironmentError: If PCI devices cannot be listed or none exist
        """
        correlation_map = CorrelationMap()
        self._correlate_metadata_devices(meta_data, network_data, correlation_map)
        self._correlate_live_devices(network_data, correlation_map)
        logger.info(f"Correlated {len(correlation_map)} devices")
        return correlation_map

    def _correlate_metadata_devices(
        self,
        meta_data: InstanceMetadata,
        network_data: NetworkTopology,
        correlation_map: CorrelationMap,
    ) -> None:
        seen: Dict[str, str] = {}
        for device in meta_data.devices:
            networks = network_data.networks_for_mac(device.mac)
            if not networks:
                continue

            _claim_mac(seen, device.mac, device.address)

            # several networks on one link: last one wins
            for network in networks:
                correlation_map.set(
                    device.address,
                    DeviceAssociation(
                        mac=device.mac,
                        network_id=openstack_network_id(network.network_id),
                    ),
                )

    def _correlate_live_devices(
        self, network_data: NetworkTopology, correlation_map: CorrelationMap
    ) -> None:
        try:
            devices = self.hardware.list_pci_devices()
        except OSError as e:
            raise DiscoveryEnvironmentError(f"error getting PCI info: {e}") from e
        if not devices:
            raise DiscoveryEnvironmentError("could not retrieve PCI devices")

        seen: Dict[str, str] = {}
        for device in devices:
            if device.address in correlation_map:
                continue
            if not is_network_device(device):
                continue

            mac = None
            name = self.host.try_get_virtual_interface_name(device.address)
            if name:
                mac = self.host.get_netdev_mac(name)
            if not mac:
                logger.debug(f"No MAC address found for device {device.address}, skipping")
                continue

            networks = network_data.networks_for_mac(mac)
            if not networks:
                continue
            _claim_mac(seen, mac, device.address)

            for network in networks:
                correlation_map.set(
                    device.address,
                    DeviceAssociation(
                        mac=mac,
                        network_id=openstack_network_id(network.network_id),
                    ),
                )
