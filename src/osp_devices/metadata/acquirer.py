"""
OpenStack metadata acquisition.

The config drive is tried first; the metadata service is the fallback. Either
way, device PCI addresses are then corrected against the live host: libvirt
cannot guarantee the guest sees the address placed in the domain XML (see
https://libvirt.org/pci-addresses.html, notably with the q35 machine type),
so the address in Nova metadata is only a best-effort hint.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import requests
from pydantic import ValidationError

from osp_devices.core.config import get_config
from osp_devices.core.errors import (
    AcquisitionError,
    AmbiguousMACError,
    DiscoveryEnvironmentError,
)
from osp_devices.hardware.facilities import HardwareInventory
from osp_devices.hardware.models import NetworkInterface

from .client import MetadataServiceClient
from .models import InstanceMetadata, NetworkTopology

logger = logging.getLogger(__name__)

META_DATA_JSON = "meta_data.json"
NETWORK_DATA_JSON = "network_data.json"


class DeviceNotFoundError(LookupError):
    """Raised when no live interface carries a given MAC address."""
    pass


def find_pci_address_for_mac(mac: str, interfaces: List[NetworkInterface]) -> str:
    """
    Find the PCI address of the live interface with a MAC address.

    Interfaces without a PCI address are ignored.

    Args:
        mac: MAC address (compared case-insensitively)
        interfaces: Live network interfaces

    Returns:
        PCI address of the single matching interface

    Raises:
        DeviceNotFoundError: If no interface matches
        AmbiguousMACError: If more than one interface matches
    """
    addresses = [
        nic.pci_address
        for nic in interfaces
        if nic.pci_address and nic.mac.lower() == mac.lower()
    ]
    if len(addresses) > 1:
        raise AmbiguousMACError(mac, addresses)
    if not addresses:
        raise DeviceNotFoundError(f"no device found with MAC address {mac}")
    return addresses[0]


class MetadataAcquirer:
    """
    Obtains instance metadata and network topology.

    Sources, in order:
    1. Config drive snapshot (runtime or host-mounted directory)
    2. Metadata service over HTTP (retried)
    """

    def __init__(
        self,
        hardware: HardwareInventory,
        client: Optional[MetadataServiceClient] = None,
        config_drive_dir: Optional[str] = None,
        host_config_drive_dir: Optional[str] = None,
    ):
        """
        Initialize metadata acquirer.

        Args:
            hardware: Hardware inventory used for bus address correction
            client: Metadata service client (default: built from config)
            config_drive_dir: Runtime config drive directory (default: from config)
            host_config_drive_dir: Host-mounted config drive directory (default: from config)
        """
        config = get_config().metadata
        self.hardware = hardware
        self.client = client or MetadataServiceClient()
        self.config_drive_dir = Path(config_drive_dir or config.config_drive_dir)
        self.host_config_drive_dir = Path(
            host_config_drive_dir or config.host_config_drive_dir
        )

    def acquire(self, use_host_path: bool) -> Tuple[InstanceMetadata, NetworkTopology]:
        """
        Get the metadata documents with corrected device addresses.

        Args:
            use_host_path: Read the config drive from the host-mounted directory

        Returns:
            (instance metadata, network topology)

        Raises:
            AcquisitionError: If both the config drive and the metadata service fail
            AmbiguousMACError: If two live interfaces share a device's MAC
            DiscoveryEnvironmentError: If live interfaces cannot be enumerated
        """
        try:
            meta_data, network_data = self.read_config_drive(use_host_path)
        except (OSError, ValueError) as e:
            logger.info(f"Config drive unavailable, falling back to metadata service: {e}")
            meta_data, network_data = self.fetch_metadata_service()

        self.correct_bus_addresses(meta_data)
        return meta_data, network_data

    def read_config_drive(
        self, use_host_path: bool
    ) -> Tuple[InstanceMetadata, NetworkTopology]:
        """
        Read meta_data.json and network_data.json from the config drive.

        Raises:
            OSError: If a document cannot be opened
            ValueError: If a document cannot be decoded (JSON or schema)
        """
        directory = self.host_config_drive_dir if use_host_path else self.config_drive_dir

        logger.info("Reading OpenStack meta_data from config drive")
        meta_data = self._read_document(directory / META_DATA_JSON, InstanceMetadata)

        logger.info("Reading OpenStack network_data from config drive")
        network_data = self._read_document(directory / NETWORK_DATA_JSON, NetworkTopology)

        return meta_data, network_data

    def _read_document(self, path: Path, model):
        with open(path, encoding="utf-8") as f:
            try:
                return model.model_validate(json.load(f))
            except (json.JSONDecodeError, ValidationError) as e:
                raise ValueError(f"error unmarshalling {path}: {e}") from e

    def fetch_metadata_service(self) -> Tuple[InstanceMetadata, NetworkTopology]:
        """
        Fetch meta_data.json and network_data.json from the metadata service.

        Raises:
            AcquisitionError: If either document cannot be fetched or decoded
        """
        logger.info("Getting OpenStack meta_data from metadata server")
        meta_data = self._fetch_document(META_DATA_JSON, InstanceMetadata)

        logger.info("Getting OpenStack network_data from metadata server")
        network_data = self._fetch_document(NETWORK_DATA_JSON, NetworkTopology)

        return meta_data, network_data

    def _fetch_document(self, document: str, model):
        url = self.client.url_for(document)
        try:
            body = self.client.get_body(document)
        except requests.RequestException as e:
            raise AcquisitionError(f"error getting OpenStack {document} from {url}: {e}") from e
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise AcquisitionError(f"error unmarshalling {document} from {url}: {e}") from e

    def correct_bus_addresses(self, meta_data: InstanceMetadata) -> None:
        """
        Overwrite declared device addresses with the ones observed on the host.

        If any device's MAC is not found among live interfaces, correction
        stops there and the metadata is left as is (earlier devices keep their
        corrected address).

        Raises:
            AmbiguousMACError: If two live interfaces share a device's MAC
            DiscoveryEnvironmentError: If live interfaces cannot be enumerated
        """
        try:
            interfaces = self.hardware.list_network_interfaces()
        except OSError as e:
            raise DiscoveryEnvironmentError(f"error getting network info: {e}") from e

        for device in meta_data.devices:
            try:
                real_address = find_pci_address_for_mac(device.mac, interfaces)
            except DeviceNotFoundError as e:
                logger.warning(
                    f"Unable to get PCI address for device {device.mac}, "
                    f"keeping metadata addresses: {e}"
                )
                return

            if real_address != device.address:
                logger.debug(
                    f"PCI address for device {device.mac} does not match Nova metadata value, "
                    f"overwriting {device.address} with {real_address}"
                )
                device.address = real_address
