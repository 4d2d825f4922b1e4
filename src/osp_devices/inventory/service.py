"""
OpenStack device discovery service.
"""

import logging
from typing import List, Optional

from osp_devices.core.config import AppConfig, get_config
from osp_devices.hardware.sysfs import SysfsHardwareInventory, SysfsHostIntrospection
from osp_devices.metadata.acquirer import MetadataAcquirer
from osp_devices.metadata.client import MetadataServiceClient

from .correlator import DeviceCorrelator
from .models import CorrelationMap, DeviceInventoryRecord, NodeState
from .restorer import SnapshotRestorer
from .synthesizer import VirtualFunctionSynthesizer

logger = logging.getLogger(__name__)


class OpenstackDeviceService:
    """
    Owner of the correlation map for one node.

    Either:
    1. Acquires metadata and correlates it with live devices, or
    2. Restores the map from a persisted node state
    and then synthesizes device inventory records on demand.

    Not thread-safe: a multi-threaded caller must serialize the operations
    that replace and read the map.
    """

    def __init__(
        self,
        acquirer: MetadataAcquirer,
        correlator: DeviceCorrelator,
        synthesizer: VirtualFunctionSynthesizer,
        restorer: Optional[SnapshotRestorer] = None,
        use_host_path: bool = True,
    ):
        """
        Initialize device service.

        Args:
            acquirer: Metadata acquirer
            correlator: Device correlator
            synthesizer: Virtual function synthesizer
            restorer: Snapshot restorer
            use_host_path: Read the config drive from the host-mounted directory
        """
        self.acquirer = acquirer
        self.correlator = correlator
        self.synthesizer = synthesizer
        self.restorer = restorer or SnapshotRestorer()
        self.use_host_path = use_host_path
        self._correlation_map = CorrelationMap()

    @property
    def correlation_map(self) -> CorrelationMap:
        """Current correlation map (do not mutate)."""
        return self._correlation_map

    def replace_correlation_map(self, correlation_map: CorrelationMap) -> None:
        self._correlation_map = correlation_map

    def create_devices_info(self) -> CorrelationMap:
        """
        Acquire metadata and rebuild the correlation map.

        The current map is kept if any step fails.

        Raises:
            DiscoveryError: On acquisition, ambiguity or environment failure
        """
        logger.info("Creating OpenStack devices info")
        try:
            meta_data, network_data = self.acquirer.acquire(self.use_host_path)
            correlation_map = self.correlator.correlate(meta_data, network_data)
        except Exception as e:
            logger.error(f"Failed to create OpenStack devices info: {e}")
            raise
        self.replace_correlation_map(correlation_map)
        return correlation_map

    def create_devices_info_from_node_state(self, node_state: NodeState) -> CorrelationMap:
        """Replace the correlation map with one restored from a node state."""
        correlation_map = self.restorer.restore_from_inventory(node_state.status.interfaces)
        logger.info(f"Restored {len(correlation_map)} devices from node state")
        self.replace_correlation_map(correlation_map)
        return correlation_map

    def discover_virtual_devices(self) -> List[DeviceInventoryRecord]:
        """Synthesize inventory records from the current correlation map."""
        logger.debug("Discovering virtual devices")
        return self.synthesizer.synthesize(self._correlation_map)


def build_default_service(config: Optional[AppConfig] = None) -> OpenstackDeviceService:
    """
    Wire a service to sysfs and the metadata service from configuration.

    Args:
        config: Application configuration (default: global config)

    Returns:
        OpenstackDeviceService
    """
    config = config or get_config()
    hardware = SysfsHardwareInventory(root=config.sysfs.root)
    host = SysfsHostIntrospection(root=config.sysfs.root)
    client = MetadataServiceClient(
        base_url=config.metadata.service_url,
        timeout=config.metadata.timeout,
        retry_attempts=config.metadata.retry_attempts,
        retry_backoff=config.metadata.retry_backoff,
    )
    acquirer = MetadataAcquirer(
        hardware=hardware,
        client=client,
        config_drive_dir=config.metadata.config_drive_dir,
        host_config_drive_dir=config.metadata.host_config_drive_dir,
    )
    return OpenstackDeviceService(
        acquirer=acquirer,
        correlator=DeviceCorrelator(hardware, host),
        synthesizer=VirtualFunctionSynthesizer(hardware, host),
        restorer=SnapshotRestorer(),
        use_host_path=config.metadata.use_host_path,
    )
