"""
Rebuild the correlation map from previously persisted device records.
"""

from typing import Iterable

from .models import CorrelationMap, DeviceAssociation, DeviceInventoryRecord


class SnapshotRestorer:
    """
    Restores a correlation map without re-reading metadata.

    Used on restart, when the metadata may be stale relative to devices
    that are already configured.
    """

    def restore_from_inventory(
        self, records: Iterable[DeviceInventoryRecord]
    ) -> CorrelationMap:
        """
        Build a new map from inventory records (later records win).
        """
        correlation_map = CorrelationMap()
        for record in records:
            correlation_map.set(
                record.pci_address,
                DeviceAssociation(mac=record.mac, network_id=record.net_filter),
            )
        return correlation_map
