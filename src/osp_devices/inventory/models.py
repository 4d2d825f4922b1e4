"""
Device inventory data models.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# Namespace of logical network identifiers ("openstack:<network-id>")
NETWORK_ID_PREFIX = "openstack"


def openstack_network_id(network_id: str) -> str:
    """Namespaced logical network identifier for a Neutron network id."""
    return f"{NETWORK_ID_PREFIX}:{network_id}"


class DeviceAssociation(BaseModel):
    """
    MAC address and logical network of one physical device.
    """

    mac: str
    network_id: str

    class Config:
        frozen = True


class CorrelationMap:
    """
    Mapping from PCI address to DeviceAssociation.

    Built fresh on every correlation or restore; holders replace it as a
    whole instead of patching it. Callers sharing one across threads must
    serialize replace and read.
    """

    def __init__(self, entries: Optional[Dict[str, DeviceAssociation]] = None):
        self._entries: Dict[str, DeviceAssociation] = dict(entries or {})

    def set(self, pci_address: str, association: DeviceAssociation) -> None:
        """Record an association, overwriting any previous one for the address."""
        self._entries[pci_address] = association

    def get(self, pci_address: str) -> Optional[DeviceAssociation]:
        return self._entries.get(pci_address)

    def addresses(self) -> List[str]:
        return list(self._entries)

    def as_dict(self) -> Dict[str, DeviceAssociation]:
        """Copy of the entries."""
        return dict(self._entries)

    def __contains__(self, pci_address: object) -> bool:
        return pci_address in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CorrelationMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CorrelationMap({self._entries!r})"


class VirtualFunction(BaseModel):
    """
    A function of a device. Synthesized as function 0 mirroring the device
    itself where no native virtual functions exist.
    """

    pci_address: str = Field(..., alias="pciAddress")
    driver: str = ""
    vf_id: int = Field(0, alias="vfID")
    vendor: str = ""
    device_id: str = Field("", alias="deviceID")
    mtu: int = 0
    mac: str = ""

    class Config:
        populate_by_name = True


class DeviceInventoryRecord(BaseModel):
    """
    Inventory record of one physical network device.

    Serialized with the camelCase keys of the persisted node state.
    """

    pci_address: str = Field(..., alias="pciAddress")
    driver: str = ""
    vendor: str = ""
    device_id: str = Field("", alias="deviceID")
    mtu: int = 0
    name: str = ""
    mac: str = ""
    link_speed: str = Field("", alias="linkSpeed")
    link_type: str = Field("", alias="linkType")
    net_filter: str = Field("", alias="netFilter")
    total_vfs: int = Field(0, alias="totalvfs")
    num_vfs: int = Field(0, alias="numVfs")
    vfs: List[VirtualFunction] = Field(default_factory=list, alias="Vfs")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "pciAddress": "0000:00:05.0",
                "driver": "virtio-pci",
                "vendor": "1af4",
                "deviceID": "1000",
                "mtu": 1500,
                "name": "eth1",
                "mac": "fa:16:3e:00:00:01",
                "linkSpeed": "10000 Mb/s",
                "linkType": "ETH",
                "netFilter": "openstack:a6f1c9f2-4a3c-4c9a-9c57-1f2b7b0c2e11",
                "totalvfs": 1,
                "numVfs": 1,
                "Vfs": [
                    {
                        "pciAddress": "0000:00:05.0",
                        "driver": "virtio-pci",
                        "vfID": 0,
                        "vendor": "1af4",
                        "deviceID": "1000",
                        "mtu": 1500,
                        "mac": "fa:16:3e:00:00:01",
                    }
                ],
            }
        }


class NodeStateStatus(BaseModel):
    """Status section of a persisted node state."""

    interfaces: List[DeviceInventoryRecord] = Field(default_factory=list)


class NodeState(BaseModel):
    """
    Previously persisted node state, as read back on restart.
    """

    status: NodeStateStatus = Field(default_factory=NodeStateStatus)

    class Config:
        extra = "ignore"
