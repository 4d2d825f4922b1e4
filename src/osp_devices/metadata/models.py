"""
OpenStack metadata document models.

Mirror the subset of meta_data.json and network_data.json needed to
correlate devices with networks. Unknown keys are ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class DeviceDescriptor(BaseModel):
    """
    A device entry from meta_data.json.
    
    The address is the PCI address Nova placed in the domain XML. The guest
    may observe a different one, so it is only a hint until corrected.
    """

    mac: str = Field("", description="MAC address of the device")
    address: str = Field("", description="Declared PCI bus address")
    type: str = Field("", description="Device type tag (nic, ...)")
    bus: Optional[str] = Field(None, description="Bus type (pci, ...)")
    vlan: Optional[int] = Field(None, description="VLAN id if tagged")
    vf_trusted: Optional[bool] = Field(None, description="Trusted VF flag")
    tags: Optional[List[str]] = Field(None, description="Device tags")

    class Config:
        extra = "ignore"


class InstanceMetadata(BaseModel):
    """
    OpenStack meta_data.json.
    """

    uuid: Optional[str] = None
    name: Optional[str] = None
    launch_index: Optional[int] = None
    availability_zone: Optional[str] = None
    project_id: Optional[str] = None
    devices: List[DeviceDescriptor] = Field(default_factory=list)

    @field_validator("devices", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Treat an explicit null device list as empty."""
        return [] if v is None else v

    class Config:
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "uuid": "2d9c1a1e-7d1c-4d6b-9a0e-5c1b0f6b7c11",
                "name": "worker-0",
                "devices": [
                    {
                        "type": "nic",
                        "bus": "pci",
                        "address": "0000:00:05.0",
                        "mac": "fa:16:3e:00:00:01",
                        "vlan": 100,
                        "vf_trusted": True,
                        "tags": ["sriov"],
                    }
                ],
            }
        }


class Link(BaseModel):
    """A link (virtual attachment point) from network_data.json."""

    id: str
    type: str = ""
    vif_id: Optional[str] = None
    mtu: Optional[int] = None
    mac: str = Field("", alias="ethernet_mac_address")

    class Config:
        extra = "ignore"
        populate_by_name = True


class Network(BaseModel):
    """A logical network from network_data.json, attached to one link."""

    id: str
    type: str = ""
    link: str = Field("", description="Id of the link this network is attached to")
    network_id: str = Field("", description="Neutron network id")

    class Config:
        extra = "ignore"


class NetworkTopology(BaseModel):
    """
    OpenStack network_data.json (services are not modelled).
    """

    links: List[Link] = Field(default_factory=list)
    networks: List[Network] = Field(default_factory=list)

    @field_validator("links", "networks", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Treat explicit null lists as empty."""
        return [] if v is None else v

    class Config:
        extra = "ignore"

    def networks_for_mac(self, mac: str) -> List[Network]:
        """
        Networks attached to any link whose MAC matches, in document order.
        
        Args:
            mac: MAC address (compared case-insensitively)
            
        Returns:
            Matching networks; duplicates are kept so later ones win when
            written into a map
        """
        matches = []
        for link in self.links:
            if not mac or link.mac.lower() != mac.lower():
                continue
            for network in self.networks:
                if network.link == link.id:
                    matches.append(network)
        return matches
