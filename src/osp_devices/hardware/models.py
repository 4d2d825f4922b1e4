"""
Live hardware data models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class NetworkInterface(BaseModel):
    """A kernel network interface as enumerated on the host."""

    name: str
    mac: str = ""
    pci_address: Optional[str] = Field(
        None, description="PCI address of the backing device, None for virtual interfaces"
    )


class PciDevice(BaseModel):
    """
    A PCI device as enumerated on the host.
    
    Ids are hex strings without the 0x prefix; class_id is the base class
    (e.g. "02" for network controllers).
    """

    address: str
    class_id: str = ""
    vendor_id: str = ""
    product_id: str = ""
