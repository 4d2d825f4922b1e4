"""
Shared fixtures and in-memory hardware facilities for the test suite.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest
import requests

from osp_devices.core.config import reload_config
from osp_devices.hardware.models import NetworkInterface, PciDevice
from osp_devices.metadata.acquirer import MetadataAcquirer
from osp_devices.metadata.client import MetadataServiceClient


class FakeHardwareInventory:
    """Hardware inventory returning canned interfaces and PCI devices."""

    def __init__(
        self,
        interfaces: Optional[List[NetworkInterface]] = None,
        pci_devices: Optional[List[PciDevice]] = None,
        fail: bool = False,
    ):
        self.interfaces = interfaces or []
        self.pci_devices = pci_devices or []
        self.fail = fail

    def list_network_interfaces(self) -> List[NetworkInterface]:
        if self.fail:
            raise OSError("sysfs unavailable")
        return list(self.interfaces)

    def list_pci_devices(self) -> List[PciDevice]:
        if self.fail:
            raise OSError("sysfs unavailable")
        return list(self.pci_devices)


class FakeHostIntrospection:
    """Host introspection backed by dictionaries keyed by PCI address or name."""

    def __init__(
        self,
        names: Optional[Dict[str, str]] = None,
        macs: Optional[Dict[str, str]] = None,
        mtus: Optional[Dict[str, int]] = None,
        speeds: Optional[Dict[str, str]] = None,
        drivers: Optional[Dict[str, str]] = None,
    ):
        self.names = names or {}
        self.macs = macs or {}
        self.mtus = mtus or {}
        self.speeds = speeds or {}
        self.drivers = drivers or {}

    def try_get_virtual_interface_name(self, pci_address):
        return self.names.get(pci_address)

    def get_netdev_mac(self, name):
        return self.macs.get(name)

    def get_netdev_mtu(self, pci_address):
        return self.mtus.get(pci_address, 0)

    def get_netdev_link_speed(self, name):
        return self.speeds.get(name, "")

    def get_link_type(self, record):
        return "ETH" if record.name else ""

    def get_driver_name(self, pci_address):
        return self.drivers.get(pci_address)


def net_device(address: str, vendor: str = "1af4", product: str = "1000") -> PciDevice:
    """A network-class PCI device."""
    return PciDevice(address=address, class_id="02", vendor_id=vendor, product_id=product)


def write_config_drive(directory: Path, meta_data: dict, network_data: dict) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "meta_data.json").write_text(json.dumps(meta_data))
    (directory / "network_data.json").write_text(json.dumps(network_data))


def http_response(payload) -> Mock:
    """A successful requests response carrying a JSON body."""
    response = Mock()
    response.content = json.dumps(payload).encode()
    response.raise_for_status.return_value = None
    return response


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Keep OSP_* variables from the environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("OSP_"):
            monkeypatch.delenv(key)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def meta_data_doc():
    return {
        "uuid": "2d9c1a1e-7d1c-4d6b-9a0e-5c1b0f6b7c11",
        "name": "worker-0",
        "devices": [
            {
                "type": "nic",
                "bus": "pci",
                "address": "0000:01:00.0",
                "mac": "aa:bb:cc:dd:ee:01",
                "vlan": 100,
                "vf_trusted": True,
                "tags": ["sriov"],
            }
        ],
    }


@pytest.fixture
def network_data_doc():
    return {
        "links": [
            {
                "id": "l1",
                "vif_id": "c6b1d8c4-0f6e-4b8b-9d8a-1b1f3c1e2d11",
                "type": "hw_veb",
                "mtu": 1500,
                "ethernet_mac_address": "aa:bb:cc:dd:ee:01",
            }
        ],
        "networks": [
            {"id": "n1", "type": "ipv4_dhcp", "link": "l1", "network_id": "net-123"}
        ],
    }


@pytest.fixture
def session():
    """Mocked requests session; tests set get.return_value or side_effect."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("metadata service unreachable")
    return session


@pytest.fixture
def make_acquirer(tmp_path, session):
    """Build an acquirer reading config drives under tmp_path."""

    def _make(hardware):
        client = MetadataServiceClient(base_url="http://metadata.test/openstack/2018-08-27", session=session)
        return MetadataAcquirer(
            hardware=hardware,
            client=client,
            config_drive_dir=str(tmp_path / "runtime"),
            host_config_drive_dir=str(tmp_path / "host"),
        )

    return _make
