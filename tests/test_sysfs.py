"""
Tests for the sysfs-backed hardware facilities against a fake sysfs tree.

Run with: pytest tests/
"""

import os
from pathlib import Path

import pytest

from osp_devices.hardware.facilities import is_network_device
from osp_devices.hardware.models import PciDevice
from osp_devices.hardware.sysfs import (
    SysfsHardwareInventory,
    SysfsHostIntrospection,
    pci_address_from_path,
)
from osp_devices.inventory.models import DeviceInventoryRecord


def write(path: Path, value: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(value + "\n")


@pytest.fixture
def sysfs(tmp_path):
    """
    A sysfs tree with:
    - 0000:00:04.0: passthrough NIC ens4 bound to mlx5_core
    - 0000:00:05.0: virtio NIC eth1 (netdev under virtio1) bound to virtio-pci
    - 0000:00:06.0: unbound network controller without netdev
    - 0000:00:01.0: ISA bridge
    - lo: loopback without a device
    """
    root = tmp_path / "sys"
    pci_root = root / "devices" / "pci0000:00"
    pci_bus = root / "bus" / "pci" / "devices"
    drivers = root / "bus" / "pci" / "drivers"
    net = root / "class" / "net"
    pci_bus.mkdir(parents=True)
    net.mkdir(parents=True)

    def pci(address, device_class, vendor, device, driver=None):
        device_dir = pci_root / address
        write(device_dir / "class", device_class)
        write(device_dir / "vendor", vendor)
        write(device_dir / "device", device)
        os.symlink(device_dir, pci_bus / address)
        if driver:
            (drivers / driver).mkdir(parents=True, exist_ok=True)
            os.symlink(drivers / driver, device_dir / "driver")
        return device_dir

    def netdev(name, device_dir, mac, mtu="1500", speed=None, arp_type="1"):
        (device_dir / "net" / name).mkdir(parents=True)
        iface = net / name
        write(iface / "address", mac)
        write(iface / "mtu", mtu)
        write(iface / "type", arp_type)
        if speed is not None:
            write(iface / "speed", speed)
        os.symlink(device_dir, iface / "device")

    passthrough = pci("0000:00:04.0", "0x020000", "0x15b3", "0x101e", driver="mlx5_core")
    netdev("ens4", passthrough, "fa:16:3e:00:00:04", mtu="9000", speed="25000")

    virtio = pci("0000:00:05.0", "0x020000", "0x1af4", "0x1000", driver="virtio-pci")
    netdev("eth1", virtio / "virtio1", "fa:16:3e:00:00:05", speed="-1")

    pci("0000:00:06.0", "0x020000", "0x8086", "0x154c")
    pci("0000:00:01.0", "0x060100", "0x8086", "0x7000")

    write(net / "lo" / "address", "00:00:00:00:00:00")

    return root


class TestPciAddressFromPath:
    """Test PCI address extraction from resolved sysfs paths."""

    def test_direct_and_virtio_paths(self):
        assert pci_address_from_path(Path("/sys/devices/pci0000:00/0000:00:04.0")) == "0000:00:04.0"
        assert pci_address_from_path(Path("/sys/devices/pci0000:00/0000:00:05.0/virtio1")) == "0000:00:05.0"
        assert pci_address_from_path(Path("/sys/devices/virtual/net/br0")) is None


class TestSysfsHardwareInventory:
    """Test interface and PCI enumeration."""

    def test_list_network_interfaces(self, sysfs):
        interfaces = SysfsHardwareInventory(root=str(sysfs)).list_network_interfaces()

        assert [(i.name, i.mac, i.pci_address) for i in interfaces] == [
            ("ens4", "fa:16:3e:00:00:04", "0000:00:04.0"),
            ("eth1", "fa:16:3e:00:00:05", "0000:00:05.0"),
        ]

    def test_list_pci_devices(self, sysfs):
        devices = SysfsHardwareInventory(root=str(sysfs)).list_pci_devices()

        by_address = {d.address: d for d in devices}
        assert sorted(by_address) == ["0000:00:01.0", "0000:00:04.0", "0000:00:05.0", "0000:00:06.0"]
        assert by_address["0000:00:04.0"] == PciDevice(
            address="0000:00:04.0", class_id="02", vendor_id="15b3", product_id="101e"
        )
        assert by_address["0000:00:01.0"].class_id == "06"
        assert [d.address for d in devices if is_network_device(d)] == [
            "0000:00:04.0",
            "0000:00:05.0",
            "0000:00:06.0",
        ]

    def test_missing_sysfs_raises(self, tmp_path):
        with pytest.raises(OSError):
            SysfsHardwareInventory(root=str(tmp_path / "nothing")).list_pci_devices()

    def test_root_from_environment(self, monkeypatch, sysfs):
        monkeypatch.setenv("OSP_SYSFS_ROOT", str(sysfs))
        from osp_devices.core.config import reload_config

        reload_config()
        assert len(SysfsHardwareInventory().list_pci_devices()) == 4


class TestSysfsHostIntrospection:
    """Test live netdev attribute lookups."""

    def test_interface_names(self, sysfs):
        host = SysfsHostIntrospection(root=str(sysfs))

        assert host.try_get_virtual_interface_name("0000:00:04.0") == "ens4"
        assert host.try_get_virtual_interface_name("0000:00:05.0") == "eth1"
        assert host.try_get_virtual_interface_name("0000:00:06.0") is None
        assert host.try_get_virtual_interface_name("0000:99:00.0") is None

    def test_mac_mtu_and_speed(self, sysfs):
        host = SysfsHostIntrospection(root=str(sysfs))

        assert host.get_netdev_mac("ens4") == "fa:16:3e:00:00:04"
        assert host.get_netdev_mac("missing") is None
        assert host.get_netdev_mtu("0000:00:04.0") == 9000
        assert host.get_netdev_mtu("0000:00:05.0") == 1500
        assert host.get_netdev_mtu("0000:00:06.0") == 0
        assert host.get_netdev_link_speed("ens4") == "25000 Mb/s"
        assert host.get_netdev_link_speed("eth1") == ""

    def test_link_type(self, sysfs):
        host = SysfsHostIntrospection(root=str(sysfs))

        named = DeviceInventoryRecord(pci_address="0000:00:04.0", name="ens4")
        unnamed = DeviceInventoryRecord(pci_address="0000:00:06.0")
        assert host.get_link_type(named) == "ETH"
        assert host.get_link_type(unnamed) == ""

    def test_infiniband_link_type(self, sysfs):
        (sysfs / "class" / "net" / "ens4" / "type").write_text("32\n")
        host = SysfsHostIntrospection(root=str(sysfs))

        record = DeviceInventoryRecord(pci_address="0000:00:04.0", name="ens4")
        assert host.get_link_type(record) == "IB"

    def test_driver_name(self, sysfs):
        host = SysfsHostIntrospection(root=str(sysfs))

        assert host.get_driver_name("0000:00:04.0") == "mlx5_core"
        assert host.get_driver_name("0000:00:05.0") == "virtio-pci"
        assert host.get_driver_name("0000:00:06.0") is None
