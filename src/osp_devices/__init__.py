"""
OSP Devices - OpenStack virtual network device discovery

This package reconciles OpenStack instance metadata, the declared network
topology and live hardware enumeration into a single mapping from PCI
address to logical network, and synthesizes single-function device
inventory records from that mapping.

Main modules:
- metadata: meta_data.json / network_data.json acquisition (config drive or
  metadata service) and bus-address correction
- hardware: hardware inventory and host introspection facilities
- inventory: correlation, virtual function synthesis and snapshot restore
- cli: ospdevctl operational CLI
"""

__version__ = "0.1.0"
__author__ = "OSP Devices Team"

from typing import Dict, Any

# Configuration defaults (overridable through OSP_* environment variables)
DEFAULT_CONFIG: Dict[str, Any] = {
    "config_drive_dir": "/var/config/openstack/2018-08-27",
    "host_config_drive_dir": "/host/var/config/openstack/2018-08-27",
    "metadata_service_url": "http://169.254.169.254/openstack/2018-08-27",
    "sysfs_root": "/sys",
    "log_level": "INFO",
}


__all__ = ["__version__", "__author__", "DEFAULT_CONFIG"]
