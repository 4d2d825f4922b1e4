"""
Core module for OSP Devices.

Contains configuration and the error hierarchy shared across all modules.
"""

from osp_devices.core.config import AppConfig, get_config, reload_config
from osp_devices.core.errors import (
    AcquisitionError,
    AmbiguousMACError,
    DiscoveryEnvironmentError,
    DiscoveryError,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "AcquisitionError",
    "AmbiguousMACError",
    "DiscoveryEnvironmentError",
    "DiscoveryError",
]
