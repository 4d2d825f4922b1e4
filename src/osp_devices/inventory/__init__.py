"""
Device inventory module.

Correlates OpenStack metadata with live PCI devices and synthesizes
single-function device inventory records.
"""

from .models import (
    CorrelationMap,
    DeviceAssociation,
    DeviceInventoryRecord,
    NodeState,
    NodeStateStatus,
    VirtualFunction,
)
from .correlator import DeviceCorrelator
from .synthesizer import VirtualFunctionSynthesizer
from .restorer import SnapshotRestorer
from .service import OpenstackDeviceService, build_default_service

__all__ = [
    "CorrelationMap",
    "DeviceAssociation",
    "DeviceInventoryRecord",
    "NodeState",
    "NodeStateStatus",
    "VirtualFunction",
    "DeviceCorrelator",
    "VirtualFunctionSynthesizer",
    "SnapshotRestorer",
    "OpenstackDeviceService",
    "build_default_service",
]
