"""
USB Inspector Core - Device Inventory.

Enumerates raw device records, keeps the USB storage devices and
resolves their identifiers.
"""

from inspector.core.inventory import (
    DeviceInventory,
    DeviceSource,
    ScanResult,
)

__all__ = [
    "DeviceInventory",
    "DeviceSource",
    "ScanResult",
]
