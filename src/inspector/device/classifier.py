"""
Device path classification.

Decides from a device instance path whether a device is removable USB
storage, an internal drive, or an internal SD/MMC card reader.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping


# Internal buses; never USB storage even when the path mentions USB later on
INTERNAL_DRIVE_PREFIXES = ("SCSI\\", "SATA\\", "NVME\\", "PCIE\\", "IDE\\")

# Built-in card readers (a USB-attached reader starts with USB\ instead)
CARD_READER_PREFIXES = ("SD\\", "SDBUS\\", "MMC\\")

USB_PREFIX = "USB\\"

# Storage re-exposed through the portable device (WPD) bus
WPD_PREFIX = "SWD\\WPDBUSENUM\\"
USBSTOR_MARKER = "USBSTOR"


class PathCategory(Enum):
    """Diagnostic category of a device instance path."""

    USB = "usb"
    WPD_USB = "wpd_usb"
    CARD_READER = "card_reader"
    INTERNAL = "internal"
    UNKNOWN = "unknown"

    @property
    def included(self) -> bool:
        """Check if devices in this category are listed as USB storage."""
        return self in (PathCategory.USB, PathCategory.WPD_USB)


def _has_prefix(path: str, prefixes: Iterable[str]) -> bool:
    upper = path.upper()
    return any(upper.startswith(prefix) for prefix in prefixes)


def is_usb_storage_path(path: str | None) -> bool:
    """
    Check if an instance path belongs to a USB storage device.

    Args:
        path: Device instance path, e.g. ``USB\\VID_0781&PID_5581\\SERIAL``

    Returns:
        True for direct USB paths and WPD paths that reference USBSTOR
    """
    if not path:
        return False

    if _has_prefix(path, INTERNAL_DRIVE_PREFIXES):
        return False

    if _has_prefix(path, (USB_PREFIX,)):
        return True

    if _has_prefix(path, (WPD_PREFIX,)) and USBSTOR_MARKER in path.upper():
        return True

    return False


def is_internal_card_reader_path(path: str | None) -> bool:
    """Check if an instance path belongs to a built-in SD/MMC card reader."""
    if not path:
        return False
    return _has_prefix(path, CARD_READER_PREFIXES)


def classify_path(path: str | None) -> PathCategory:
    """
    Classify an instance path for diagnostics.

    Uses the same rules as is_usb_storage_path, so ``category.included``
    always agrees with the storage filter.
    """
    if not path:
        return PathCategory.UNKNOWN
    if _has_prefix(path, INTERNAL_DRIVE_PREFIXES):
        return PathCategory.INTERNAL
    if is_internal_card_reader_path(path):
        return PathCategory.CARD_READER
    if _has_prefix(path, (USB_PREFIX,)):
        return PathCategory.USB
    if is_usb_storage_path(path):
        return PathCategory.WPD_USB
    return PathCategory.UNKNOWN


def get_instance_path(record: Any) -> str:
    """Get the instance path of a record, model or mapping ("" if absent)."""
    if record is None:
        return ""
    if isinstance(record, Mapping):
        value = record.get("instance_path")
    else:
        value = getattr(record, "instance_path", None)
    return value if isinstance(value, str) else ""


def filter_usb_storage_devices(records: Iterable[Any] | None) -> list[Any]:
    """
    Reduce a device list to USB storage devices.

    Keeps input order and does not deduplicate. Records without an
    instance path are dropped.

    Args:
        records: DeviceRecord, UsbDevice or mapping objects (may be None)

    Returns:
        New list with the qualifying records
    """
    if records is None:
        return []

    result = []
    for record in records:
        path = get_instance_path(record)
        if not path:
            continue
        if is_usb_storage_path(path) and not is_internal_card_reader_path(path):
            result.append(record)
    return result
