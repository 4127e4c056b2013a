"""
Device classification and identifier extraction.

Decides which devices are USB storage and recovers their
Vendor ID / Product ID from platform device path strings.
"""

from inspector.device.classifier import (
    CARD_READER_PREFIXES,
    INTERNAL_DRIVE_PREFIXES,
    PathCategory,
    classify_path,
    filter_usb_storage_devices,
    is_internal_card_reader_path,
    is_usb_storage_path,
)
from inspector.device.lookup import (
    DeviceLookup,
    DeviceLookupError,
    StaticDeviceLookup,
)
from inspector.device.models import (
    DeviceRecord,
    ParseState,
    UsbDevice,
    VidPid,
)
from inspector.device.parser import (
    DeviceParser,
    extract_serial_number,
    extract_vid_pid,
    storage_device_id,
)

__all__ = [
    # Classifier
    "CARD_READER_PREFIXES",
    "INTERNAL_DRIVE_PREFIXES",
    "PathCategory",
    "classify_path",
    "filter_usb_storage_devices",
    "is_internal_card_reader_path",
    "is_usb_storage_path",
    # Lookup
    "DeviceLookup",
    "DeviceLookupError",
    "StaticDeviceLookup",
    # Models
    "DeviceRecord",
    "ParseState",
    "UsbDevice",
    "VidPid",
    # Parser
    "DeviceParser",
    "extract_serial_number",
    "extract_vid_pid",
    "storage_device_id",
]
