"""
Device identifier parsing.

Extracts Vendor ID / Product ID pairs and serial numbers from device
instance paths such as ``USB\\VID_0781&PID_5581\\4C530001231120115142``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator

from inspector.device.lookup import DeviceLookup
from inspector.device.models import UsbDevice, VidPid


logger = logging.getLogger(__name__)


VID_RE = re.compile(r"VID_([0-9A-F]{4})", re.IGNORECASE)
PID_RE = re.compile(r"PID_([0-9A-F]{4})", re.IGNORECASE)

# WPD ids embed the storage device id with '#' separators:
# SWD\WPDBUSENUM\_??_USBSTOR#Disk&Ven_SanDisk&Prod_Ultra#4C53&0#{53f56307-...}
USBSTOR_RE = re.compile(r"USBSTOR#([^#]+)#([^#]+)", re.IGNORECASE)


def extract_vid_pid(text: str | None) -> VidPid | None:
    """
    Extract a VID/PID pair from a device path string.

    Both identifiers are searched independently and must both be present.

    Args:
        text: Instance path or hardware id

    Returns:
        VidPid in uppercase, or None if either identifier is missing
    """
    if not text:
        return None

    vid_match = VID_RE.search(text)
    pid_match = PID_RE.search(text)
    if vid_match is None or pid_match is None:
        return None

    return VidPid(
        vendor_id=vid_match.group(1).upper(),
        product_id=pid_match.group(1).upper(),
    )


def extract_serial_number(path: str | None) -> str | None:
    """
    Extract the serial number from a USB instance path.

    The serial is the last path segment. Segments containing '&' are
    instance ids generated by the platform for devices without a serial.
    """
    if not path or not path.upper().startswith("USB\\"):
        return None

    parts = path.split("\\")
    if len(parts) < 3:
        return None

    serial = parts[-1].strip()
    if not serial or "&" in serial:
        return None
    return serial


def storage_device_id(path: str | None) -> str | None:
    """
    Get the USBSTOR device id referenced by a WPD instance path.

    Returns:
        ``USBSTOR\\<device>\\<instance>`` or None if there is no reference
    """
    if not path:
        return None
    match = USBSTOR_RE.search(path)
    if match is None:
        return None
    return f"USBSTOR\\{match.group(1)}\\{match.group(2)}"


def _candidate_strings(device: UsbDevice) -> Iterator[tuple[str, str]]:
    """Yield (source, text) pairs in search priority order."""
    yield "instance_path", device.instance_path
    for hardware_id in device.hardware_ids or []:
        yield "hardware_id", hardware_id
    yield "parent_path", device.parent_path


class DeviceParser:
    """
    Fills in device identifiers from the device's own path strings.

    When those carry no VID/PID, the async variant can follow a WPD
    device's USBSTOR reference to its parent USB device through a
    DeviceLookup.
    """

    def __init__(self, lookup: DeviceLookup | None = None) -> None:
        """
        Initialize parser.

        Args:
            lookup: Collaborator for parent device resolution (optional)
        """
        self.lookup = lookup

    def parse_device_properties(self, device: UsbDevice | None) -> bool:
        """
        Parse identifiers from the device's instance path, hardware ids
        and parent path, in that order.

        Args:
            device: Device to update in place

        Returns:
            True if VID and PID were found
        """
        if device is None:
            return False

        for source, text in _candidate_strings(device):
            ids = extract_vid_pid(text)
            if ids is not None:
                device.mark_valid(ids)
                device.serial_number = extract_serial_number(device.instance_path)
                logger.debug("Found %s in %s of %s", ids, source, device.id or device.instance_path)
                return True

        device.mark_invalid("No VID/PID found in device paths")
        return False

    async def parse_device_properties_async(self, device: UsbDevice | None) -> bool:
        """
        Parse identifiers, falling back to a parent device lookup.

        Lookup failures are logged and reported as False; the device is
        then left marked invalid.

        Args:
            device: Device to update in place

        Returns:
            True if VID and PID were found
        """
        if self.parse_device_properties(device):
            return True

        if device is None or not device.instance_path:
            return False

        device_id = storage_device_id(device.instance_path)
        if device_id is None:
            logger.debug("No USBSTOR reference in path: %s", device.instance_path)
            return False

        if self.lookup is None:
            logger.debug("No device lookup configured, cannot resolve %s", device_id)
            return False

        logger.debug("Found USBSTOR reference: %s", device_id)

        try:
            parent_path = await self.lookup.lookup_device_parent(device_id)
        except Exception as e:
            logger.debug("Failed to query %s: %s", device_id, e)
            device.mark_invalid(f"Parent lookup failed: {e}")
            return False

        ids = extract_vid_pid(parent_path) if isinstance(parent_path, str) else None
        if ids is None:
            logger.debug("No VID/PID in parent of %s: %r", device_id, parent_path)
            device.mark_invalid("No VID/PID found in parent device path")
            return False

        device.mark_valid(ids)
        device.serial_number = extract_serial_number(parent_path)
        logger.debug("Extracted %s from parent %s", ids, parent_path)
        return True
