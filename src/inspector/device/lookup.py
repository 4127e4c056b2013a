"""
Device lookup collaborators.

The async parser uses a lookup to resolve a storage device id to its
parent device path when the device's own strings carry no VID/PID.
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


class DeviceLookupError(Exception):
    """Device id unknown or the platform query failed."""

    pass


@runtime_checkable
class DeviceLookup(Protocol):
    """Resolves a device instance id to its parent device path."""

    async def lookup_device_parent(self, device_id: str) -> str:
        """
        Get the parent device path of a device.

        Args:
            device_id: Storage device id, e.g. ``USBSTOR\\Disk&Ven_X\\001``

        Returns:
            Parent device instance path

        Raises:
            DeviceLookupError: If the device is unknown or has no parent
        """
        ...


class StaticDeviceLookup:
    """
    Lookup backed by a fixed id -> parent path mapping.

    Ids are matched case-insensitively, like platform instance ids.
    """

    def __init__(self, parents: Mapping[str, str] | None = None) -> None:
        self._parents: dict[str, str] = {}
        for device_id, parent in (parents or {}).items():
            self.add(device_id, parent)

    def add(self, device_id: str, parent_path: str) -> None:
        """Register the parent path of a device."""
        self._parents[device_id.upper()] = parent_path

    def __len__(self) -> int:
        return len(self._parents)

    def __contains__(self, device_id: object) -> bool:
        return isinstance(device_id, str) and device_id.upper() in self._parents

    async def lookup_device_parent(self, device_id: str) -> str:
        parent = self._parents.get(device_id.upper())
        if not parent:
            raise DeviceLookupError(f"Device not found: {device_id}")
        logger.debug("Resolved parent of %s: %s", device_id, parent)
        return parent
