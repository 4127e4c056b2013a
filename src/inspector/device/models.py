"""
Device data structures.

Raw device records as handed over by an enumerator, and the mutable
device model that the identifier parser enriches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ParseState(Enum):
    """Outcome of the last identifier parse for a device."""

    UNPARSED = "unparsed"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class VidPid:
    """Vendor ID / Product ID pair, 4 uppercase hex characters each."""

    vendor_id: str
    product_id: str

    def __str__(self) -> str:
        return f"{self.vendor_id}:{self.product_id}"


@dataclass
class DeviceRecord:
    """Raw device metadata as reported by the platform."""

    instance_path: str = ""
    hardware_ids: list[str] = field(default_factory=list)
    parent_path: str = ""
    id: str = ""
    name: str = "Unknown Device"
    manufacturer: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeviceRecord:
        """Create a record from a mapping with DeviceRecord keys."""
        return cls(
            instance_path=data.get("instance_path") or "",
            hardware_ids=list(data.get("hardware_ids") or []),
            parent_path=data.get("parent_path") or "",
            id=data.get("id") or "",
            name=data.get("name") or "Unknown Device",
            manufacturer=data.get("manufacturer"),
        )


@dataclass
class UsbDevice:
    """
    USB storage device model.

    Identifier fields start empty and are filled in by
    DeviceParser; ``state`` records whether that succeeded.
    """

    id: str = ""
    friendly_name: str = "Unknown Device"
    manufacturer: str | None = None
    instance_path: str = ""
    hardware_ids: list[str] = field(default_factory=list)
    parent_path: str = ""
    vendor_id: str = ""
    product_id: str = ""
    serial_number: str | None = None
    state: ParseState = ParseState.UNPARSED
    error_message: str | None = None

    @classmethod
    def from_record(cls, record: DeviceRecord) -> UsbDevice:
        """Create an unparsed device model from a raw record."""
        return cls(
            id=record.id,
            friendly_name=record.name or "Unknown Device",
            manufacturer=record.manufacturer,
            instance_path=record.instance_path or "",
            hardware_ids=list(record.hardware_ids or []),
            parent_path=record.parent_path or "",
        )

    @property
    def is_valid(self) -> bool:
        """Check if identifiers were extracted successfully."""
        return self.state is ParseState.VALID

    @property
    def has_serial_number(self) -> bool:
        return bool(self.serial_number and self.serial_number.strip())

    @property
    def vid_pid(self) -> str:
        """Get VID:PID string, empty when not parsed."""
        if not self.vendor_id or not self.product_id:
            return ""
        return f"{self.vendor_id}:{self.product_id}"

    def mark_valid(self, ids: VidPid) -> None:
        """Store identifiers and mark the device valid."""
        self.vendor_id = ids.vendor_id
        self.product_id = ids.product_id
        self.state = ParseState.VALID
        self.error_message = None

    def mark_invalid(self, message: str) -> None:
        """Mark the device invalid, leaving identifiers untouched."""
        self.state = ParseState.INVALID
        self.error_message = message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.friendly_name,
            "manufacturer": self.manufacturer,
            "instance_path": self.instance_path,
            "vendor_id": self.vendor_id,
            "product_id": self.product_id,
            "serial_number": self.serial_number,
            "is_valid": self.is_valid,
            "error_message": self.error_message,
        }
