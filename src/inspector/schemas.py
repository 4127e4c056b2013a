"""
Pydantic Schemas for Device Data.

Validates device snapshot input and shapes scan report output.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inspector.device.models import DeviceRecord


# =============================================================================
# Snapshot Schemas
# =============================================================================


class DeviceRecordSchema(BaseModel):
    """Schema for one device record in a snapshot file."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = "Unknown Device"
    manufacturer: str | None = Field(None, max_length=256)
    instance_path: str = ""
    hardware_ids: list[str] = Field(default_factory=list)
    parent_path: str = ""

    @field_validator("id", "instance_path", "parent_path", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        """Treat null paths as empty."""
        return "" if v is None else v

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> Any:
        return v or "Unknown Device"

    @field_validator("hardware_ids", mode="before")
    @classmethod
    def single_hardware_id(cls, v: Any) -> Any:
        """Accept a single hardware id string."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def to_record(self) -> DeviceRecord:
        """Convert to a DeviceRecord."""
        return DeviceRecord(
            instance_path=self.instance_path,
            hardware_ids=list(self.hardware_ids),
            parent_path=self.parent_path,
            id=self.id,
            name=self.name,
            manufacturer=self.manufacturer,
        )


# =============================================================================
# Report Schemas
# =============================================================================


class DeviceReport(BaseModel):
    """Schema for one parsed device in a scan report."""

    id: str
    name: str
    manufacturer: str | None = None
    instance_path: str
    vendor_id: str = Field("", pattern=r"^([0-9A-F]{4})?$")
    product_id: str = Field("", pattern=r"^([0-9A-F]{4})?$")
    serial_number: str | None = None
    is_valid: bool
    error_message: str | None = None

    @property
    def vid_pid(self) -> str:
        """Get VID:PID string."""
        if not self.vendor_id:
            return ""
        return f"{self.vendor_id}:{self.product_id}"


class ScanReport(BaseModel):
    """Schema for a scan report."""

    devices: list[DeviceReport]
    total_records: int = Field(..., ge=0)
    excluded: int = Field(..., ge=0)
    timestamp: datetime
    error: str | None = None
