"""
Device snapshot parser.

Parses YAML (or JSON) device snapshot files into device records and a
parent lookup table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from inspector.device.lookup import StaticDeviceLookup
from inspector.device.models import DeviceRecord
from inspector.schemas import DeviceRecordSchema


class SnapshotParseError(Exception):
    """Error parsing snapshot file."""

    pass


@dataclass
class Snapshot:
    """Device records plus the parent paths of referenced storage devices."""

    records: list[DeviceRecord] = field(default_factory=list)
    parents: dict[str, str] = field(default_factory=dict)

    def lookup(self) -> StaticDeviceLookup:
        """Create a device lookup over the snapshot's parent table."""
        return StaticDeviceLookup(self.parents)

    def __len__(self) -> int:
        return len(self.records)


def load_snapshot(path: str | Path) -> Snapshot:
    """
    Load a device snapshot from a YAML or JSON file.

    Args:
        path: Path to snapshot file

    Returns:
        Snapshot with parsed records

    Raises:
        FileNotFoundError: If file doesn't exist
        SnapshotParseError: If file contains an invalid snapshot
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SnapshotParseError(f"Invalid snapshot file {path}: {e}") from e

    if data is None:
        return Snapshot()

    return parse_snapshot(data)


def parse_snapshot(data: Any) -> Snapshot:
    """
    Parse a snapshot from a dictionary.

    A bare list is accepted as the device list.
    """
    if isinstance(data, list):
        data = {"devices": data}

    if not isinstance(data, dict):
        raise SnapshotParseError("Snapshot must be a dictionary or a list of devices")

    devices_data = data.get("devices") or []
    if not isinstance(devices_data, list):
        raise SnapshotParseError("'devices' must be a list")

    records = []
    for i, device_data in enumerate(devices_data):
        if not isinstance(device_data, dict):
            raise SnapshotParseError(f"Device {i} must be a dictionary")
        try:
            records.append(DeviceRecordSchema.model_validate(device_data).to_record())
        except ValidationError as e:
            raise SnapshotParseError(f"Error parsing device {i}: {e}") from e

    parents_data = data.get("parents") or {}
    if not isinstance(parents_data, dict):
        raise SnapshotParseError("'parents' must be a mapping of device id to parent path")

    parents = {}
    for device_id, parent in parents_data.items():
        if not isinstance(device_id, str) or not isinstance(parent, str):
            raise SnapshotParseError(f"Invalid parent entry: {device_id!r}")
        parents[device_id] = parent

    return Snapshot(records=records, parents=parents)
