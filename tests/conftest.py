"""
Pytest configuration and shared fixtures for USB Inspector tests.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from inspector.device.models import DeviceRecord, UsbDevice


SANDISK_PATH = "USB\\VID_0781&PID_5581\\4C530001231120115142"
WPD_PATH = (
    "SWD\\WPDBUSENUM\\_??_USBSTOR#Disk&Ven_Kingston&Prod_DataTraveler_3.0#"
    "60A44C3FACC9B1A0B9A1&0#{53f56307-b6bf-11d0-94f2-00a0c91efb8b}"
)
WPD_STORAGE_ID = "USBSTOR\\Disk&Ven_Kingston&Prod_DataTraveler_3.0\\60A44C3FACC9B1A0B9A1&0"
KINGSTON_PARENT = "USB\\VID_0951&PID_1666\\60A44C3FACC9B1A0B9A1"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample configuration file."""
    config_path = temp_dir / "inspector.yaml"
    config_data = {
        "logging": {
            "level": "debug",
        },
        "lookup": {
            "timeout": 2.5,
            "max_concurrent": 3,
        },
        "output": {
            "format": "table",
        },
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def sample_snapshot_data() -> dict:
    """Snapshot with one device of each kind."""
    return {
        "devices": [
            {
                "id": "internal-ssd",
                "name": "Samsung SSD 970",
                "instance_path": "NVME\\VEN_144D&DEV_A808\\4&1A2B3C4D&0&0",
            },
            {
                "id": "sandisk",
                "name": "SanDisk Ultra",
                "manufacturer": "SanDisk",
                "instance_path": SANDISK_PATH,
                "hardware_ids": ["USB\\VID_0781&PID_5581&REV_0100"],
            },
            {
                "id": "sd-card",
                "name": "SD Card",
                "instance_path": "SDBUS\\VEN_0003&DEV_0001\\5&2B3C4D5E&0&0",
            },
            {
                "id": "kingston",
                "name": "Kingston DataTraveler",
                "instance_path": WPD_PATH,
            },
        ],
        "parents": {
            WPD_STORAGE_ID: KINGSTON_PARENT,
        },
    }


@pytest.fixture
def sample_snapshot(temp_dir: Path, sample_snapshot_data: dict) -> Path:
    """Create a sample snapshot file."""
    snapshot_path = temp_dir / "devices.yaml"
    with open(snapshot_path, "w") as f:
        yaml.dump(sample_snapshot_data, f)
    return snapshot_path


@pytest.fixture
def usb_device() -> UsbDevice:
    """Directly enumerated USB flash drive."""
    return UsbDevice.from_record(
        DeviceRecord(id="sandisk", name="SanDisk Ultra", instance_path=SANDISK_PATH)
    )


@pytest.fixture
def wpd_device() -> UsbDevice:
    """Flash drive enumerated through the portable device bus."""
    return UsbDevice.from_record(
        DeviceRecord(id="kingston", name="Kingston DataTraveler", instance_path=WPD_PATH)
    )
