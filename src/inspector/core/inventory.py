"""
Device Inventory - Enumeration and Parsing Pipeline.

Ties together the device source, the USB storage filter and the
identifier parser to produce the list of USB storage devices.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from inspector.device.classifier import filter_usb_storage_devices
from inspector.device.models import DeviceRecord, UsbDevice
from inspector.device.parser import DeviceParser


logger = logging.getLogger(__name__)


# Zero-argument callable returning raw device records (records or mappings)
DeviceSource = Callable[[], Iterable[DeviceRecord | Mapping[str, Any]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScanResult:
    """
    Result of a full scan.

    Holds the parsed USB storage devices plus enumeration counts.
    """

    devices: list[UsbDevice] = field(default_factory=list)
    total_records: int = 0
    excluded: int = 0
    timestamp: datetime = field(default_factory=_utcnow)
    error: str | None = None

    @property
    def valid_devices(self) -> list[UsbDevice]:
        return [d for d in self.devices if d.is_valid]

    @property
    def invalid_devices(self) -> list[UsbDevice]:
        return [d for d in self.devices if not d.is_valid]

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "devices": [d.to_dict() for d in self.devices],
            "total_records": self.total_records,
            "excluded": self.excluded,
            "timestamp": self.timestamp.isoformat(),
            "error": self.error,
        }


class DeviceInventory:
    """
    USB storage device inventory.

    Enumerates raw records from a source, keeps the USB storage ones and
    resolves their identifiers. Devices are parsed concurrently; one
    device failing or timing out never affects the others.
    """

    def __init__(
        self,
        source: DeviceSource,
        parser: DeviceParser | None = None,
        lookup_timeout: float = 10.0,
        max_concurrent: int = 5,
    ) -> None:
        """
        Initialize the inventory.

        Args:
            source: Callable returning the raw device records
            parser: Identifier parser (a parser without lookup if None)
            lookup_timeout: Seconds allowed per device parse
            max_concurrent: Maximum devices parsed at once
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.source = source
        self.parser = parser or DeviceParser()
        self.lookup_timeout = lookup_timeout
        self.max_concurrent = max_concurrent
        self._last_refresh_time: datetime | None = None

        # Statistics
        self._scans = 0
        self._seen = 0
        self._valid = 0
        self._invalid = 0
        self._timeouts = 0

    @property
    def last_refresh_time(self) -> datetime | None:
        """Time of the last successful enumeration (UTC)."""
        return self._last_refresh_time

    async def enumerate_devices(self) -> list[UsbDevice]:
        """
        Enumerate USB storage devices.

        Returns:
            Unparsed device models for the records passing the filter
        """
        logger.debug("Starting USB storage device enumeration...")
        return self._select(list(self.source() or []))

    def _select(self, records: list[DeviceRecord | Mapping[str, Any]]) -> list[UsbDevice]:
        logger.info("Enumeration complete. Found %d device(s) before filtering.", len(records))

        filtered = filter_usb_storage_devices(records)
        logger.info(
            "Filtering complete. %d USB storage device(s) after filtering (excluded %d).",
            len(filtered), len(records) - len(filtered),
        )

        self._last_refresh_time = _utcnow()
        self._seen += len(filtered)
        return [
            UsbDevice.from_record(
                DeviceRecord.from_dict(record) if isinstance(record, Mapping) else record
            )
            for record in filtered
        ]

    async def refresh_devices(self) -> list[UsbDevice]:
        """Re-enumerate devices."""
        logger.debug("Starting device refresh...")
        devices = await self.enumerate_devices()
        logger.info(
            "Refresh complete. Found %d device(s). Last refresh: %s",
            len(devices), self._last_refresh_time,
        )
        return devices

    async def parse_devices(self, devices: list[UsbDevice]) -> list[UsbDevice]:
        """
        Parse identifiers for a batch of devices.

        Args:
            devices: Devices to update in place

        Returns:
            The same devices, in input order
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        await asyncio.gather(*(self._parse_one(device, semaphore) for device in devices))
        return devices

    async def _parse_one(self, device: UsbDevice, semaphore: asyncio.Semaphore) -> None:
        async with semaphore:
            try:
                ok = await asyncio.wait_for(
                    self.parser.parse_device_properties_async(device),
                    timeout=self.lookup_timeout,
                )
            except asyncio.TimeoutError:
                self._timeouts += 1
                logger.warning(
                    "Parent lookup timed out after %.1fs for %s",
                    self.lookup_timeout, device.instance_path,
                )
                device.mark_invalid("Parent lookup timed out")
                ok = False
            except Exception as e:
                logger.error("Error parsing device %s: %s", device.instance_path, e)
                device.mark_invalid(f"Parse error: {e}")
                ok = False

        if ok:
            self._valid += 1
        else:
            self._invalid += 1

    async def scan(self) -> ScanResult:
        """
        Enumerate and parse all USB storage devices.

        Source errors are reported in the result instead of raised.
        """
        self._scans += 1
        try:
            records = list(self.source() or [])
        except Exception as e:
            logger.error("Enumeration failed. Error: %s", e)
            return ScanResult(error=f"Failed to enumerate devices: {e}")

        devices = self._select(records)
        await self.parse_devices(devices)

        result = ScanResult(
            devices=devices,
            total_records=len(records),
            excluded=len(records) - len(devices),
        )
        logger.info(
            "Scan complete: %d valid, %d invalid, %d excluded",
            len(result.valid_devices), len(result.invalid_devices), result.excluded,
        )
        return result

    def get_statistics(self) -> dict[str, Any]:
        """Get inventory statistics."""
        return {
            "scans": self._scans,
            "devices_seen": self._seen,
            "parsed_valid": self._valid,
            "parsed_invalid": self._invalid,
            "lookup_timeouts": self._timeouts,
            "last_refresh_time": (
                self._last_refresh_time.isoformat() if self._last_refresh_time else None
            ),
        }

    def reset_statistics(self) -> None:
        """Reset inventory statistics."""
        self._scans = 0
        self._seen = 0
        self._valid = 0
        self._invalid = 0
        self._timeouts = 0
