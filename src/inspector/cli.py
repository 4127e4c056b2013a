"""
USB Inspector Command Line Interface.

Provides commands for inspecting USB storage devices:
- scan: Filter and parse devices from a snapshot file
- classify: Classify device instance paths
- parse: Extract VID/PID/serial from device strings
- config: Show or validate configuration
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from inspector import __version__
from inspector.config import InspectorConfig, load_config, setup_logging, validate_config
from inspector.core.inventory import DeviceInventory
from inspector.device.classifier import classify_path
from inspector.device.parser import DeviceParser, extract_serial_number, extract_vid_pid
from inspector.schemas import ScanReport
from inspector.snapshot import SnapshotParseError, load_snapshot


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="usb-inspector",
        description="Identify USB storage devices and their VID/PID",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan devices from a snapshot file")
    scan_parser.add_argument("snapshot", help="Device snapshot (YAML or JSON)")
    scan_parser.add_argument(
        "-a", "--all",
        action="store_true",
        help="Also list records that are not USB storage",
    )
    scan_parser.set_defaults(func=cmd_scan)

    # classify command
    classify_parser = subparsers.add_parser("classify", help="Classify device instance paths")
    classify_parser.add_argument("paths", nargs="+", help="Device instance paths")
    classify_parser.set_defaults(func=cmd_classify)

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Extract identifiers from device strings")
    parse_parser.add_argument("texts", nargs="+", help="Instance paths or hardware ids")
    parse_parser.set_defaults(func=cmd_parse)

    # config command
    config_parser = subparsers.add_parser("config", help="Show or validate configuration")
    config_sub = config_parser.add_subparsers(dest="config_cmd")
    config_sub.add_parser("show", help="Show effective configuration")
    config_sub.add_parser("validate", help="Validate configuration")
    config_parser.set_defaults(func=cmd_config)

    # Parse arguments
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except (FileNotFoundError, yaml.YAMLError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config, verbose=args.verbose)
    args.settings = config

    return args.func(args)


def wants_json(args: argparse.Namespace) -> bool:
    """Check if JSON output was requested on the command line or in config."""
    if getattr(args, "json", False):
        return True
    settings: InspectorConfig | None = getattr(args, "settings", None)
    return settings is not None and settings.output.format == "json"


def output(data: Any, args: argparse.Namespace) -> None:
    """Output data in requested format."""
    if wants_json(args):
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        for key, value in data.items():
            print(f"{key}: {value}")
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                for key, value in item.items():
                    print(f"  {key}: {value}")
                print()
            else:
                print(f"  {item}")
    else:
        print(data)


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan devices from a snapshot file."""
    config: InspectorConfig = args.settings

    try:
        snapshot = load_snapshot(args.snapshot)
    except (FileNotFoundError, SnapshotParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    inventory = DeviceInventory(
        source=lambda: snapshot.records,
        parser=DeviceParser(lookup=snapshot.lookup()),
        lookup_timeout=config.lookup.timeout,
        max_concurrent=config.lookup.max_concurrent,
    )
    result = asyncio.run(inventory.scan())

    if result.error:
        print(result.error, file=sys.stderr)
        return 1

    devices = result.devices
    if not config.output.show_invalid:
        devices = result.valid_devices

    excluded = []
    if args.all:
        excluded = [
            {"instance_path": r.instance_path, "name": r.name,
             "category": classify_path(r.instance_path).value}
            for r in snapshot.records
            if not classify_path(r.instance_path).included
        ]

    if wants_json(args):
        report = ScanReport.model_validate(result.to_dict())
        data = report.model_dump(mode="json")
        data["devices"] = [d for d in data["devices"] if config.output.show_invalid or d["is_valid"]]
        if args.all:
            data["excluded_records"] = excluded
        output(data, args)
        return 0

    print(f"USB Storage Devices ({len(result.devices)} of {result.total_records} records)")
    print("=" * 78)
    if not devices:
        print("No USB storage devices found.")
    else:
        print(f"{'Name':<28} {'VID:PID':<11} {'Serial':<22} {'Status':<8}")
        print("-" * 78)
        for device in devices:
            name = device.friendly_name[:28]
            serial = (device.serial_number or "-")[:22]
            status = "valid" if device.is_valid else "invalid"
            print(f"{name:<28} {device.vid_pid or '-':<11} {serial:<22} {status:<8}")
            if device.error_message and not device.is_valid:
                print(f"  {device.error_message}")

    if args.all and excluded:
        print()
        print(f"Excluded Records ({len(excluded)})")
        print("-" * 78)
        for record in excluded:
            print(f"{record['category']:<12} {record['instance_path'] or '(no instance path)'}")

    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify device instance paths."""
    rows = []
    for path in args.paths:
        category = classify_path(path)
        rows.append({
            "path": path,
            "category": category.value,
            "included": category.included,
        })

    if wants_json(args):
        output(rows, args)
    else:
        for row in rows:
            verdict = "included" if row["included"] else "filtered out"
            print(f"{row['category']:<12} {verdict:<13} {row['path']}")

    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    """Extract identifiers from device strings."""
    rows = []
    for text in args.texts:
        ids = extract_vid_pid(text)
        rows.append({
            "text": text,
            "vendor_id": ids.vendor_id if ids else None,
            "product_id": ids.product_id if ids else None,
            "serial_number": extract_serial_number(text),
        })

    if wants_json(args):
        output(rows, args)
    else:
        for row in rows:
            vid_pid = f"{row['vendor_id']}:{row['product_id']}" if row["vendor_id"] else "not found"
            print(f"{vid_pid:<11} {row['serial_number'] or '-':<22} {row['text']}")

    # Non-zero when any string had no identifiers
    return 0 if all(row["vendor_id"] for row in rows) else 1


def cmd_config(args: argparse.Namespace) -> int:
    """Show or validate configuration."""
    config: InspectorConfig = args.settings

    if args.config_cmd == "validate":
        errors = validate_config(config)
        if errors:
            print("Configuration invalid:")
            for error in errors:
                print(f"  - {error}")
            return 1
        print(f"Configuration valid: {args.config or 'default'}")
        return 0

    if wants_json(args):
        output(config.to_dict(), args)
    else:
        print(yaml.safe_dump(config.to_dict(), default_flow_style=False), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
