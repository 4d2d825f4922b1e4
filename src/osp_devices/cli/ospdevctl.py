#!/usr/bin/env python3
"""
ospdevctl - OpenStack device discovery CLI

A lightweight CLI for inspecting discovery on a node:
- Device discovery (ospdevctl discover)
- Metadata inspection (ospdevctl metadata)
- Restore from a persisted node state (ospdevctl restore)
- Version info (ospdevctl version)
"""

import argparse
import json
import logging
import sys
from typing import List

from pydantic import ValidationError

from osp_devices import __version__
from osp_devices.core.config import get_config
from osp_devices.core.errors import DiscoveryError
from osp_devices.inventory.models import DeviceInventoryRecord, NodeState
from osp_devices.inventory.service import OpenstackDeviceService, build_default_service


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"
    RED = "\033[91m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colorize(text: str, color: str) -> str:
    """Colorize text if stdout is a TTY."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.RESET}"
    return text


def setup_logging(log_level: str) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def format_records(records: List[DeviceInventoryRecord]) -> str:
    """Format inventory records as a table."""
    header = f"{'PCI ADDRESS':<14} {'NAME':<10} {'DRIVER':<12} {'VENDOR:DEVICE':<14} {'MAC':<18} {'MTU':>5}  NETWORK"
    lines = [colorize(header, Colors.BOLD)]
    for record in records:
        lines.append(
            f"{record.pci_address:<14} {record.name or '-':<10} {record.driver:<12} "
            f"{record.vendor + ':' + record.device_id:<14} {record.mac or '-':<18} "
            f"{record.mtu:>5}  {record.net_filter}"
        )
    return "\n".join(lines)


def print_records(records: List[DeviceInventoryRecord], as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.model_dump(by_alias=True) for r in records], indent=2))
    else:
        print(format_records(records))


def cmd_discover(args, service: OpenstackDeviceService) -> int:
    """
    Acquire metadata, correlate and print the synthesized devices.

    Returns:
        Exit code (0 on success, 1 on discovery failure)
    """
    try:
        service.create_devices_info()
        records = service.discover_virtual_devices()
    except DiscoveryError as e:
        print(colorize(f"✗ Discovery failed: {e}", Colors.RED), file=sys.stderr)
        return 1

    print_records(records, args.json)
    print(colorize(f"✓ Discovered {len(records)} devices", Colors.GREEN), file=sys.stderr)
    return 0


def cmd_metadata(args, service: OpenstackDeviceService) -> int:
    """
    Print the acquired metadata documents (with corrected addresses).

    Returns:
        Exit code (0 on success, 1 on failure)
    """
    acquirer = service.acquirer
    try:
        if args.local_only:
            meta_data, network_data = acquirer.read_config_drive(service.use_host_path)
            acquirer.correct_bus_addresses(meta_data)
        else:
            meta_data, network_data = acquirer.acquire(service.use_host_path)
    except (OSError, ValueError, DiscoveryError) as e:
        print(colorize(f"✗ Failed to get OpenStack data: {e}", Colors.RED), file=sys.stderr)
        return 1

    print(json.dumps(
        {
            "meta_data": meta_data.model_dump(exclude_none=True),
            "network_data": network_data.model_dump(by_alias=True, exclude_none=True),
        },
        indent=2,
    ))
    return 0


def cmd_restore(args, service: OpenstackDeviceService) -> int:
    """
    Restore the correlation map from a node state file and print the devices.

    Returns:
        Exit code (0 on success, 1 on failure)
    """
    try:
        with open(args.node_state, encoding="utf-8") as f:
            node_state = NodeState.model_validate_json(f.read())
    except (OSError, ValidationError) as e:
        print(colorize(f"✗ Cannot read node state {args.node_state}: {e}", Colors.RED), file=sys.stderr)
        return 1

    service.create_devices_info_from_node_state(node_state)
    try:
        records = service.discover_virtual_devices()
    except DiscoveryError as e:
        print(colorize(f"✗ Discovery failed: {e}", Colors.RED), file=sys.stderr)
        return 1

    print_records(records, args.json)
    print(colorize(f"✓ Discovered {len(records)} devices", Colors.GREEN), file=sys.stderr)
    return 0


def cmd_version(args) -> int:
    """
    Print version information.

    Returns:
        Exit code (always 0)
    """
    print(f"ospdevctl version {__version__}")
    print("OSP Devices - OpenStack virtual network device discovery")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for ospdevctl."""
    parser = argparse.ArgumentParser(
        description="OpenStack device discovery CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ospdevctl discover                 # Discover devices and print a table
  ospdevctl discover --json          # Same, as node-state JSON records
  ospdevctl metadata --local-only    # Show config drive metadata only
  ospdevctl restore state.json       # Rebuild from a persisted node state
  ospdevctl version                  # Show version information

Environment variables:
  OSP_METADATA_CONFIG_DRIVE_DIR      # Config drive directory
  OSP_METADATA_HOST_CONFIG_DRIVE_DIR # Host-mounted config drive directory
  OSP_METADATA_USE_HOST_PATH         # Read the host-mounted directory (default: true)
  OSP_METADATA_SERVICE_URL           # Metadata service base URL
  OSP_SYSFS_ROOT                     # Sysfs mount point (default: /sys)
  OSP_LOG_LEVEL                      # Log level (default: INFO)
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # discover command
    discover_parser = subparsers.add_parser(
        "discover",
        help="Acquire metadata, correlate and list devices"
    )
    discover_parser.add_argument(
        "--json",
        action="store_true",
        help="Print records as JSON"
    )

    # metadata command
    metadata_parser = subparsers.add_parser(
        "metadata",
        help="Print the acquired OpenStack metadata"
    )
    metadata_parser.add_argument(
        "--local-only",
        action="store_true",
        help="Only read the config drive, never the metadata service"
    )

    # restore command
    restore_parser = subparsers.add_parser(
        "restore",
        help="Rebuild devices from a persisted node state file"
    )
    restore_parser.add_argument(
        "node_state",
        help="Path to the node state JSON file"
    )
    restore_parser.add_argument(
        "--json",
        action="store_true",
        help="Print records as JSON"
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    return parser


def main(argv=None):
    """Main entry point for ospdevctl CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "version":
        return cmd_version(args)

    config = get_config()
    setup_logging(config.log_level)
    service = build_default_service(config)

    # Dispatch to command handlers
    if args.command == "discover":
        return cmd_discover(args, service)
    elif args.command == "metadata":
        return cmd_metadata(args, service)
    elif args.command == "restore":
        return cmd_restore(args, service)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
