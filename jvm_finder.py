#!/usr/bin/env python3
"""
jvm_finder.py – locate installed JVMs
=====================================
Entry point: prints the path of the best matching JVM (or every match with
``--detailed``), and manages the list of custom search locations.

Examples:
    jvm-finder                      # newest JVM for this machine
    jvm-finder -v 11                # newest Java 11
    jvm-finder -v 1.8+ -a x86_64 -d # every x86_64 JVM >= 8
    jvm-finder -r /opt/jvms         # also search /opt/jvms/*
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jvm_manager import JvmManager
from jvm_selector import JvmFilter
from jvm_types import Architecture, JvmRecord, normalize_arch
from jvm_version import VersionFilter
from location_store import LocationStore, LocationStoreError, default_store_path

__version__ = "0.1.0"

logger = logging.getLogger("jvm_finder")

# sysexits.h
EX_OK = 0
EX_IOERR = 74
EX_CONFIG = 78


# ──────────────────────────────────────────────
#  Logging
# ──────────────────────────────────────────────

def configure_logging(verbose: bool = False) -> None:
    """Log to stderr; stdout carries only results."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


# ──────────────────────────────────────────────
#  CLI
# ──────────────────────────────────────────────

def _arch_arg(text: str) -> Architecture:
    arch = normalize_arch(text)
    if arch is Architecture.UNKNOWN:
        choices = ", ".join(a.value for a in Architecture if a is not Architecture.UNKNOWN)
        raise argparse.ArgumentTypeError(f"unknown architecture {text!r} (choose from {choices})")
    return arch


def _version_arg(text: str) -> VersionFilter:
    try:
        return VersionFilter.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="jvm-finder",
        description="Find installed JVMs and print the best match.",
        epilog=__doc__.split("Examples:", 1)[1],
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-n", "--name", default=None, help="JVM name to filter on (case-insensitive substring)")
    p.add_argument(
        "-a", "--arch", type=_arch_arg, default=None,
        help="Architecture to filter on (e.g. x86_64, aarch64, amd64)",
    )
    p.add_argument(
        "-v", "--version", type=_version_arg, default=None,
        help="Version to filter on (e.g. 1.8, 11, 17); suffix + for a minimum (11+)",
    )
    p.add_argument("-d", "--detailed", action="store_true", help="Print every match with full details")
    p.add_argument("-f", "--fail", action="store_true", help="Exit with status 78 if no JVM is found")
    p.add_argument("--json", action="store_true", help="Print matches as JSON")
    p.add_argument("--config", default=None, help="Path to the custom locations file")
    p.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    p.add_argument("-V", action="version", version=f"%(prog)s {__version__}")

    mgmt = p.add_mutually_exclusive_group()
    mgmt.add_argument("-r", "--register-location", metavar="PATH", default=None,
                      help="Add a directory of JVMs to search")
    mgmt.add_argument("-x", "--remove-location", metavar="PATH", default=None,
                      help="Remove a registered directory")
    mgmt.add_argument("-l", "--display-locations", action="store_true",
                      help="List registered directories")
    return p.parse_args(argv)


# ──────────────────────────────────────────────
#  Location management
# ──────────────────────────────────────────────

def run_management(args: argparse.Namespace, store_path: Path) -> int:
    err = Console(stderr=True)
    try:
        store = LocationStore(store_path)
    except LocationStoreError as exc:
        err.print(f"[bold red]Error:[/] {escape(str(exc))}", highlight=False)
        return EX_IOERR

    if args.display_locations:
        for location in store.locations:
            print(location)
        return EX_OK

    if args.register_location:
        result = store.add(args.register_location)
    else:
        result = store.remove(args.remove_location)

    if not result.success:
        err.print(f"[bold red]Error:[/] {escape(result.message)}: {escape(result.error or '')}", highlight=False)
        return EX_IOERR
    style = "green" if result.details.get("changed") else "yellow"
    err.print(escape(result.message), style=style, highlight=False)
    return EX_OK


# ──────────────────────────────────────────────
#  Discovery & presentation
# ──────────────────────────────────────────────

def load_custom_roots(store_path: Path) -> List[str]:
    """Registered locations; an unreadable store only costs the custom roots."""
    try:
        return LocationStore(store_path).locations
    except LocationStoreError as exc:
        logger.warning("Ignoring custom locations: %s", exc)
        return []


def render_detailed(records: Sequence[JvmRecord], console: Console) -> None:
    if not console.is_terminal:
        for record in records:
            print(record.describe())
        return

    table = Table(title="Installed JVMs")
    table.add_column("Version", style="cyan")
    table.add_column("Arch", style="magenta")
    table.add_column("Name", style="green")
    table.add_column("Path", style="white", overflow="fold")
    table.add_column("Source", style="dim")
    for record in records:
        table.add_row(
            str(record.version), record.architecture.value, record.name,
            record.path, record.source.value,
        )
    console.print(table)


def present(records: Sequence[JvmRecord], detailed: bool = False, fail: bool = False,
            as_json: bool = False) -> int:
    """Print results and return the process exit status."""
    if not records:
        if fail:
            Console(stderr=True).print("[bold red]Couldn't find a JVM to use.[/]")
            return EX_CONFIG
        if as_json:
            print("[]")
        return EX_OK

    if as_json:
        shown = records if detailed else records[:1]
        print(json.dumps([r.to_dict() for r in shown], indent=2))
    elif detailed:
        render_detailed(records, Console())
    else:
        print(records[0].path)
    return EX_OK


def run_discovery(args: argparse.Namespace, store_path: Path) -> int:
    jvm_filter = JvmFilter(name=args.name, version=args.version, arch=args.arch)
    manager = JvmManager.for_host(load_custom_roots(store_path))
    records = manager.find(jvm_filter)
    return present(records, detailed=args.detailed, fail=args.fail, as_json=args.json)


# ──────────────────────────────────────────────
#  Entry Point
# ──────────────────────────────────────────────

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    store_path = Path(args.config).expanduser() if args.config else default_store_path()

    if args.register_location or args.remove_location or args.display_locations:
        return run_management(args, store_path)
    return run_discovery(args, store_path)


if __name__ == "__main__":
    sys.exit(main())
