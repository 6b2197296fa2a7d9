"""
Command-line interface for MADtraits.

    madtraits list
    madtraits info
    madtraits build --cache ~/madtraits-cache --traits height sla --output wide.csv
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from madtraits import __version__
from madtraits.config import get_settings
from madtraits.datasources import registry
from madtraits.errors import MADtraitsError
from madtraits.flows.build import build_database
from madtraits.reshape import to_wide


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="madtraits",
        description="Make a database of species traits from published datasets",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", help="List registered datasets")
    subparsers.add_parser("info", help="Show application info")

    build_parser = subparsers.add_parser("build", help="Download/load datasets and summarise")
    build_parser.add_argument(
        "--cache",
        type=Path,
        default=None,
        help="Cache directory (default: cache_dir from settings)",
    )
    build_parser.add_argument(
        "--datasets",
        nargs="+",
        default=None,
        metavar="ID",
        help="Datasets to load (default: all)",
    )
    build_parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between downloads (default: delay from settings)",
    )
    build_parser.add_argument("--species", nargs="+", default=None, help="Keep only these species")
    build_parser.add_argument("--traits", nargs="+", default=None, help="Keep only these traits")
    build_parser.add_argument(
        "--wide",
        type=int,
        default=None,
        metavar="N",
        help="Write a wide table of the N best-covered traits (default with --traits: those)",
    )
    build_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="CSV file for the wide table (long tables go to <stem>_numeric/_categorical.csv)",
    )
    build_parser.add_argument(
        "--long",
        action="store_true",
        help="Write the long tables instead of a wide table",
    )

    return parser


def cmd_list(_args: argparse.Namespace) -> int:
    """Handle the 'list' command."""
    for name in registry.names():
        print(name)
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Cache: {settings.cache_dir or '(none)'}")
    print(f"Delay: {settings.delay}s")
    print(f"Datasets: {len(registry)}")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Handle the 'build' command: build, filter, summarise, optionally export."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    cache = args.cache if args.cache is not None else settings.cache_dir
    delay = args.delay if args.delay is not None else settings.delay

    try:
        db = build_database(cache_dir=cache, datasets=args.datasets, delay=delay)
        if args.species or args.traits:
            db = db.filter(species=args.species, traits=args.traits)
            print(db)

        if args.output is None:
            return 0

        if args.long:
            for kind, table in db.tables():
                if table is not None:
                    path = args.output.with_name(f"{args.output.stem}_{kind}.csv")
                    table.to_csv(path, index=False)
                    print(f"Wrote {len(table)} {kind} records to {path}")
            return 0

        selection = args.wide or args.traits or settings.wide_traits
        wide = to_wide(db, selection)
        wide.to_csv(args.output, index=False)
        print(f"Wrote {len(wide)} species x {len(wide.columns) - 1} traits to {args.output}")
    except MADtraitsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "build": cmd_build,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
