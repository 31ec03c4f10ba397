"""
Unified CLI entry point for granule discovery.

Usage:
    python -m granule_discovery.cli <command> [options]

Available commands:
    discover     - Discover granules for a workflow event

Examples:
    python -m granule_discovery.cli discover --event event.yml
    python -m granule_discovery.cli discover --event event.yml --duplicate-handling skip
"""

import argparse
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with subcommand routing.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="granule_discovery.cli",
        description="Granule discovery command-line interface",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
        help="Command to execute",
    )
    subparsers.add_parser(
        "discover",
        help="Discover granules for a workflow event",
        add_help=False,  # Let the delegated module handle help
    )

    args, remaining_args = parser.parse_known_args(argv)

    if args.command == "discover":
        from granule_discovery.cli.discover import main as discover_main

        return discover_main(remaining_args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
