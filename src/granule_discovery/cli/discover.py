"""
Granule discovery CLI.

Runs one discovery invocation from an event file and prints (or writes) the
`{"granules": [...]}` payload.

Usage:
    # Discover granules for an event, print JSON to stdout
    python -m granule_discovery.cli discover --event event.yml

    # Skip granules already in the catalog, write output to a file
    python -m granule_discovery.cli discover --event event.yml \\
        --duplicate-handling skip --output granules.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from granule_discovery.domain.granules import DuplicatePolicy
from granule_discovery.exceptions import GranuleDiscoveryError
from granule_discovery.io.connectors.discovery import GranuleDiscoveryService
from granule_discovery.orchestration.ops import load_event


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point for granule discovery.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="granule_discovery.cli discover",
        description="Discover granules on a provider and resolve duplicates",
    )
    parser.add_argument(
        "--event",
        required=True,
        help="Path to the workflow event (YAML or JSON)",
    )
    parser.add_argument(
        "--output",
        help="Write the granule payload to this file instead of stdout",
    )
    parser.add_argument(
        "--duplicate-handling",
        choices=[policy.value for policy in DuplicatePolicy],
        help="Override the event's duplicate handling",
    )
    parser.add_argument(
        "--use-list",
        action="store_true",
        default=None,
        help="Ask the provider to use its list operation",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print run statistics to stderr",
    )

    args = parser.parse_args(argv)

    try:
        event = load_event(args.event, args.duplicate_handling, args.use_list)
        result = GranuleDiscoveryService().discover(event)
    except GranuleDiscoveryError as e:
        print(f"❌ Discovery failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("⚠️  Discovery cancelled by user (Ctrl+C)", file=sys.stderr)
        return 130

    payload = json.dumps(result.to_dict(), indent=2)
    if args.output:
        output = Path(args.output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(payload, encoding="utf-8")
        except OSError as e:
            print(f"❌ Unable to write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"✅ Wrote {len(result.granules)} granules to {args.output}")
    else:
        print(payload)

    if args.stats:
        print(json.dumps(result.stats(), indent=2), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
