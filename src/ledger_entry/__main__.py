"""Command-line lookup against a snapshot file.

Usage: python -m ledger_entry SNAPSHOT.json REQUEST.json [--api-version N] [--binary]
"""

import json
import sys

from ledger_entry.config import resolve_config
from ledger_entry.core.exceptions import LedgerEntryError
from ledger_entry.executor import create_executor
from ledger_entry.snapshot import LedgerHistory, LedgerSnapshot
from ledger_entry.telemetry import MemoryReporter

# ruff: noqa: T201


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Look up one ledger object in a snapshot",
        prog="python -m ledger_entry",
    )
    parser.add_argument("snapshot", help="Path to a snapshot JSON file")
    parser.add_argument("request", help="Path to a request JSON file")
    parser.add_argument(
        "--api-version", type=int, help="API version (defaults to configuration)"
    )
    parser.add_argument(
        "--binary",
        action="store_true",
        help="Return node_binary unless the request sets binary itself",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Print a telemetry report to stderr (needs LEDGER_ENTRY_TELEMETRY=1)",
    )

    args = parser.parse_args(argv)

    try:
        overrides = {"binary_default": True} if args.binary else None
        config = resolve_config(overrides, profile=args.profile).to_frozen()
        snapshot = LedgerSnapshot.from_json_file(args.snapshot)
        with open(args.request, encoding="utf-8") as f:
            request = json.load(f)
    except (OSError, ValueError, LedgerEntryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reporter = MemoryReporter()
    executor = create_executor(
        LedgerHistory([snapshot]),
        config,
        reporters=(reporter,) if args.telemetry else (),
    )
    try:
        response = executor.execute(request, api_version=args.api_version)
    except (LedgerEntryError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(response, indent=2))
    if args.telemetry:
        print(reporter.get_report(), file=sys.stderr)
    return 0 if "error" not in response else 1


if __name__ == "__main__":
    sys.exit(main())
