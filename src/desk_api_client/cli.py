"""CLI commands for desk-api-client.

This module provides command-line utilities for:
- Validating configuration
- Dumping configuration (with secrets redacted)
- Showing deprecated environment variables
- Decoding a saved opportunity activity feed
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

import structlog

from desk_api_client._version import __version__
from desk_api_client.config.env_aliases import _DEPRECATED_ALIASES
from desk_api_client.config.load import load_settings
from desk_api_client.config.redact import redact_settings_dict
from desk_api_client.domain.activities import OpportunityAttachment
from desk_api_client.domain.activity_decoder import DEFAULT_CODEC, classify_activity
from desk_api_client.domain.errors import ActivityDecodeError
from desk_api_client.observability.logger import configure_logging

log = structlog.get_logger(__name__)


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration and exit with appropriate code.

    Exit codes:
        0: Configuration is valid
        1: Configuration is invalid
    """
    try:
        settings = load_settings()
    except Exception as e:
        print(f"✗ Configuration is invalid: {e}", file=sys.stderr)
        return 1
    print("✓ Configuration is valid")
    print(f"  - Desk host: {settings.desk.hostname}")
    print(f"  - Auth type: {settings.desk.auth_type}")
    print(f"  - Max retries: {settings.transport.max_retries}")
    return 0


def cmd_dump_config(args: argparse.Namespace) -> int:
    """Dump current configuration as JSON (with secrets redacted)."""
    try:
        settings = load_settings()
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1
    data = settings.model_dump(mode="json")
    print(json.dumps(redact_settings_dict(data), indent=2, default=str))
    return 0


def cmd_show_deprecated(args: argparse.Namespace) -> int:
    """Show deprecated environment variables that are in use."""
    found = []
    for old_name, new_name in _DEPRECATED_ALIASES.items():
        if old_name in os.environ:
            found.append((old_name, new_name, os.environ.get(new_name) is None))

    if not found:
        print("No deprecated environment variables in use.")
        return 0

    print("Deprecated environment variables detected:")
    print()
    for old_name, new_name, needs_migration in found:
        status = "NEEDS MIGRATION" if needs_migration else "Has canonical override"
        print(f"  {old_name} → {new_name} {status}")

    print()
    print("These variables will be removed in a future version.")
    print("Please migrate to the canonical names.")
    return 0


def _load_feed_entries(path: Path) -> list[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        entries = (data.get("_embedded") or {}).get("entries")
        if isinstance(entries, list):
            return entries
        return [data]
    raise ValueError("expected a JSON array, a single activity object or an API response page")


def cmd_decode_activities(args: argparse.Namespace) -> int:
    """Classify and decode a saved activity feed, one JSON line per entry."""
    try:
        entries = _load_feed_entries(Path(args.file))
    except (OSError, ValueError) as e:
        print(f"✗ Failed to read {args.file}: {e}", file=sys.stderr)
        return 1

    failures = 0
    for index, entry in enumerate(entries):
        kind = classify_activity(entry)
        row: dict[str, Any] = {"index": index, "kind": kind.name.lower() if kind else None}
        if kind is not None:
            try:
                record = DEFAULT_CODEC.decode(kind, entry)
            except ActivityDecodeError as e:
                failures += 1
                row["error"] = e.detail
            else:
                row["id"] = record.id
                if isinstance(record, OpportunityAttachment):
                    row["file_extension"] = record.file_extension
        print(json.dumps(row))

    log.info("desk.cli.decoded", file=str(args.file), entries=len(entries), failures=failures)
    return 1 if failures else 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="desk-api-client",
        description="Desk API client utilities",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for diagnostic output (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate-config
    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate configuration and exit",
    )
    validate_parser.set_defaults(func=cmd_validate_config)

    # dump-config
    dump_parser = subparsers.add_parser(
        "dump-config",
        help="Dump configuration as JSON (secrets redacted)",
    )
    dump_parser.set_defaults(func=cmd_dump_config)

    # show-deprecated
    deprecated_parser = subparsers.add_parser(
        "show-deprecated",
        help="Show deprecated environment variables in use",
    )
    deprecated_parser.set_defaults(func=cmd_show_deprecated)

    decode_parser = subparsers.add_parser(
        "decode-activities",
        help="Decode a saved opportunity activity feed (JSON file)",
    )
    decode_parser.add_argument("file", help="Path to a JSON array or API response page")
    decode_parser.set_defaults(func=cmd_decode_activities)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(log_level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
