#!/usr/bin/env python3
"""
Intake Import

Reads the intake sheet, reconciles referrals and upserts the Notion pages.

Exit codes:
    0  run finished (per-row errors are reported, not fatal)
    1  the sheet or the existing pages could not be read
    2  configuration is missing or invalid

Usage:
    python scripts/run_import.py
    python scripts/run_import.py --dry-run
    python scripts/run_import.py --kind founder --range A2:ABY
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging import logger
from config.settings import ConfigurationError, settings
from connectors.google_sheets import GoogleSheetsReader, SheetsReadError
from connectors.notion import NotionAPIError, NotionClient, PageDirectory
from processing.importer import ImportStats, IntakeImporter
from processing.models import SubmissionKind
from processing.page_writer import NotionPageWriter

# ANSI colors for terminal output
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
BOLD = "\033[1m"
RESET = "\033[0m"

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def print_summary(stats: ImportStats):
    """Print the per-kind results table."""
    line = "=" * 70
    print(f"\n{BOLD}{line}\n  IMPORT SUMMARY{' (DRY RUN)' if stats.dry_run else ''}\n{line}{RESET}")

    header = (
        f"  {'Kind':<10} {'Processed':>9} {'Created':>8} {'Updated':>8} {'Errors':>7} "
        f"{'Invalid':>8} {'Unmatched':>10} {'Retired':>8}"
    )
    separator = "  " + "─" * 68
    print(header)
    print(separator)

    for kind, r in stats.kinds.items():
        color = RED if r.errors or r.placeholder_errors or r.retire_errors else GREEN
        row = (
            f"  {kind.value:<10} {r.processed:>9} {r.created:>8} {r.updated:>8} {r.errors:>7} "
            f"{r.invalid_primary + r.invalid_referral:>8} {r.unmatched:>10} {r.placeholders_retired:>8}"
        )
        print(f"{color}{row}{RESET}")

    print(separator)
    for category, counts in stats.forms.by_category.items():
        print(
            f"  {category.value:<18} {counts.valid:>4}/{counts.total:<4} valid "
            f"({counts.completion_rate}%)"
        )
    if stats.unknown:
        print(f"  {YELLOW}Unknown form type: {stats.unknown} rows skipped{RESET}")
    rate_color = GREEN if stats.errors == 0 else YELLOW
    print(f"  Success rate: {rate_color}{stats.success_rate:.1f}%{RESET}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Import intake form responses into the Notion database"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Read and reconcile, but do not write to Notion",
    )
    parser.add_argument(
        "--range",
        dest="cell_range",
        default=None,
        help=f"Sheet range to read (default: {settings.SHEET_RANGE})",
    )
    parser.add_argument(
        "--kind",
        choices=["founder", "searcher", "all"],
        default="all",
        help="Submission kind to import",
    )

    args = parser.parse_args()

    try:
        settings.require()
        reader = GoogleSheetsReader(settings.GAPI_SERVICE_ACCOUNT_KEY)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR

    kinds = list(SubmissionKind) if args.kind == "all" else [SubmissionKind(args.kind)]

    print("=" * 60)
    print("INTAKE IMPORT")
    print("=" * 60)
    print(f"Sheet range: {args.cell_range or settings.SHEET_RANGE}")
    print(f"Kinds: {', '.join(k.value for k in kinds)}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'LIVE'}")
    print("=" * 60)

    try:
        rows = reader.read_rows(settings.GOOGLE_SHEET_ID, args.cell_range)
    except SheetsReadError as e:
        logger.error(f"Could not read the intake sheet: {e}")
        return EXIT_SOURCE_ERROR

    writer = None
    if not args.dry_run:
        client = NotionClient(settings.NOTION_API_KEY)
        try:
            directory = PageDirectory.load(client, settings.NOTION_DATABASE_ID)
        except NotionAPIError as e:
            logger.error(f"Could not list existing Notion pages: {e}")
            return EXIT_SOURCE_ERROR
        writer = NotionPageWriter(client, settings.NOTION_DATABASE_ID, directory)

    importer = IntakeImporter(writer)
    stats = importer.run(rows, kinds=kinds, dry_run=args.dry_run)
    stats.log_summary()
    print_summary(stats)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
