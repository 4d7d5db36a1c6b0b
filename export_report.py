"""
Report Exporter - CSV Export of Stored Check-ins
=================================================

Writes every locally stored review to a spreadsheet-friendly CSV file,
the same file the admin table offers for download.

    python export_report.py
    python export_report.py --output reporte.csv
"""

import sys
import logging
import argparse
import sqlite3
from pathlib import Path

from devpulse.infrastructure.config import get_settings
from devpulse.infrastructure.export import build_csv, report_filename
from devpulse.infrastructure.persistence import LocalStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_export(db_path: Path, output: Path) -> int:
    """Export all reviews to `output`. Returns the number of rows written."""
    store = LocalStore(db_path)
    store.init()

    reviews = store.list_reviews()
    # The BOM is part of the text, so plain utf-8 here
    output.write_text(build_csv(reviews), encoding="utf-8")
    logger.info(f"Exported {len(reviews)} reviews to {output}")
    return len(reviews)


def main(argv=None):
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Export monthly check-ins to CSV")
    parser.add_argument(
        "--db",
        default=str(settings.database_file),
        help=f"Local store file (default: {settings.database_file})"
    )
    parser.add_argument(
        "--output",
        default=report_filename(),
        help="CSV file to write (default: Check-in_Reporte_<today>.csv)"
    )
    args = parser.parse_args(argv)

    print("\n" + "=" * 60)
    print("   DevPulse - Report Export")
    print("=" * 60 + "\n")

    try:
        count = run_export(Path(args.db), Path(args.output))
    except (OSError, sqlite3.Error) as e:
        logger.error(f"Export failed: {e}")
        return 1

    print(f"   Reviews: {count}")
    print(f"   File:    {args.output}")
    print("=" * 60 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
