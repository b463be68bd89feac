"""
Load a JSON array of payment rows (same shape as POST /api/customers/bulk) into the database.

    python scripts/import_customers.py data.json
    python scripts/import_customers.py data.json --skip-duplicates --user "Data Team"
"""
import sys
import os
import json
import argparse
import logging

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.core import settings, engine, SessionLocal, Base
from app.services import BulkImportService

logger = logging.getLogger("import_customers")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Bulk import customer payment rows from JSON")
    parser.add_argument("path", help="JSON file holding an array of rows")
    parser.add_argument("--user", default=settings.DEFAULT_ACTOR, help="Actor recorded in the activity log")
    parser.add_argument("--skip-duplicates", action="store_true", help="Skip rows already on the plan")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    with open(args.path, encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        logger.error(f"{args.path}: expected a JSON array of rows")
        return 2

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        result = BulkImportService.import_rows(db, rows, args.user, skip_duplicates=args.skip_duplicates)
    finally:
        db.close()

    logger.info(
        f"{result.created} created, {result.updated} updated, "
        f"{result.skipped} skipped, {len(result.errors)} failed"
    )
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
