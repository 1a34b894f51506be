"""CLI entry point for exporting the prices table.

Usage:
    python -m scripts.export_prices --db-url sqlite:///data.db --output prices.zip
"""

import argparse
import logging
import sys
from pathlib import Path

from ingestion.export import export_archive
from ingestion.schema import ensure_prices_schema
from pricedb import PriceDBError, create_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Export stored prices as a zipped CSV")
    parser.add_argument("--db-url", required=True, help="Database URL")
    parser.add_argument("--output", default="prices.zip", help="Where to write the archive")
    args = parser.parse_args()

    service = create_service(args.db_url)
    service.connect()
    try:
        ensure_prices_schema(service)
        archive = export_archive(service)
    except PriceDBError as e:
        logger.error("Export failed: %s", e.describe())
        sys.exit(1)
    finally:
        service.close()

    Path(args.output).write_bytes(archive)
    logger.info("Wrote %s", args.output)


if __name__ == "__main__":
    main()
