"""CLI entry point for zipped CSV ingestion.

Usage:
    python -m scripts.ingest_archive --db-url sqlite:///data.db --file prices.zip
"""

import argparse
import json
import logging
import sys

from ingestion.csv_ingest import ingest_archive
from ingestion.schema import ensure_prices_schema
from pricedb import PriceDBError, create_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Ingest a zipped price CSV into the database")
    parser.add_argument(
        "--db-url", required=True, help="Database URL (sqlite:/// or postgresql://)"
    )
    parser.add_argument("--file", required=True, help="Path to a zip archive holding a .csv")
    args = parser.parse_args()

    service = create_service(args.db_url)
    service.connect()
    try:
        ensure_prices_schema(service)
        with open(args.file, "rb") as archive:
            stats = ingest_archive(service, archive)
    except PriceDBError as e:
        logger.error("Ingestion failed: %s", e.describe())
        sys.exit(1)
    finally:
        service.close()

    print(json.dumps(stats.model_dump()))


if __name__ == "__main__":
    main()
