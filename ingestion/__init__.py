"""CSV-in-zip ingestion and export for the prices table."""

from ingestion.archive import open_csv_entry, package_csv, spooled_upload
from ingestion.csv_ingest import ingest_archive, parse_row, read_records
from ingestion.export import export_archive, format_price, serialize_prices
from ingestion.models import PriceRecord, ResponseStats, StoredPrice
from ingestion.schema import ensure_prices_schema

__all__ = [
    "PriceRecord",
    "StoredPrice",
    "ResponseStats",
    "ensure_prices_schema",
    "open_csv_entry",
    "package_csv",
    "spooled_upload",
    "ingest_archive",
    "parse_row",
    "read_records",
    "export_archive",
    "format_price",
    "serialize_prices",
]
