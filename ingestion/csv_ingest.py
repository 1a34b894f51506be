"""All-or-nothing ingestion of a zipped CSV into the prices table."""

import csv
import logging
from typing import BinaryIO, Iterable

from ingestion.archive import open_csv_entry
from ingestion.models import PriceRecord, ResponseStats
from ingestion.schema import PRICES_AGGREGATES, PRICES_INSERT_COLUMNS, PRICES_TABLE
from pricedb.exceptions import FieldParseError, RowShapeError, StorageError
from pricedb.service import DatabaseService

logger = logging.getLogger(__name__)

MIN_COLUMNS = 5


def parse_price(raw: str) -> float:
    """Parse a price field as a float, rejecting padding and digit separators."""
    if raw != raw.strip() or "_" in raw:
        raise ValueError(f"could not convert string to float: {raw!r}")
    return float(raw)


def parse_row(row: list[str], line: int = 0) -> PriceRecord:
    """Parse a CSV row into a PriceRecord.

    Column 0 (the client's id) is ignored; storage assigns ids.
    """
    if len(row) < MIN_COLUMNS:
        raise RowShapeError(
            f"parse row {line}",
            f"invalid row length: {len(row)}",
            details={"line": line, "columns": len(row)},
        )
    try:
        price = parse_price(row[3])
    except ValueError as e:
        raise FieldParseError(
            f"parse row {line}",
            "invalid price",
            details={"line": line, "value": row[3]},
        ) from e
    return PriceRecord(name=row[1], category=row[2], price=price, created_at=row[4])


def read_records(lines: Iterable[str]) -> list[PriceRecord]:
    """Parse every data row of a CSV payload.

    The first row is always discarded. Empty lines are skipped. The first bad
    row aborts the whole read.
    """
    reader = csv.reader(lines, strict=True)
    try:
        next(reader)
    except StopIteration:
        raise RowShapeError("read first line", "empty csv payload") from None
    except csv.Error as e:
        raise RowShapeError("read first line") from e

    records: list[PriceRecord] = []
    try:
        for row in reader:
            if not row:
                continue
            records.append(parse_row(row, reader.line_num))
    except csv.Error as e:
        raise RowShapeError(f"read row {reader.line_num}") from e
    return records


def _aggregate(service: DatabaseService, total_items: int) -> ResponseStats:
    try:
        row = service.query_one(PRICES_AGGREGATES)
    except StorageError as e:
        raise StorageError("calculate statistics") from e
    if row is None:
        raise StorageError("calculate statistics", "aggregate query returned no rows")
    return ResponseStats(
        total_items=total_items,
        total_categories=int(row["total_categories"]),
        total_price=float(row["total_price"]),
    )


def insert_records(service: DatabaseService, records: list[PriceRecord]) -> ResponseStats:
    """Insert records in one transaction and compute table-wide aggregates.

    The aggregate query runs inside the same transaction, so the totals
    include this batch plus everything committed before it. On any failure
    the transaction rolls back and nothing from the batch persists.
    """
    rows = [record.as_insert_row() for record in records]
    try:
        with service.transaction():
            service.batch_insert(PRICES_TABLE, PRICES_INSERT_COLUMNS, rows)
            stats = _aggregate(service, len(rows))
    except StorageError as e:
        raise StorageError("insert data in db") from e
    return stats


def ingest_archive(service: DatabaseService, archive: bytes | BinaryIO) -> ResponseStats:
    """Ingest the first .csv entry of a zip archive into prices.

    Every row is parsed before storage is touched. Returns the stats of the
    committed transaction.
    """
    with open_csv_entry(archive) as text:
        records = read_records(text)

    stats = insert_records(service, records)
    logger.info(
        "Ingested %d rows (table totals: %d categories, price %s)",
        stats.total_items,
        stats.total_categories,
        stats.total_price,
    )
    return stats
