"""Export of the prices table as a zipped CSV."""

import csv
import io
import logging
import math
from decimal import Decimal
from typing import Any, Iterable

from pydantic import ValidationError

from ingestion.archive import package_csv
from ingestion.models import StoredPrice
from ingestion.schema import PRICES_EXPORT_COLUMNS, PRICES_SELECT_ALL
from pricedb.exceptions import SerializationError, StorageError, UpstreamQueryError
from pricedb.service import DatabaseService

logger = logging.getLogger(__name__)


def format_price(value: float) -> str:
    """Format a float with the fewest digits that round-trip, never in exponent form.

    9.99 -> "9.99", 10.0 -> "10", 1e-05 -> "0.00001", inf -> "+Inf".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def fetch_prices(service: DatabaseService) -> list[dict[str, Any]]:
    """Return every stored price row in storage order."""
    try:
        with service.transaction():
            return service.execute(PRICES_SELECT_ALL)
    except StorageError as e:
        raise UpstreamQueryError("query db") from e


def serialize_prices(rows: Iterable[dict[str, Any]]) -> bytes:
    """Render price rows as CSV with an id,created_at,name,category,price header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(PRICES_EXPORT_COLUMNS)
    for index, row in enumerate(rows):
        try:
            price = StoredPrice.model_validate(row)
        except ValidationError as e:
            raise SerializationError(f"write csv row {index + 1}") from e
        writer.writerow(
            [str(price.id), price.created_at, price.name, price.category, format_price(price.price)]
        )
    return buffer.getvalue().encode("utf-8")


def export_archive(service: DatabaseService) -> bytes:
    """Query all prices and pack them as data.csv inside a zip archive."""
    rows = fetch_prices(service)
    archive = package_csv(serialize_prices(rows))
    logger.info("Exported %d rows (%d bytes zipped)", len(rows), len(archive))
    return archive
