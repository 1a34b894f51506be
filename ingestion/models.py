"""Record types moving through the ingest and export pipelines."""

from pydantic import BaseModel, Field


class PriceRecord(BaseModel):
    """One parsed CSV row, before storage assigns it an id."""

    name: str
    category: str
    price: float
    created_at: str

    model_config = {"frozen": True}

    def as_insert_row(self) -> tuple:
        """Values in PRICES_INSERT_COLUMNS order."""
        return (self.created_at, self.name, self.category, self.price)


class StoredPrice(BaseModel):
    """A row of the `prices` table as read back for export."""

    id: int = Field(..., description="Storage-assigned primary key.")
    created_at: str
    name: str
    category: str
    price: float

    model_config = {"frozen": True}


class ResponseStats(BaseModel):
    """Result of one ingestion call.

    total_items counts rows inserted by this call only; total_categories and
    total_price are aggregates over the whole prices table at commit time.
    """

    total_items: int
    total_categories: int
    total_price: float

    model_config = {"frozen": True}


__all__ = ["PriceRecord", "ResponseStats", "StoredPrice"]
