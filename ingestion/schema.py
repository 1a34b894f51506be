"""Prices table schema."""

from pricedb.service import DatabaseService

PRICES_TABLE_DDL = {
    "sqlite": """
CREATE TABLE IF NOT EXISTS prices (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at  TEXT    NOT NULL,
    name        TEXT    NOT NULL,
    category    TEXT    NOT NULL,
    price       REAL    NOT NULL
);
""",
    "postgresql": """
CREATE TABLE IF NOT EXISTS prices (
    id          SERIAL PRIMARY KEY,
    created_at  TEXT             NOT NULL,
    name        TEXT             NOT NULL,
    category    TEXT             NOT NULL,
    price       DOUBLE PRECISION NOT NULL
);
""",
}

PRICES_TABLE = "prices"
PRICES_INSERT_COLUMNS = ["created_at", "name", "category", "price"]
PRICES_EXPORT_COLUMNS = ["id", "created_at", "name", "category", "price"]

PRICES_SELECT_ALL = f"SELECT {', '.join(PRICES_EXPORT_COLUMNS)} FROM {PRICES_TABLE}"

PRICES_AGGREGATES = f"""
SELECT
    COALESCE(SUM(price), 0) AS total_price,
    COUNT(DISTINCT category) AS total_categories
FROM {PRICES_TABLE}
"""


def ensure_prices_schema(service: DatabaseService) -> None:
    """Create the prices table if it doesn't exist."""
    try:
        ddl = PRICES_TABLE_DDL[service.dialect]
    except KeyError:
        raise ValueError(f"No prices schema for dialect: {service.dialect!r}") from None
    service.execute_ddl(ddl)
