"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import quote

from ingestion.archive import DEFAULT_SPOOL_MAX_BYTES


def postgres_url_from_env(env: Mapping[str, str]) -> str:
    """Assemble a PostgreSQL URL from the POSTGRES_* variables."""
    user = quote(env.get("POSTGRES_USER", ""), safe="")
    password = quote(env.get("POSTGRES_PASSWORD", ""), safe="")
    host = env.get("POSTGRES_HOST", "localhost")
    port = env.get("POSTGRES_PORT", "5432")
    name = env.get("POSTGRES_DB", "")
    credentials = f"{user}:{password}@" if user or password else ""
    return f"postgresql://{credentials}{host}:{port}/{name}?sslmode=disable"


@dataclass(frozen=True)
class Settings:
    db_url: str
    db_pool_size: int = 4
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    upload_spool_max_bytes: int = DEFAULT_SPOOL_MAX_BYTES

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from os.environ (or the given mapping).

        DATABASE_URL wins over the POSTGRES_* variables when both are set.
        """
        env = os.environ if env is None else env
        return cls(
            db_url=env.get("DATABASE_URL") or postgres_url_from_env(env),
            db_pool_size=int(env.get("DB_POOL_SIZE", "4")),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", "8080")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            upload_spool_max_bytes=int(
                env.get("UPLOAD_SPOOL_MAX_BYTES", str(DEFAULT_SPOOL_MAX_BYTES))
            ),
        )
