"""CLI entry point for the HTTP API.

Usage:
    python -m scripts.serve [--host 0.0.0.0] [--port 8080] [--db-url postgresql://...]

Without --db-url the database comes from DATABASE_URL or the POSTGRES_* variables.
"""

import argparse
import dataclasses
import logging

import uvicorn

from api.app import create_app
from api.config import Settings


def main() -> None:
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Serve the prices import/export API")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--db-url", default=settings.db_url, help="Database URL")
    args = parser.parse_args()

    settings = dataclasses.replace(settings, host=args.host, port=args.port, db_url=args.db_url)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Listening on %s:%d", settings.host, settings.port)

    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
