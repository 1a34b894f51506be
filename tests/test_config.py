"""Tests for environment settings and error mapping."""

import pytest

from api.config import Settings, postgres_url_from_env
from api.errors import status_for
from pricedb import (
    ErrorKind,
    FieldParseError,
    MalformedArchiveError,
    NotFoundError,
    RowShapeError,
    SerializationError,
    StorageError,
    UpstreamQueryError,
)


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.port == 8080
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "INFO"
        assert settings.db_pool_size == 4
        assert settings.db_url == "postgresql://localhost:5432/?sslmode=disable"

    def test_postgres_variables(self):
        env = {
            "POSTGRES_HOST": "db",
            "POSTGRES_PORT": "5433",
            "POSTGRES_USER": "validator",
            "POSTGRES_PASSWORD": "p@ss:word",
            "POSTGRES_DB": "project-sem-1",
        }
        assert postgres_url_from_env(env) == (
            "postgresql://validator:p%40ss%3Aword@db:5433/project-sem-1?sslmode=disable"
        )

    def test_database_url_wins(self):
        env = {"DATABASE_URL": "sqlite:///prices.db", "POSTGRES_HOST": "db"}
        assert Settings.from_env(env).db_url == "sqlite:///prices.db"

    def test_overrides(self):
        env = {"PORT": "9000", "LOG_LEVEL": "debug", "DB_POOL_SIZE": "2", "UPLOAD_SPOOL_MAX_BYTES": "10"}
        settings = Settings.from_env(env)
        assert settings.port == 9000
        assert settings.log_level == "DEBUG"
        assert settings.db_pool_size == 2
        assert settings.upload_spool_max_bytes == 10


class TestErrors:
    def test_describe_joins_cause_chain(self):
        try:
            try:
                try:
                    raise ValueError("disk full")
                except ValueError as e:
                    raise StorageError("insert record") from e
            except StorageError as e:
                raise StorageError("insert data in db") from e
        except StorageError as e:
            err = e
        assert err.describe() == "insert data in db: insert record: disk full"
        assert str(err) == err.describe()

    def test_detail_and_to_dict(self):
        err = RowShapeError("parse row 2", "invalid row length: 3", details={"line": 2})
        assert err.to_dict() == {
            "error": "ROW_SHAPE",
            "message": "parse row 2: invalid row length: 3",
            "details": {"line": 2},
        }

    @pytest.mark.parametrize(
        "exc,kind,status",
        [
            (MalformedArchiveError("x"), ErrorKind.MALFORMED_ARCHIVE, 400),
            (NotFoundError("x"), ErrorKind.NOT_FOUND, 404),
            (RowShapeError("x"), ErrorKind.ROW_SHAPE, 400),
            (FieldParseError("x"), ErrorKind.FIELD_PARSE, 400),
            (StorageError("x"), ErrorKind.STORAGE, 400),
            (SerializationError("x"), ErrorKind.SERIALIZATION, 400),
            (UpstreamQueryError("x"), ErrorKind.UPSTREAM_QUERY, 500),
        ],
    )
    def test_status_mapping(self, exc, kind, status):
        assert exc.kind is kind
        assert status_for(exc) == status
