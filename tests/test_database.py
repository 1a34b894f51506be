"""Tests for DatabaseService (SQLite backend)."""

import threading

import pytest

from pricedb import SQLiteDatabaseService, StorageError, create_service
from pricedb.postgres_service import PostgresDatabaseService


class TestDatabaseService:
    def test_execute_ddl_and_insert(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        with db_service.transaction():
            db_service.execute("INSERT INTO t (id, name) VALUES (?, ?)", (1, "alice"))
            rows = db_service.execute("SELECT * FROM t")
        assert rows == [{"id": 1, "name": "alice"}]

    def test_execute_many(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with db_service.transaction():
            db_service.execute_many(
                "INSERT INTO t (id, val) VALUES (?, ?)",
                [(1, "a"), (2, "b"), (3, "c")],
            )
            rows = db_service.execute("SELECT * FROM t ORDER BY id")
        assert len(rows) == 3
        assert rows[0]["val"] == "a"

    def test_batch_insert(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with db_service.transaction():
            db_service.batch_insert("t", ["val"], [("x",), ("y",)])
            rows = db_service.execute("SELECT * FROM t ORDER BY id")
        assert rows == [{"id": 1, "val": "x"}, {"id": 2, "val": "y"}]

    def test_batch_insert_empty_rows(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with db_service.transaction():
            db_service.batch_insert("t", ["id", "val"], [])
            rows = db_service.execute("SELECT * FROM t")
        assert rows == []

    def test_query_one(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val INTEGER)")
        with db_service.transaction():
            assert db_service.query_one("SELECT * FROM t") is None
            db_service.batch_insert("t", ["val"], [(5,), (7,)])
            row = db_service.query_one("SELECT SUM(val) AS total FROM t")
        assert row == {"total": 12}

    def test_transaction_rollback_on_error(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with pytest.raises(ValueError):
            with db_service.transaction():
                db_service.execute("INSERT INTO t (id, val) VALUES (?, ?)", (1, "x"))
                raise ValueError("simulated failure")

        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM t")
        assert rows == []

    def test_requires_transaction(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        with pytest.raises(RuntimeError, match="No active transaction"):
            db_service.execute("SELECT 1")

    def test_driver_error_becomes_storage_error(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val TEXT)")
        with pytest.raises(StorageError) as excinfo:
            with db_service.transaction():
                db_service.batch_insert("t", ["id", "val"], [(1, "a"), (1, "b")])
        assert excinfo.value.describe().startswith("insert record: UNIQUE constraint failed")

        with db_service.transaction():
            assert db_service.execute("SELECT * FROM t") == []

    def test_unknown_table_is_storage_error(self, db_service):
        with pytest.raises(StorageError, match="execute statement: no such table"):
            with db_service.transaction():
                db_service.execute("SELECT * FROM missing")

    def test_concurrent_transactions(self, db_service):
        db_service.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, val INTEGER)")
        errors = []

        def worker(n):
            try:
                with db_service.transaction():
                    db_service.execute("INSERT INTO t (id, val) VALUES (?, ?)", (n, n * 10))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        with db_service.transaction():
            rows = db_service.execute("SELECT * FROM t ORDER BY id")
        assert len(rows) == 4


class TestCreateService:
    def test_sqlite_url(self, tmp_path):
        service = create_service(f"sqlite:///{tmp_path / 'x.db'}")
        assert isinstance(service, SQLiteDatabaseService)
        assert service.dialect == "sqlite"

    def test_postgres_urls(self):
        for url in ("postgresql://u:p@localhost:5432/db", "postgres://u:p@localhost/db"):
            service = create_service(url)
            assert isinstance(service, PostgresDatabaseService)
            assert service.dialect == "postgresql"

    def test_unsupported_scheme(self):
        with pytest.raises(ValueError, match="Unsupported database URL scheme"):
            create_service("mysql://localhost/db")
