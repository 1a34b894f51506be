"""Storage contract shared by the SQLite and PostgreSQL backends."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

Row = dict[str, Any]
Params = tuple | list | dict
ParamsList = list[tuple] | list[list]


class DatabaseService(ABC):
    """What the price pipelines need from a relational store.

    Every statement runs inside transaction(), which checks a pooled
    connection out for the calling thread, commits when the block exits
    cleanly and rolls back otherwise. Backends report driver and pool
    failures as pricedb.exceptions.StorageError.
    """

    #: Picks the prices DDL ("sqlite" or "postgresql").
    dialect: str = ""

    @abstractmethod
    def connect(self) -> None:
        """Open the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close pooled connections."""

    @abstractmethod
    def execute(self, sql: str, params: Params | None = None) -> list[Row]:
        """Run one statement in the current transaction; rows come back as dicts."""

    @abstractmethod
    def execute_many(self, sql: str, params_list: ParamsList) -> None:
        """Run one statement once per parameter set."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Bind a pooled connection to this thread for the block; commit or roll back."""

    @abstractmethod
    def execute_ddl(self, sql: str) -> None:
        """Run schema statements in their own transaction."""

    @abstractmethod
    def batch_insert(self, table: str, columns: list[str], rows: list[tuple]) -> None:
        """Insert rows into table, values given in columns order."""

    def query_one(self, sql: str, params: Params | None = None) -> Row | None:
        rows = self.execute(sql, params)
        return rows[0] if rows else None
