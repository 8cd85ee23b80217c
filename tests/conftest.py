"""
Shared fixtures for EasyDB tests.

FakeConnection stands in for a SQLAlchemy connection to MySQL. It keeps a
small in-memory catalog so existence checks, CREATE TABLE and DROP TABLE
behave like a real server.
"""

from __future__ import annotations

import itertools
import re
from typing import Any

import pytest
from sqlalchemy.exc import OperationalError

from easydb import connection as connection_module
from easydb.connection import ConnectionHandle
from easydb.executor.query import QueryExecutor


class FakeMappings:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)


class FakeResult:
    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        rowcount: int = 0,
        lastrowid: int | None = None,
    ):
        self.rows = rows or []
        self.rowcount = rowcount
        self.lastrowid = lastrowid

    def mappings(self) -> FakeMappings:
        return FakeMappings(self.rows)


class FakeConnection:
    """Records executed statements and answers them from an in-memory catalog."""

    def __init__(self, tables: dict[str, list[str]] | None = None):
        self.tables: dict[str, list[str]] = dict(tables or {})
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.driver_statements: list[str] = []
        self.closed = False
        self._responses: list[tuple[re.Pattern, Any]] = []
        self._ids = itertools.count(1)

    def respond(
        self,
        pattern: str,
        rows: list[dict[str, Any]] | None = None,
        rowcount: int = 0,
        lastrowid: int | None = None,
        error: str | None = None,
    ) -> None:
        """Answer statements matching ``pattern`` with a canned result or error."""
        response = error if error is not None else FakeResult(rows, rowcount, lastrowid)
        self._responses.append((re.compile(pattern, re.IGNORECASE | re.DOTALL), response))

    def execute(self, statement) -> FakeResult:
        return self._run(statement.text, statement.compile().params)

    def exec_driver_sql(
        self,
        statement: str,
        parameters: dict[str, Any] | None = None,
        execution_options: dict[str, Any] | None = None,
    ) -> FakeResult:
        self.driver_statements.append(statement)
        return self._run(statement, dict(parameters or {}))

    def _run(self, sql: str, params: dict[str, Any]) -> FakeResult:
        self.executed.append((sql, params))

        for pattern, response in reversed(self._responses):
            if pattern.search(sql):
                if isinstance(response, str):
                    raise OperationalError(sql, params, Exception(response))
                return response

        return self._catalog(sql, params)

    def close(self) -> None:
        self.closed = True

    @property
    def statements(self) -> list[str]:
        return [sql for sql, _ in self.executed]

    def _catalog(self, sql: str, params: dict[str, Any]) -> FakeResult:
        stripped = sql.strip()
        upper = stripped.upper()

        if "INFORMATION_SCHEMA.TABLES" in upper:
            count = 1 if params.get("table_name") in self.tables else 0
            return FakeResult([{"table": count}], rowcount=1)

        if upper.startswith("SHOW COLUMNS FROM"):
            table = re.search(r"FROM `([^`]+)`", stripped).group(1)
            if table not in self.tables:
                raise OperationalError(
                    sql, params, Exception(f"Table 'test_db.{table}' doesn't exist")
                )
            field = params.get("field")
            rows = [{"Field": field, "Type": "int"}] if field in self.tables[table] else []
            return FakeResult(rows, rowcount=len(rows))

        if upper.startswith("CREATE TABLE"):
            table = re.search(r"CREATE TABLE `([^`]+)`", stripped).group(1)
            if table in self.tables:
                raise OperationalError(
                    sql, params, Exception(f"Table '{table}' already exists")
                )
            self.tables[table] = re.findall(r"(?:\(|, )\s*`([^`]+)` ", stripped)
            return FakeResult()

        if upper.startswith("DROP TABLE"):
            table = re.search(r"DROP TABLE `([^`]+)`", stripped).group(1)
            if table not in self.tables:
                raise OperationalError(sql, params, Exception(f"Unknown table '{table}'"))
            del self.tables[table]
            return FakeResult()

        if re.match(r"(INSERT|REPLACE)", upper):
            return FakeResult(rowcount=1, lastrowid=next(self._ids))

        return FakeResult()


class FakeEngine:
    def __init__(self, connection: FakeConnection | None = None, error: str | None = None):
        self.connection = connection
        self.error = error
        self.url = None
        self.options: dict[str, Any] = {}
        self.disposed = False

    def connect(self) -> FakeConnection:
        if self.error is not None:
            raise OperationalError("connect", None, Exception(self.error))
        return self.connection

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_engine(fake_connection: FakeConnection, monkeypatch) -> FakeEngine:
    engine = FakeEngine(fake_connection)

    def _create_engine(url, **kwargs):
        engine.url = url
        engine.options = kwargs
        return engine

    monkeypatch.setattr(connection_module, "create_engine", _create_engine)
    return engine


@pytest.fixture
def handle(fake_engine: FakeEngine) -> ConnectionHandle:
    return ConnectionHandle("test_db", host="db.local", user="app", password="secret")


@pytest.fixture
def executor(handle: ConnectionHandle) -> QueryExecutor:
    return QueryExecutor(handle)


@pytest.fixture
def make_handle(fake_engine: FakeEngine):
    """Open another handle backed by its own FakeConnection."""

    def _make(database: str = "other_db", tables: dict[str, list[str]] | None = None):
        fake_engine.connection = FakeConnection(tables)
        return ConnectionHandle(database), fake_engine.connection

    return _make
