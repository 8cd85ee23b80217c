from __future__ import annotations

import pytest

from easydb.config import DatabaseConfig
from easydb.connection import ConnectionHandle
from easydb.exceptions import DatabaseConnectionError


def test_opens_utf8_autocommit_session(handle, fake_engine, fake_connection) -> None:
    assert handle.schema_name == "test_db"
    assert handle.is_open
    assert handle.connection is fake_connection

    url = fake_engine.url
    assert url.drivername == "mysql+pymysql"
    assert url.host == "db.local"
    assert url.username == "app"
    assert url.database == "test_db"
    assert url.query["charset"] == "utf8mb4"
    assert fake_engine.options["isolation_level"] == "AUTOCOMMIT"


def test_connect_failure_raises(fake_engine) -> None:
    fake_engine.error = "Access denied for user 'app'"

    with pytest.raises(DatabaseConnectionError) as exc_info:
        ConnectionHandle("test_db", user="app")

    assert "Access denied" in str(exc_info.value)
    assert exc_info.value.database == "test_db"
    assert isinstance(exc_info.value, ConnectionError)
    assert fake_engine.disposed


def test_close_releases_session(handle, fake_engine, fake_connection) -> None:
    handle.close()

    assert fake_connection.closed
    assert fake_engine.disposed
    assert not handle.is_open
    with pytest.raises(DatabaseConnectionError):
        handle.connection


def test_close_is_idempotent(handle) -> None:
    handle.close()
    handle.close()

    assert not handle.is_open


def test_context_manager_closes(fake_engine, fake_connection) -> None:
    with ConnectionHandle("test_db") as conn:
        assert conn.is_open

    assert fake_connection.closed


def test_from_config(fake_engine) -> None:
    config = DatabaseConfig(database="shop", host="h", port=3307, user="u", password="p")

    conn = ConnectionHandle.from_config(config)

    assert conn.schema_name == "shop"
    assert fake_engine.url.port == 3307
    assert fake_engine.url.password == "p"
