"""
Query executor for EasyDB.

Runs SQL against a ConnectionHandle with driver-level parameter binding and
keeps an append-only log of every execution.

The statement kind is decided by its first keyword only:
- ``SELECT`` / ``SHOW``: returns the rows as a list of dicts
- ``INSERT`` / ``REPLACE``: also records the last generated id
- anything else: returns True

Statements starting with a comment or a ``WITH`` clause are therefore
treated as non-queries.

Statements without parameters go to the driver as written. With
parameters, ``:name`` inside a quoted literal is not a placeholder.
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from easydb.connection import ConnectionHandle
from easydb.exceptions import ConfigurationError
from easydb.executor.binder import ParameterBinder, escape_literal_colons
from easydb.models.execution import ExecutionLogEntry
from easydb.utils.logger import get_logger

logger = get_logger(__name__)

_QUERY_PATTERN = re.compile(r"^\s*(select|show)", re.IGNORECASE)
_INSERT_PATTERN = re.compile(r"^\s*(insert|replace)", re.IGNORECASE)

Row = dict[str, Any]
ExecResult = list[Row] | bool


def is_query(sql: str) -> bool:
    """Does the statement return rows (SELECT/SHOW)?"""
    return bool(_QUERY_PATTERN.match(sql))


def is_insert(sql: str) -> bool:
    """Does the statement generate ids (INSERT/REPLACE)?"""
    return bool(_INSERT_PATTERN.match(sql))


class QueryExecutor:
    """
    Executes statements on the current connection and logs each call.

    The executor owns its current connection and its log; nothing is shared
    between executor instances. It is not thread-safe.

    Usage:
        executor = QueryExecutor(ConnectionHandle("shop"))
        rows = executor.exec("SELECT * FROM product WHERE id = :id", {"id": 25})
    """

    def __init__(
        self,
        connection: ConnectionHandle | None = None,
        binder: ParameterBinder | None = None,
    ):
        self._connection = connection
        self._binder = binder or ParameterBinder()
        self._log: list[ExecutionLogEntry] = []

    @property
    def connection(self) -> ConnectionHandle | None:
        return self._connection

    def set_connection(self, connection: ConnectionHandle) -> None:
        """Switch the connection used by subsequent calls."""
        self._connection = connection
        logger.debug(f"Executor connection set to {connection.schema_name}")

    def exec(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
        connection: ConnectionHandle | None = None,
    ) -> ExecResult:
        """
        Execute a statement.

        Args:
            sql: SQL with ``:name`` placeholders
            params: Placeholder values; a trailing ``*`` on a name keeps HTML
            connection: Replaces the current connection before executing

        Returns:
            False on failure, the rows for SELECT/SHOW, True otherwise

        Raises:
            ConfigurationError: If no connection was ever configured
        """
        if connection is not None:
            self.set_connection(connection)

        if self._connection is None:
            logger.error("Statement executed before any connection was configured")
            raise ConfigurationError("No connection configured. Connect first.")

        params = dict(params or {})
        error: str | None = None
        last_id = None
        rows_affected = 0
        rows: list[Row] = []

        try:
            session = self._connection.connection
            if params:
                statement = text(escape_literal_colons(sql)).bindparams(
                    *self._binder.bind(params)
                )
                result = session.execute(statement)
            else:
                # Sent as written; colons and percent signs stay literal
                result = session.exec_driver_sql(
                    sql, execution_options={"no_parameters": True}
                )

            rows_affected = result.rowcount

            if is_insert(sql):
                last_id = result.lastrowid

            if is_query(sql):
                rows = [dict(row) for row in result.mappings().all()]

        except SQLAlchemyError as e:
            orig = getattr(e, "orig", None)
            error = str(orig) if orig is not None else str(e)

        entry = self._make_log(sql, params, last_id, rows_affected, error)

        if error is not None:
            logger.warning(f"Statement failed on {entry.schema_name}: {error} | {entry.sql}")
            return False

        logger.debug(f"Executed on {entry.schema_name} ({rows_affected} rows): {entry.sql}")

        if is_query(sql):
            return rows

        return True

    def get_log(self, last_only: bool = False) -> list[ExecutionLogEntry] | ExecutionLogEntry | None:
        """
        Get the executed statements.

        Args:
            last_only: Return only the most recent entry (None when empty)

        Returns:
            A copy of the log, or its last entry
        """
        if last_only:
            return self._log[-1] if self._log else None
        return list(self._log)

    @property
    def last_error(self) -> str:
        """Error message of the most recent execution."""
        return self._log[-1].error_message if self._log else ""

    def clear_log(self) -> None:
        """Drop all log entries."""
        self._log.clear()

    def _make_log(
        self,
        sql: str,
        params: dict[str, Any],
        last_id: Any,
        rows_affected: int,
        error: str | None,
    ) -> ExecutionLogEntry:
        entry = ExecutionLogEntry(
            schema_name=self._connection.schema_name,
            sql=self._binder.render(sql, params),
            last_id=last_id,
            rows_affected=rows_affected if rows_affected is not None else 0,
            error=error is not None,
            error_message=error or "",
            original_sql=sql,
            original_params=params,
        )
        self._log.append(entry)
        return entry
