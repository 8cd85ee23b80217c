"""
Schema introspection for EasyDB.

Existence checks used by the schema builder. Queries go through the
QueryExecutor so they appear in its log like any other statement.
"""

import re

from easydb.executor.query import QueryExecutor
from easydb.utils.logger import get_logger

logger = get_logger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


def validate_name(name: str | None) -> bool:
    """
    Check a table or field name.

    Only letters, digits, underscores and hyphens are allowed and the name
    must start with a letter. Names are interpolated into DDL, so this is the
    only guard against injection there.
    """
    return bool(name) and bool(NAME_PATTERN.match(name))


class SchemaInspector:
    """Checks tables and fields of the executor's current database."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def table_exists(self, table_name: str) -> bool:
        """Is there a table with this name in the current database?"""
        if not validate_name(table_name):
            return False

        connection = self.executor.connection
        schema = connection.schema_name if connection is not None else ""
        rows = self.executor.exec(
            """
            SELECT
                COUNT(TABLE_NAME) AS `table`
            FROM
                INFORMATION_SCHEMA.TABLES
            WHERE
                TABLE_SCHEMA = :schema AND TABLE_NAME = :table_name
            """,
            {"schema": schema, "table_name": table_name},
        )
        if rows is False:
            logger.warning(f"Could not check table {table_name}: {self.executor.last_error}")
            return False

        return bool(rows) and int(rows[0]["table"]) == 1

    def field_exists(self, table_name: str, field_name: str) -> bool:
        """Does ``table_name`` have a column called ``field_name``?"""
        if not validate_name(table_name) or not validate_name(field_name):
            return False

        rows = self.executor.exec(
            f"SHOW COLUMNS FROM `{table_name}` WHERE Field = :field",
            {"field": field_name},
        )
        if not rows:
            return False

        return bool(rows[0].get("Field"))
