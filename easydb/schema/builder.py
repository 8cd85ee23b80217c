"""
Table builder for EasyDB.

Collects fields, keys and foreign keys for one table and creates it with a
single CREATE TABLE statement. Definition methods return True/False and
``create`` returns True or an error message; nothing is raised except
ConfigurationError, when no connection is set or the settings holding the
table defaults are invalid.

Usage:
    builder = SchemaBuilder(conn, "users")
    builder.add_field("id", FieldType.INT)
    builder.add_field("name", FieldType.VARCHAR, 100)
    builder.set_primary_key("id")
    result = builder.create()
    if result is not True:
        print(result)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import ValidationError

from easydb.config import get_settings
from easydb.connection import ConnectionHandle
from easydb.exceptions import ConfigurationError
from easydb.executor.query import QueryExecutor
from easydb.models.schema import (
    Collation,
    Engine,
    FieldDefinition,
    FieldType,
    FkAction,
    ForeignKeyDefinition,
    TableDefinition,
)
from easydb.schema.inspector import SchemaInspector, validate_name
from easydb.utils.logger import get_logger

logger = get_logger(__name__)

_LENGTH_PATTERN = re.compile(r"^[1-9][0-9,]*$")
_TYPE_PATTERN = re.compile(r"^[A-Za-z]+( [A-Za-z]+)*$")
_OPTION_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

_NAMING_RULES = (
    "Use only letters, numbers, hyphens and underscores, and start with a letter."
)


def _value(option: Any) -> str:
    return option.value if isinstance(option, Enum) else str(option)


def _quote_default(value: Any) -> str:
    if isinstance(value, bool):
        value = int(value)
    text = str(value).replace("\\", "\\\\").replace("'", "''")
    return f"'{text}'"


class SchemaBuilder:
    """
    Accumulates a table definition and creates it.

    Binding a connection also makes it the executor's current connection.
    Foreign keys are only emitted for InnoDB; with other engines they stay
    in ``definition`` but are left out of the statement.
    """

    def __init__(
        self,
        connection: ConnectionHandle | None = None,
        table_name: str = "",
        drop_if_exists: bool = False,
        executor: QueryExecutor | None = None,
    ):
        self.executor = executor or QueryExecutor()
        self.inspector = SchemaInspector(self.executor)
        self.definition = TableDefinition()

        if connection is not None:
            self.bind(connection, table_name, drop_if_exists)

    def bind(
        self,
        connection: ConnectionHandle,
        table_name: str = "",
        drop_if_exists: bool = False,
    ) -> None:
        """
        Set the connection and optionally the table name.

        Args:
            connection: Target database
            table_name: Table to create (ignored when not a valid name)
            drop_if_exists: Allow replacing an existing table
        """
        self.executor.set_connection(connection)

        if validate_name(table_name):
            self.set_table(table_name, drop_if_exists)

    def set_table(self, table_name: str, drop_if_exists: bool = False) -> bool:
        """
        Set the table to create.

        Fails when the name is invalid, or when the table already exists and
        dropping it was not allowed.
        """
        if not validate_name(table_name):
            return False

        if self.table_exists(table_name) and not drop_if_exists:
            logger.info(f"Table {table_name} already exists and may not be dropped")
            return False

        self.definition.name = table_name
        return True

    def add_field(
        self,
        field_name: str,
        field_type: FieldType | str = FieldType.INT,
        length: int | str | None = None,
        default_value: Any = None,
    ) -> bool:
        """
        Add a field, replacing any field with the same name.

        Args:
            field_name: Field name
            field_type: Column type (INT, VARCHAR, DECIMAL, ...)
            length: Length or precision, e.g. 100 or "10,2"
            default_value: Default value; None, False, 0, "" and "0" make the
                field NULL

        Returns:
            False if the name or type is invalid
        """
        if not validate_name(field_name):
            return False

        type_name = _value(field_type).upper()
        if not _TYPE_PATTERN.match(type_name):
            return False

        if length is not None and _LENGTH_PATTERN.match(str(length)):
            type_name = f"{type_name}({length})"

        self.definition.fields[field_name] = FieldDefinition(
            type=type_name, default_value=default_value
        )
        return True

    def set_primary_key(self, field_name: str, auto_increment: bool = True) -> bool:
        """Set the primary key. The last call wins."""
        if not self.definition.has_field(field_name):
            return False

        self.definition.primary_key = field_name
        self.definition.auto_increment = auto_increment
        return True

    def add_key(self, field_name: str) -> bool:
        """Add a plain index on an existing field."""
        return self._add_to(self.definition.index_keys, field_name)

    def add_unique_key(self, field_name: str) -> bool:
        """Add a unique index on an existing field."""
        return self._add_to(self.definition.unique_keys, field_name)

    def add_fulltext_key(self, field_name: str) -> bool:
        """Add a full-text index on an existing field."""
        return self._add_to(self.definition.fulltext_keys, field_name)

    def add_foreign_key(
        self,
        field_name: str,
        referenced_table: str,
        referenced_field: str,
        on_delete: FkAction | str = FkAction.RESTRICT,
        on_update: FkAction | str = FkAction.RESTRICT,
    ) -> bool:
        """
        Reference a field of an existing table.

        The referenced table and field are looked up in the database. The
        local field also gets a plain index.

        Returns:
            False if the local field is unknown, the referenced field does
            not exist, or an action is not supported
        """
        if not self.definition.has_field(field_name):
            return False

        try:
            on_delete = FkAction(_value(on_delete).upper())
            on_update = FkAction(_value(on_update).upper())
        except ValueError:
            return False

        if not self.inspector.field_exists(referenced_table, referenced_field):
            logger.info(f"Foreign key target {referenced_table}.{referenced_field} not found")
            return False

        self.add_key(field_name)
        self.definition.foreign_keys.append(
            ForeignKeyDefinition(
                field=field_name,
                referenced_table=referenced_table,
                referenced_field=referenced_field,
                on_delete=on_delete,
                on_update=on_update,
            )
        )
        return True

    def table_exists(self, table_name: str) -> bool:
        """Check the current database for a table."""
        return self.inspector.table_exists(table_name)

    def to_sql(
        self,
        collation: Collation | str | None = None,
        engine: Engine | str | None = None,
    ) -> str:
        """
        Build the CREATE TABLE statement for the current definition.

        Args:
            collation: Table collation (DEFAULT_COLLATION when omitted)
            engine: Storage engine (DEFAULT_ENGINE when omitted); foreign keys
                are dropped unless InnoDB

        Returns:
            The statement
        """
        table = self.definition
        collation, engine = self._options(collation, engine)

        columns = []
        for name, field in table.fields.items():
            column = f"`{name}` {field.type}"
            if name == table.primary_key:
                column += " NOT NULL"
                if table.auto_increment:
                    column += " AUTO_INCREMENT"
            elif field.has_default:
                column += f" NOT NULL DEFAULT {_quote_default(field.default_value)}"
            else:
                column += " NULL"
            columns.append(column)

        clauses = list(columns)

        if table.primary_key:
            clauses.append(f"PRIMARY KEY (`{table.primary_key}`)")

        clauses.extend(f"INDEX `{key}` (`{key}`)" for key in table.index_keys)
        clauses.extend(f"UNIQUE INDEX `{key}` (`{key}`)" for key in table.unique_keys)
        clauses.extend(f"FULLTEXT INDEX `{key}` (`{key}`)" for key in table.fulltext_keys)

        if table.foreign_keys:
            if engine.lower() == Engine.INNODB.value.lower():
                for index, fk in enumerate(table.foreign_keys):
                    clauses.append(
                        f"CONSTRAINT `FK_{table.name}_{index}` "
                        f"FOREIGN KEY (`{fk.field}`) "
                        f"REFERENCES `{fk.referenced_table}` (`{fk.referenced_field}`) "
                        f"ON UPDATE {fk.on_update.value} "
                        f"ON DELETE {fk.on_delete.value}"
                    )
            else:
                logger.warning(
                    f"Engine {engine} does not support foreign keys; "
                    f"{len(table.foreign_keys)} foreign key(s) on {table.name} left out"
                )

        return (
            f"CREATE TABLE `{table.name}` ( {', '.join(clauses)} ) "
            f"COLLATE = '{collation}' ENGINE = {engine}"
        )

    def create(
        self,
        collation: Collation | str | None = None,
        engine: Engine | str | None = None,
    ) -> bool | str:
        """
        Create the table, dropping an existing one when that was allowed.

        Args:
            collation: Table collation (DEFAULT_COLLATION when omitted)
            engine: Storage engine (DEFAULT_ENGINE when omitted)

        Returns:
            True on success, otherwise a message describing the failure
        """
        table_name = self.definition.name
        collation, engine = self._options(collation, engine)

        if not validate_name(table_name):
            return f"The name of the table to create is not set. {_NAMING_RULES}"

        if not self.definition.fields:
            return f"Add at least one field. {_NAMING_RULES}"

        if not _OPTION_PATTERN.match(collation) or not _OPTION_PATTERN.match(engine):
            return f"Invalid collation '{collation}' or engine '{engine}'."

        sql = self.to_sql(collation, engine)
        checks_disabled = False

        try:
            # Reaching here with an existing table means dropping was allowed
            if self.table_exists(table_name):
                self.executor.exec("SET FOREIGN_KEY_CHECKS=0")
                checks_disabled = True
                if not self.executor.exec(f"DROP TABLE `{table_name}`"):
                    message = (
                        f"Table {table_name} exists and could not be dropped. "
                        f"Error: {self.executor.last_error}"
                    )
                    logger.warning(message)
                    return message

            if not self.executor.exec(sql):
                message = f"Could not create table {table_name}. Error: {self.executor.last_error}"
                logger.warning(message)
                return message

        finally:
            if checks_disabled:
                self.executor.exec("SET FOREIGN_KEY_CHECKS=1")

        logger.info(f"Table {table_name} created")
        return True

    def _options(self, collation: Any, engine: Any) -> tuple[str, str]:
        if collation is not None and engine is not None:
            return _value(collation), _value(engine)

        try:
            settings = get_settings()
        except ValidationError as e:
            logger.error(f"Invalid table defaults in settings: {e}")
            raise ConfigurationError(f"Invalid settings: {e}") from e

        return (
            _value(collation) if collation is not None else settings.default_collation,
            _value(engine) if engine is not None else settings.default_engine,
        )

    def _add_to(self, keys: list[str], field_name: str) -> bool:
        if not self.definition.has_field(field_name):
            return False

        if field_name not in keys:
            keys.append(field_name)
        return True
