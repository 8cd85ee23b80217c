"""
Table definition models for EasyDB.

Defines the state accumulated by the schema builder:
- Column types, collations, storage engines, foreign key actions
- Field, foreign key and table definitions
"""

from enum import Enum
from typing import Any

from pydantic import Field

from easydb.models.base import BaseModel


class FieldType(str, Enum):
    """MySQL column types."""

    # Integer
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    MEDIUMINT = "MEDIUMINT"
    INT = "INT"
    BIGINT = "BIGINT"
    BIT = "BIT"
    # Real
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    # Text
    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    TINYTEXT = "TINYTEXT"
    TEXT = "TEXT"
    MEDIUMTEXT = "MEDIUMTEXT"
    LONGTEXT = "LONGTEXT"
    # Binary
    BINARY = "BINARY"
    VARBINARY = "VARBINARY"
    TINYBLOB = "TINYBLOB"
    BLOB = "BLOB"
    MEDIUMBLOB = "MEDIUMBLOB"
    LONGBLOB = "LONGBLOB"
    # Temporal
    DATE = "DATE"
    TIME = "TIME"
    YEAR = "YEAR"
    DATETIME = "DATETIME"
    TIMESTAMP = "TIMESTAMP"
    # Spatial
    POINT = "POINT"
    LINESTRING = "LINESTRING"
    POLYGON = "POLYGON"
    GEOMETRY = "GEOMETRY"
    MULTIPOINT = "MULTIPOINT"
    MULTILINESTRING = "MULTILINESTRING"
    MULTIPOLYGON = "MULTIPOLYGON"
    GEOMETRYCOLLECTION = "GEOMETRYCOLLECTION"
    # Others
    ENUM = "ENUM"
    SET = "SET"


class Collation(str, Enum):
    """Table collations."""

    UTF8 = "utf8_general_ci"
    LATIN = "latin1_swedish_ci"


class Engine(str, Enum):
    """Table storage engines."""

    INNODB = "InnoDB"
    MYISAM = "MyISAM"


class FkAction(str, Enum):
    """Referential actions for ON DELETE / ON UPDATE."""

    RESTRICT = "RESTRICT"  # refuse the change
    CASCADE = "CASCADE"  # propagate to child rows
    SET_NULL = "SET NULL"  # null out child column
    NO_ACTION = "NO ACTION"


class FieldDefinition(BaseModel):
    """A single column: rendered type plus optional default."""

    type: str = Field(..., description="Column type with length suffix, e.g. DECIMAL(10,2)")
    default_value: Any = Field(default=None, description="Default value")

    @property
    def has_default(self) -> bool:
        """None, False, 0, "" and "0" count as no default."""
        value = self.default_value
        if value is None or isinstance(value, bool):
            return value is True
        if isinstance(value, (int, float)):
            return value != 0
        return str(value) not in ("", "0")


class ForeignKeyDefinition(BaseModel):
    """A foreign key from a local field to a field of another table."""

    field: str = Field(..., description="Local field name")
    referenced_table: str = Field(..., description="Referenced table name")
    referenced_field: str = Field(..., description="Referenced field name")
    on_delete: FkAction = Field(default=FkAction.RESTRICT, description="ON DELETE action")
    on_update: FkAction = Field(default=FkAction.RESTRICT, description="ON UPDATE action")


class TableDefinition(BaseModel):
    """
    Pending table definition.

    Key lists keep insertion order and never hold duplicates. Every key
    refers to a name present in ``fields``.
    """

    name: str = Field(default="", description="Table name")
    fields: dict[str, FieldDefinition] = Field(default_factory=dict, description="Ordered fields")
    primary_key: str | None = Field(default=None, description="Primary key field")
    auto_increment: bool = Field(default=True, description="Primary key auto-increments")
    index_keys: list[str] = Field(default_factory=list, description="Plain indexes")
    unique_keys: list[str] = Field(default_factory=list, description="Unique indexes")
    fulltext_keys: list[str] = Field(default_factory=list, description="Full-text indexes")
    foreign_keys: list[ForeignKeyDefinition] = Field(
        default_factory=list, description="Foreign keys in declaration order"
    )

    def has_field(self, name: str) -> bool:
        """Check whether a field was added."""
        return name in self.fields
