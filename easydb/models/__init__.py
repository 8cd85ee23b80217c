"""Models package for EasyDB."""

from easydb.models.base import BaseModel
from easydb.models.execution import ExecutionLogEntry
from easydb.models.schema import (
    Collation,
    Engine,
    FieldDefinition,
    FieldType,
    FkAction,
    ForeignKeyDefinition,
    TableDefinition,
)

__all__ = [
    "BaseModel",
    "ExecutionLogEntry",
    "Collation",
    "Engine",
    "FieldDefinition",
    "FieldType",
    "FkAction",
    "ForeignKeyDefinition",
    "TableDefinition",
]
