"""
EasyDB - MySQL data-access layer

Managed connections, a parameterized query executor with an execution
log, and a table builder that emits CREATE TABLE statements.
"""

__version__ = "0.1.0"
__author__ = "EasyDB Team"

from easydb.config import Settings, get_settings
from easydb.connection import ConnectionHandle
from easydb.exceptions import ConfigurationError, DatabaseConnectionError, EasyDBError
from easydb.executor import ParameterBinder, QueryExecutor
from easydb.models import Collation, Engine, ExecutionLogEntry, FieldType, FkAction
from easydb.schema import SchemaBuilder

__all__ = [
    "Settings",
    "get_settings",
    "ConnectionHandle",
    "ConfigurationError",
    "DatabaseConnectionError",
    "EasyDBError",
    "ParameterBinder",
    "QueryExecutor",
    "Collation",
    "Engine",
    "ExecutionLogEntry",
    "FieldType",
    "FkAction",
    "SchemaBuilder",
    "__version__",
]
