"""Schema package for EasyDB."""

from easydb.schema.builder import SchemaBuilder
from easydb.schema.inspector import SchemaInspector, validate_name

__all__ = ["SchemaBuilder", "SchemaInspector", "validate_name"]
