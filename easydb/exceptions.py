"""
Exception types for EasyDB.

Only configuration and connection failures are raised. Validation and
execution failures are reported as return values by the executor and the
schema builder.
"""


class EasyDBError(Exception):
    """Base class for all EasyDB errors."""


class ConfigurationError(EasyDBError):
    """Raised when a statement is executed before any connection was configured."""


class DatabaseConnectionError(EasyDBError, ConnectionError):
    """Raised when a database session cannot be opened or is no longer usable."""

    def __init__(self, message: str, database: str | None = None):
        self.database = database
        super().__init__(message)
