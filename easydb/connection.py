"""
MySQL connection handle for EasyDB.

Owns one live database session together with the name of the schema it is
connected to. The session is opened eagerly with a UTF-8 character set and
autocommit, and lives until the handle is closed.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from easydb.config import DatabaseConfig
from easydb.exceptions import DatabaseConnectionError
from easydb.utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionHandle:
    """
    A single persistent session against one MySQL database.

    Construction either yields an open session or raises
    DatabaseConnectionError. There is no pooling and no reconnection.

    Usage:
        with ConnectionHandle("shop", host="db", user="app", password="...") as conn:
            executor = QueryExecutor(conn)
    """

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        user: str = "root",
        password: str = "",
        port: int = 3306,
        charset: str = "utf8mb4",
    ):
        """
        Open the session.

        Args:
            database: Database (schema) name
            host: Server host
            user: User name
            password: Password
            port: Server port
            charset: Session character set

        Raises:
            DatabaseConnectionError: If the session cannot be opened
        """
        self._config = DatabaseConfig(
            database=database,
            host=host,
            port=port,
            user=user,
            password=password,
            charset=charset,
        )
        self._schema_name = database
        self._engine = None
        self._connection: Connection | None = None

        try:
            self._engine = create_engine(self._config.get_url(), isolation_level="AUTOCOMMIT")
            self._connection = self._engine.connect()
            logger.info(f"Connected to MySQL: {host}:{port}/{database}")
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to MySQL {host}:{port}/{database}: {e}")
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            raise DatabaseConnectionError(f"MySQL connection failed: {e}", database) from e

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "ConnectionHandle":
        """Open a handle from a DatabaseConfig."""
        return cls(
            database=config.database,
            host=config.host,
            user=config.user,
            password=config.password,
            port=config.port,
            charset=config.charset,
        )

    @property
    def schema_name(self) -> str:
        """Name of the connected database."""
        return self._schema_name

    @property
    def connection(self) -> Connection:
        """
        The live session used to execute statements.

        Raises:
            DatabaseConnectionError: If the handle was closed
        """
        if self._connection is None:
            logger.error(f"Connection to {self._schema_name} used after close")
            raise DatabaseConnectionError(
                f"Connection to '{self._schema_name}' is closed", self._schema_name
            )
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def close(self) -> None:
        """Release the session."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug(f"MySQL connection to {self._schema_name} closed")

    def __enter__(self) -> "ConnectionHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"ConnectionHandle(schema={self._schema_name}, {state})"
