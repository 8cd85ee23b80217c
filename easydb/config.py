"""
Configuration management for EasyDB.

Loads configuration from environment variables with support for .env files.
Uses Pydantic Settings for validation and type coercion.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from easydb.exceptions import ConfigurationError


class DatabaseConfig:
    """Configuration for a single MySQL database."""

    def __init__(
        self,
        database: str,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: str = "",
        charset: str = "utf8mb4",
    ):
        self.database = database
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.charset = charset

    def get_url(self) -> URL:
        """Build the SQLAlchemy URL for the PyMySQL driver."""
        return URL.create(
            "mysql+pymysql",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"charset": self.charset},
        )

    def get_connection_string(self, hide_password: bool = True) -> str:
        """Render the connection URL as a string."""
        return self.get_url().render_as_string(hide_password=hide_password)

    def __repr__(self) -> str:
        return f"DatabaseConfig(database={self.database}, host={self.host}:{self.port})"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    (DB_NAME, DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection
    db_name: str = Field(default="", description="Database (schema) name")
    db_host: str = Field(default="localhost", description="Database host")
    db_port: int = Field(default=3306, description="Database port")
    db_user: str = Field(default="root", description="Database user")
    db_password: str = Field(default="", description="Database password")
    db_charset: str = Field(default="utf8mb4", description="Session character set")

    # Table creation defaults
    default_collation: str = Field(default="utf8_general_ci", description="Table collation")
    default_engine: str = Field(default="InnoDB", description="Table storage engine")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")

    @property
    def database(self) -> DatabaseConfig:
        """
        Get the configured database connection.

        Raises:
            ConfigurationError: If DB_NAME is not set
        """
        if not self.db_name:
            raise ConfigurationError("No database configured. Set DB_NAME in the environment.")
        return DatabaseConfig(
            database=self.db_name,
            host=self.db_host,
            port=self.db_port,
            user=self.db_user,
            password=self.db_password,
            charset=self.db_charset,
        )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("default_engine")
    @classmethod
    def validate_engine(cls, v: str) -> str:
        """Normalize the storage engine name."""
        engines = {"innodb": "InnoDB", "myisam": "MyISAM"}
        if v.lower() not in engines:
            raise ValueError(f"default_engine must be one of {sorted(engines.values())}")
        return engines[v.lower()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from a specific .env file.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Settings: Application settings instance
    """
    get_settings.cache_clear()
    if env_file:
        return Settings(_env_file=env_file)
    return get_settings()
