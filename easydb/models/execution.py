"""
Execution log models for EasyDB.

Every statement run by the query executor produces one ExecutionLogEntry,
whether it succeeded or not.
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from easydb.models.base import BaseModel


class ExecutionLogEntry(BaseModel):
    """
    Record of a single statement execution.

    Entries are immutable once created. ``sql`` holds the statement with
    parameters substituted as literals and is meant for reading only.
    """

    model_config = ConfigDict(frozen=True)

    schema_name: str = Field(..., description="Database the statement ran against")
    executed_at: datetime = Field(default_factory=datetime.now, description="Execution time")
    sql: str = Field(..., description="Statement with parameters rendered as literals")
    last_id: int | str | None = Field(default=None, description="Last inserted id (INSERT/REPLACE)")
    rows_affected: int = Field(default=0, description="Rows affected by the statement")
    error: bool = Field(default=False, description="Did the execution fail")
    error_message: str = Field(default="", description="Driver error message")
    original_sql: str = Field(..., description="Statement as given by the caller")
    original_params: dict[str, Any] = Field(default_factory=dict, description="Parameters as given")
