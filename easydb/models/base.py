"""
Base model definitions for EasyDB.

Provides the common base class for all data models.
"""

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


class BaseModel(PydanticBaseModel):
    """Base model for all EasyDB models; assignments are validated."""

    model_config = ConfigDict(validate_assignment=True)
