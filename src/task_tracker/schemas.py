from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new Task.

    `title` is optional at the schema level so that a missing or blank title is
    answered with the gateway's own 400 "title required" instead of a generic
    validation error.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy groceries"}}
    )

    title: Optional[str] = Field(default=None, description="Short title for the task")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace; blank titles collapse to None."""
        if v is None:
            return None
        s = v.strip()
        return s or None


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating a Task. Only the completion flag can change.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"completed": True}}
    )

    completed: StrictBool = Field(..., description="New completion status")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b6f1c1e-8a0e-4c55-9d0b-2b7f3f0f1a2c",
                "title": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456+00:00",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        # Remote stores may hand back integer keys.
        return str(v)


class ErrorOut(BaseModel):
    error: str = Field(..., description="Human readable error message")


class DeleteAck(BaseModel):
    success: bool = Field(True, description="Always true on a successful delete")
