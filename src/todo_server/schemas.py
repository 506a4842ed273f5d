from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TodoCreateRequest(BaseModel):
    """
    Body of PUT /todo.

    Only the description is read. A missing or null description creates a todo
    with an empty description; unknown keys are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"Description": "buy milk"}},
    )

    description: str = Field(
        default="",
        validation_alias=AliasChoices("Description", "description"),
        description="Free-text description of the todo item",
    )

    @field_validator("description", mode="before")
    @classmethod
    def null_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.

    Serialized with the capitalized keys existing clients already consume.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "ID": 1,
                "CreatedAt": "2025-01-25T10:15:30.123456Z",
                "UpdatedAt": "2025-01-25T10:15:30.123456Z",
                "DeletedAt": None,
                "Description": "buy milk",
                "Completed": False,
            }
        }
    )

    id: int = Field(..., alias="ID", description="Unique identifier of the todo item")
    created_at: datetime = Field(..., alias="CreatedAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="UpdatedAt", description="Last update timestamp")
    deleted_at: Optional[datetime] = Field(
        default=None, alias="DeletedAt", description="Soft-delete marker"
    )
    description: str = Field(..., alias="Description", description="Todo description")
    completed: bool = Field(..., alias="Completed", description="Completion status flag")


class HealthOut(BaseModel):
    alive: bool = True


class DeletedOut(BaseModel):
    deleted: bool = True
