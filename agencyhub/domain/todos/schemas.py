"""Todo domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import TODO_STATUSES
from ...shared.validators import validate_required_text
from ...utils.time_conversion import UtcDateTime


def _check_status(v):
    if v is not None and v not in TODO_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(TODO_STATUSES)}")
    return v


class TodoCreate(BaseModel):
    text: str
    dueDate: Optional[datetime] = None
    status: str = "todo"

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        return validate_required_text(v, "text")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class TodoUpdate(BaseModel):
    """Partial update; only the fields sent are applied"""

    text: Optional[str] = None
    dueDate: Optional[datetime] = None
    status: Optional[str] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return v
        return validate_required_text(v, "text")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class TodoResponse(BaseModel):
    id: int
    userId: int
    text: str
    dueDate: UtcDateTime
    status: str
    createdAt: UtcDateTime
    updatedAt: UtcDateTime

    class Config:
        from_attributes = True
