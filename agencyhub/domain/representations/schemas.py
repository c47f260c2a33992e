"""Representation domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...models import REPRESENTATION_STATUSES
from ...shared.validators import validate_required_text
from ...utils.time_conversion import UtcDateTime

MANUAL_EVENT_TYPES = ("meeting", "call", "email", "submission", "audition", "other")


class TermsSchema(BaseModel):
    """Commercial terms of a representation"""

    commission: float
    exclusivity: bool = False
    territories: list[str] = []
    mediaTypes: list[str] = []


class RepresentationUpdate(BaseModel):
    """
    Partial update of a representation.

    Only the fields present in the request body are compared; an explicit
    null is treated the same as an absent value.
    """

    status: Optional[str] = None
    nextKeyDate: Optional[datetime] = None
    notes: Optional[str] = None
    terms: Optional[TermsSchema] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in REPRESENTATION_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(REPRESENTATION_STATUSES)}")
        return v


class ActivityCreate(BaseModel):
    """Manual activity logged against a representation"""

    type: str = "other"
    title: str
    description: str = ""
    date: Optional[datetime] = None
    location: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_required_text(v, "title")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v not in MANUAL_EVENT_TYPES:
            raise ValueError(f"type must be one of: {', '.join(MANUAL_EVENT_TYPES)}")
        return v


class ClientSummary(BaseModel):
    id: int
    username: str
    firstName: str
    lastName: str
    name: str
    avatarUrl: Optional[str] = None
    profile: Optional[dict[str, Any]] = None


class RepresentationResponse(BaseModel):
    """Schema for representation response"""

    id: int
    agentId: int
    clientId: int
    status: str
    startDate: UtcDateTime
    endDate: Optional[UtcDateTime] = None
    nextKeyDate: Optional[UtcDateTime] = None
    notes: Optional[str] = None
    terms: Optional[TermsSchema] = None
    createdAt: UtcDateTime
    updatedAt: UtcDateTime

    class Config:
        from_attributes = True


class RosterEntryResponse(RepresentationResponse):
    """Representation joined with its client identity"""

    client: ClientSummary


class ChangeEntry(BaseModel):
    field: str
    oldValue: Any = None
    newValue: Any = None


class RepresentationEventResponse(BaseModel):
    id: int
    representationId: int
    type: str
    title: str
    description: str
    date: UtcDateTime
    location: Optional[str] = None
    changes: Optional[list[ChangeEntry]] = None
    createdBy: int
    createdAt: UtcDateTime

    class Config:
        from_attributes = True


class ConnectionResponse(BaseModel):
    """Counterpart identity of an active representation"""

    id: int
    name: str
