"""Calendar domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel


class VisibilitySchema(BaseModel):
    type: Literal["private", "selected_agents"] = "private"
    agentIds: list[int] = []


class VisibilityResponse(BaseModel):
    type: str
    agentIds: list[int] = []


class CalendarEventInput(BaseModel):
    """Full event body used for both create and update"""

    title: str
    description: str = ""
    date: str
    time: str
    endDate: str
    endTime: str
    timeZone: str
    type: str = "other"
    location: Optional[str] = None
    isMultiDay: bool = False
    visibility: VisibilitySchema = VisibilitySchema()


class CalendarEventResponse(BaseModel):
    """Stored UTC instants plus their projection into the requester's zone"""

    id: int
    title: str
    description: str
    startDateTime: str
    endDateTime: str
    isMultiDay: bool
    location: Optional[str] = None
    type: str
    createdBy: int
    updatedBy: Optional[int] = None
    ownerId: int
    visibility: VisibilityResponse
    status: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    date: str
    time: str
    endDate: str
    endTime: str
    timeZone: str


class DaySummaryResponse(BaseModel):
    date: str
    regularEvents: list[CalendarEventResponse]
    multiDayEvents: list[CalendarEventResponse]
    events: list[CalendarEventResponse]
    backgroundType: Optional[str] = None
