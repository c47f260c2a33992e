"""Calendar router - FastAPI endpoints for calendar events"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from .schemas import CalendarEventInput, CalendarEventResponse, DaySummaryResponse
from .service import CalendarService, localize_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar", tags=["Calendar"])


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    """Dependency injection for CalendarService"""
    return CalendarService(db)


@router.get("/events", response_model=list[CalendarEventResponse])
async def get_events(
    startDate: str = Query(...),
    endDate: str = Query(...),
    timeZone: str = Query(...),
    clientId: Optional[int] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service),
):
    """Events for a local date range, optionally on a represented client's calendar"""
    return service.get_calendar(current_user.id, startDate, endDate, timeZone, clientId)


@router.get("/days", response_model=list[DaySummaryResponse])
async def get_day_summaries(
    startDate: str = Query(...),
    endDate: str = Query(...),
    timeZone: str = Query(...),
    clientId: Optional[int] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service),
):
    """Per-day classification of the range (regular, multi-day, priority order)"""
    return service.get_day_summaries(current_user.id, startDate, endDate, timeZone, clientId)


@router.put("/events", response_model=CalendarEventResponse)
async def create_event(
    data: CalendarEventInput,
    current_user: CurrentUser = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service),
):
    """Create an event on the requester's own calendar"""
    event = service.create_event(
        data.title,
        data.description,
        data.date,
        data.time,
        data.endDate,
        data.endTime,
        data.timeZone,
        created_by=current_user.id,
        owner_id=current_user.id,
        visibility=data.visibility,
        event_type=data.type,
        location=data.location,
        is_multi_day=data.isMultiDay,
    )
    return localize_event(event, data.timeZone)


@router.patch("/events/{event_id}", response_model=CalendarEventResponse)
async def update_event(
    event_id: int,
    data: CalendarEventInput,
    current_user: CurrentUser = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service),
):
    event = service.update_event(
        event_id,
        data.title,
        data.description,
        data.date,
        data.time,
        data.endDate,
        data.endTime,
        data.timeZone,
        updated_by=current_user.id,
        visibility=data.visibility,
        event_type=data.type,
        location=data.location,
        is_multi_day=data.isMultiDay,
    )
    return localize_event(event, data.timeZone)


@router.delete("/events/{event_id}", status_code=204)
async def delete_event(
    event_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: CalendarService = Depends(get_calendar_service),
):
    service.delete_event(event_id, requester_id=current_user.id)
    return Response(status_code=204)
