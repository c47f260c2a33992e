"""
Calendar service - event persistence, visibility and range queries.

Events are stored as naive UTC instants. Every event handed back to a
caller is projected into the caller's IANA zone by ``localize_event`` so
the local ``date``/``time`` strings always come from the zone rules, never
from a stored offset.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...config import CALENDAR_MAX_SUMMARY_DAYS
from ...errors import ForbiddenError, InvalidInputError, NotFoundError
from ...models import CALENDAR_EVENT_TYPES, CalendarEvent
from ...utils.time_conversion import (
    DAY_END,
    DAY_START,
    from_instant,
    isoformat_utc,
    localize,
    parse_local_date,
    resolve_timezone,
    to_instant,
    to_storage,
    utcnow,
)
from ..representations.repository import RepresentationRepository
from .classification import summarize_days
from .repository import CalendarRepository
from .schemas import VisibilitySchema

logger = logging.getLogger(__name__)

# Wall-clock boundaries applied to multi-day events
MULTI_DAY_START_TIME = "00:00"
MULTI_DAY_END_TIME = "23:59"


def is_visible_to(event: CalendarEvent, requester_id: int, owner_id: int) -> bool:
    """Whether ``requester_id`` may see ``event`` on ``owner_id``'s calendar"""
    visibility = event.visibility_type
    agent_ids = event.visibility_agent_ids or []

    if requester_id == owner_id:
        return (
            event.owner_id == requester_id
            or visibility == "public"
            or (visibility == "private" and event.created_by == requester_id)
            or (visibility == "selected_agents" and requester_id in agent_ids)
        )

    # Private events are never shown to anyone but the owner
    return visibility == "public" or (visibility == "selected_agents" and requester_id in agent_ids)


def localize_event(event: CalendarEvent, time_zone: str) -> dict:
    """Project an event into ``time_zone`` alongside its UTC instants"""
    start = from_instant(event.start_datetime, time_zone)
    end = from_instant(event.end_datetime, time_zone)
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description or "",
        "startDateTime": isoformat_utc(event.start_datetime),
        "endDateTime": isoformat_utc(event.end_datetime),
        "isMultiDay": bool(event.is_multi_day),
        "location": event.location,
        "type": event.type,
        "createdBy": event.created_by,
        "updatedBy": event.updated_by,
        "ownerId": event.owner_id,
        "visibility": {
            "type": event.visibility_type,
            "agentIds": list(event.visibility_agent_ids or []),
        },
        "status": event.status,
        "createdAt": isoformat_utc(event.created_at),
        "updatedAt": isoformat_utc(event.updated_at),
        "date": start.date,
        "time": start.time,
        "endDate": end.date,
        "endTime": end.time,
        "timeZone": time_zone,
    }


class CalendarService:
    """Service layer for calendar business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CalendarRepository()

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_instants(
        local_date: str,
        local_time: str,
        local_end_date: str,
        local_end_time: str,
        time_zone: str,
        is_multi_day: bool,
    ) -> tuple[datetime, datetime]:
        if is_multi_day:
            local_time = MULTI_DAY_START_TIME
            local_end_time = MULTI_DAY_END_TIME

        start = to_instant(local_date, local_time, time_zone)
        end = to_instant(local_end_date, local_end_time, time_zone)
        if end < start:
            raise InvalidInputError("Event end must not be before its start")
        return to_storage(start), to_storage(end)

    @staticmethod
    def _validate_fields(title: str, event_type: str, visibility: VisibilitySchema) -> None:
        if not title or not title.strip():
            raise InvalidInputError("title is required")
        if event_type not in CALENDAR_EVENT_TYPES:
            raise InvalidInputError(f"Unknown event type: {event_type}")
        if visibility.type == "selected_agents" and not visibility.agentIds:
            raise InvalidInputError("selected_agents visibility requires at least one agent")

    @staticmethod
    def _visibility_columns(visibility: VisibilitySchema) -> dict:
        if visibility.type == "selected_agents":
            return {
                "visibility_type": "selected_agents",
                "visibility_agent_ids": list(dict.fromkeys(visibility.agentIds)),
            }
        return {"visibility_type": "private", "visibility_agent_ids": None}

    def _get_active_event(self, event_id: int) -> CalendarEvent:
        event = self.repo.get_active_event(self.db, event_id)
        if not event:
            raise NotFoundError(f"Calendar event {event_id} not found")
        return event

    def _get_owned_event(self, event_id: int, requester_id: Optional[int]) -> CalendarEvent:
        event = self._get_active_event(event_id)
        if requester_id is not None and event.owner_id != requester_id:
            logger.warning(f"⚠️ User {requester_id} attempted to modify event {event_id}")
            raise ForbiddenError("You can only modify events on your own calendar")
        return event

    def assert_can_view(self, requester_id: int, owner_id: int) -> None:
        """Non-owners need an active representation of the calendar's owner"""
        if requester_id == owner_id:
            return
        if not RepresentationRepository.has_active_representation(self.db, requester_id, owner_id):
            logger.warning(f"⚠️ User {requester_id} does not represent client {owner_id}")
            raise ForbiddenError("You do not represent this client")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_event(
        self,
        title: str,
        description: str,
        local_date: str,
        local_time: str,
        local_end_date: str,
        local_end_time: str,
        time_zone: str,
        created_by: int,
        owner_id: int,
        visibility: VisibilitySchema,
        event_type: str = "other",
        location: Optional[str] = None,
        is_multi_day: bool = False,
    ) -> CalendarEvent:
        self._validate_fields(title, event_type, visibility)
        start, end = self._resolve_instants(
            local_date, local_time, local_end_date, local_end_time, time_zone, is_multi_day
        )
        now = utcnow()
        event = self.repo.create_event(
            self.db,
            title=title,
            description=description or "",
            start_datetime=start,
            end_datetime=end,
            is_multi_day=is_multi_day,
            location=location,
            type=event_type,
            created_by=created_by,
            owner_id=owner_id,
            status="active",
            created_at=now,
            updated_at=now,
            **self._visibility_columns(visibility),
        )
        logger.info(f"📅 Calendar event {event.id} created for owner {owner_id}")
        return event

    def update_event(
        self,
        event_id: int,
        title: str,
        description: str,
        local_date: str,
        local_time: str,
        local_end_date: str,
        local_end_time: str,
        time_zone: str,
        updated_by: int,
        visibility: VisibilitySchema,
        event_type: str = "other",
        location: Optional[str] = None,
        is_multi_day: bool = False,
    ) -> CalendarEvent:
        """Replace the editable fields of an event; no audit trail is kept"""
        event = self._get_owned_event(event_id, updated_by)
        self._validate_fields(title, event_type, visibility)
        start, end = self._resolve_instants(
            local_date, local_time, local_end_date, local_end_time, time_zone, is_multi_day
        )
        event = self.repo.update_event(
            self.db,
            event,
            title=title,
            description=description or "",
            start_datetime=start,
            end_datetime=end,
            is_multi_day=is_multi_day,
            location=location,
            type=event_type,
            updated_by=updated_by,
            updated_at=utcnow(),
            **self._visibility_columns(visibility),
        )
        logger.info(f"📅 Calendar event {event_id} updated by {updated_by}")
        return event

    def delete_event(self, event_id: int, requester_id: Optional[int] = None) -> CalendarEvent:
        """Soft delete: the row stays for audit but disappears from every query"""
        event = self._get_owned_event(event_id, requester_id)
        event = self.repo.update_event(
            self.db, event, status="deleted", updated_by=requester_id, updated_at=utcnow()
        )
        logger.info(f"🗑️ Calendar event {event_id} deleted")
        return event

    def hard_delete_event(self, event_id: int, requester_id: Optional[int] = None) -> None:
        """Physically remove an event"""
        event = self._get_owned_event(event_id, requester_id)
        self.repo.delete_event(self.db, event)
        logger.info(f"🗑️ Calendar event {event_id} permanently removed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_events_for_calendar(
        self,
        requester_id: int,
        owner_id: int,
        start_date: str,
        end_date: str,
        time_zone: str,
    ) -> list[dict]:
        """
        Events on ``owner_id``'s calendar visible to ``requester_id`` for the
        local dates ``start_date``..``end_date`` inclusive, localized to
        ``time_zone``.
        """
        resolve_timezone(time_zone)
        first_day = parse_local_date(start_date)
        last_day = parse_local_date(end_date)
        if last_day < first_day:
            raise InvalidInputError("endDate must not be before startDate")

        window_start = to_storage(localize(first_day, DAY_START, time_zone))
        window_end = to_storage(localize(last_day, DAY_END, time_zone))

        events = self.repo.get_events_in_window(self.db, owner_id, window_start, window_end)
        visible = [e for e in events if is_visible_to(e, requester_id, owner_id)]
        logger.debug(
            f"🔍 {len(visible)}/{len(events)} events visible to {requester_id} "
            f"on {owner_id}'s calendar {start_date}..{end_date}"
        )
        return [localize_event(e, time_zone) for e in visible]

    def get_calendar(
        self,
        requester_id: int,
        start_date: str,
        end_date: str,
        time_zone: str,
        client_id: Optional[int] = None,
    ) -> list[dict]:
        """Requester's own calendar, or a represented client's when ``client_id`` is given"""
        owner_id = client_id if client_id is not None else requester_id
        self.assert_can_view(requester_id, owner_id)
        return self.get_events_for_calendar(requester_id, owner_id, start_date, end_date, time_zone)

    def get_day_summaries(
        self,
        requester_id: int,
        start_date: str,
        end_date: str,
        time_zone: str,
        client_id: Optional[int] = None,
    ) -> list[dict]:
        """Per-day view of the range; spans longer than CALENDAR_MAX_SUMMARY_DAYS are rejected"""
        first_day = parse_local_date(start_date)
        last_day = parse_local_date(end_date)
        span = (last_day - first_day).days + 1
        if span > CALENDAR_MAX_SUMMARY_DAYS:
            raise InvalidInputError(
                f"Day summaries cover at most {CALENDAR_MAX_SUMMARY_DAYS} days, got {span}"
            )

        events = self.get_calendar(requester_id, start_date, end_date, time_zone, client_id)
        return summarize_days(events, first_day, last_day)
