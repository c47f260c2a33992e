"""Calendar repository - Database operations for calendar events"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import CalendarEvent


class CalendarRepository:
    """Repository for calendar event database operations"""

    @staticmethod
    def get_active_event(db: Session, event_id: int) -> Optional[CalendarEvent]:
        return (
            db.query(CalendarEvent)
            .filter(CalendarEvent.id == event_id, CalendarEvent.status == "active")
            .first()
        )

    @staticmethod
    def get_events_in_window(
        db: Session, owner_id: int, window_start: datetime, window_end: datetime
    ) -> list[CalendarEvent]:
        """
        Active events of an owner touching [window_start, window_end].

        Regular events match on their start instant; multi-day events match
        when their interval overlaps the window.
        """
        return (
            db.query(CalendarEvent)
            .filter(
                CalendarEvent.owner_id == owner_id,
                CalendarEvent.status == "active",
                or_(
                    and_(
                        CalendarEvent.is_multi_day.is_(False),
                        CalendarEvent.start_datetime >= window_start,
                        CalendarEvent.start_datetime <= window_end,
                    ),
                    and_(
                        CalendarEvent.is_multi_day.is_(True),
                        CalendarEvent.start_datetime <= window_end,
                        CalendarEvent.end_datetime >= window_start,
                    ),
                ),
            )
            .order_by(CalendarEvent.start_datetime, CalendarEvent.id)
            .all()
        )

    @staticmethod
    def create_event(db: Session, **event_data) -> CalendarEvent:
        event = CalendarEvent(**event_data)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_event(db: Session, event: CalendarEvent, **updates) -> CalendarEvent:
        for key, value in updates.items():
            setattr(event, key, value)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, event: CalendarEvent) -> None:
        db.delete(event)
        db.commit()
