from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Representation lifecycle: pending → active/on_set/away/on_hold → inactive (terminal)
REPRESENTATION_STATUSES = ("pending", "active", "on_set", "away", "on_hold", "inactive")

REPRESENTATION_EVENT_TYPES = (
    "created",
    "updated",
    "status_changed",
    "terms_updated",
    "archived",
    "ended",
    "meeting",
    "call",
    "email",
    "submission",
    "audition",
    "other",
)

TODO_STATUSES = ("todo", "doing", "done")

CALENDAR_EVENT_TYPES = (
    "booked_out",
    "on_set",
    "episode_airing",
    "premiere",
    "callback",
    "audition",
    "class_workshop",
    "agency_meeting",
    "availability_hold",
    "pinned",
    "deadline",
    "other",
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Login identity; compared exactly, never case-folded
    username = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(20), nullable=False, index=True)  # agent, client
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    password_hash = Column(String(255), nullable=True)  # null until the invite is accepted
    avatar_url = Column(String(500), nullable=True)
    profile = Column(JSON, nullable=True)  # measurements, physical attributes, contact info
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class WhitelistedEmail(Base):
    __tablename__ = "whitelisted_emails"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    user_type = Column(String(20), nullable=False)  # agent, client
    registration_code = Column(String(64), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Representation(Base):
    __tablename__ = "representations"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    next_key_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    # {commission, exclusivity, territories, mediaTypes}
    terms = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    agent = relationship("User", foreign_keys=[agent_id])
    client = relationship("User", foreign_keys=[client_id])
    events = relationship("RepresentationEvent", back_populates="representation")


class RepresentationEvent(Base):
    """Append-only audit record; rows are never updated or deleted"""

    __tablename__ = "representation_events"

    id = Column(Integer, primary_key=True, index=True)
    representation_id = Column(
        Integer, ForeignKey("representations.id"), nullable=False, index=True
    )
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=False, index=True)
    location = Column(String(500), nullable=True)
    # [{field, oldValue, newValue}]
    changes = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False)

    representation = relationship("Representation", back_populates="events")


class CalendarEvent(Base):
    __tablename__ = "calendar_events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    # Stored as naive UTC instants
    start_datetime = Column(DateTime, nullable=False, index=True)
    end_datetime = Column(DateTime, nullable=False, index=True)
    is_multi_day = Column(Boolean, default=False, nullable=False)
    location = Column(String(500), nullable=True)
    type = Column(String(30), default="other", nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    visibility_type = Column(String(20), default="private", nullable=False)  # private, selected_agents
    visibility_agent_ids = Column(JSON, nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)  # active, deleted
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class Todo(Base):
    """Personal task list entry; visible to its owner only"""

    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    due_date = Column(DateTime, nullable=False)  # naive UTC
    status = Column(String(10), default="todo", nullable=False)  # todo, doing, done
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
