"""Representation repository - Database operations for representations and their audit trail"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Representation, RepresentationEvent, User

ROSTER_HIDDEN_STATUSES = ("pending", "inactive")


class RepresentationRepository:
    """Repository for representation database operations"""

    @staticmethod
    def get_by_id(db: Session, representation_id: int) -> Optional[Representation]:
        return db.query(Representation).filter(Representation.id == representation_id).first()

    @staticmethod
    def create(db: Session, representation: Representation, event: RepresentationEvent) -> Representation:
        """Persist a new representation together with its creation event"""
        db.add(representation)
        db.flush()
        event.representation_id = representation.id
        db.add(event)
        db.commit()
        db.refresh(representation)
        return representation

    @staticmethod
    def apply_changes(
        db: Session,
        representation: Representation,
        updates: dict,
        event: RepresentationEvent,
    ) -> Representation:
        """Write the changed subset of fields and append one audit event"""
        for key, value in updates.items():
            setattr(representation, key, value)
        db.add(event)
        db.commit()
        db.refresh(representation)
        return representation

    @staticmethod
    def add_event(db: Session, event: RepresentationEvent) -> RepresentationEvent:
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def get_for_agent(
        db: Session, agent_id: int, include_inactive: bool = False
    ) -> list[Representation]:
        """Get an agent's representations joined with the client identity"""
        query = (
            db.query(Representation)
            .options(joinedload(Representation.client))
            .filter(Representation.agent_id == agent_id)
        )
        if not include_inactive:
            query = query.filter(Representation.status.notin_(ROSTER_HIDDEN_STATUSES))
        return query.order_by(Representation.created_at.desc(), Representation.id.desc()).all()

    @staticmethod
    def get_for_client(db: Session, client_id: int, status: Optional[str] = None) -> list[Representation]:
        query = (
            db.query(Representation)
            .options(joinedload(Representation.agent))
            .filter(Representation.client_id == client_id)
        )
        if status:
            query = query.filter(Representation.status == status)
        return query.order_by(Representation.id).all()

    @staticmethod
    def get_events(db: Session, representation_id: int) -> list[RepresentationEvent]:
        """Audit events, most recent first"""
        return (
            db.query(RepresentationEvent)
            .filter(RepresentationEvent.representation_id == representation_id)
            .order_by(RepresentationEvent.date.desc(), RepresentationEvent.id.desc())
            .all()
        )

    @staticmethod
    def has_active_representation(db: Session, agent_id: int, client_id: int) -> bool:
        return (
            db.query(Representation.id)
            .filter(
                Representation.agent_id == agent_id,
                Representation.client_id == client_id,
                Representation.status == "active",
            )
            .first()
            is not None
        )

    @staticmethod
    def get_connected_agents(db: Session, client_id: int) -> list[User]:
        """Distinct agents with an active representation of the client"""
        agent_ids = db.query(Representation.agent_id).filter(
            Representation.client_id == client_id, Representation.status == "active"
        )
        return db.query(User).filter(User.id.in_(agent_ids)).order_by(User.id).all()

    @staticmethod
    def get_connected_clients(db: Session, agent_id: int) -> list[User]:
        """Distinct clients actively represented by the agent"""
        client_ids = db.query(Representation.client_id).filter(
            Representation.agent_id == agent_id, Representation.status == "active"
        )
        return db.query(User).filter(User.id.in_(client_ids)).order_by(User.id).all()
