"""Representation service - lifecycle, change diffing and audit events"""

import copy
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from ...errors import ForbiddenError, InvalidStatusTransitionError, NotFoundError
from ...models import Representation, RepresentationEvent, User
from ...utils.time_conversion import isoformat_utc, to_storage, utcnow
from .repository import RepresentationRepository
from .schemas import ActivityCreate, RepresentationUpdate, TermsSchema

logger = logging.getLogger(__name__)


def _audit_value(value: Any) -> Any:
    """Detached JSON-safe copy of a field value for the change list"""
    if isinstance(value, datetime):
        return isoformat_utc(value)
    return copy.deepcopy(value)


def _change(field: str, old_value: Any, new_value: Any) -> dict:
    return {"field": field, "oldValue": _audit_value(old_value), "newValue": _audit_value(new_value)}


class RepresentationService:
    """Service layer owning every mutation of a representation and its audit trail"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RepresentationRepository()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_representation(self, representation_id: int) -> Representation:
        representation = self.repo.get_by_id(self.db, representation_id)
        if not representation:
            raise NotFoundError(f"Representation {representation_id} not found")
        return representation

    def get_owned_representation(self, representation_id: int, agent_id: int) -> Representation:
        """Fetch a representation, rejecting agents that do not own it"""
        representation = self.get_representation(representation_id)
        if representation.agent_id != agent_id:
            logger.warning(
                f"⚠️ Agent {agent_id} attempted to access representation {representation_id}"
            )
            raise ForbiddenError("You do not own this representation")
        return representation

    def get_roster(self, agent_id: int, include_inactive: bool = False) -> list[Representation]:
        return self.repo.get_for_agent(self.db, agent_id, include_inactive)

    def get_client_representations(self, client_id: int) -> list[Representation]:
        return self.repo.get_for_client(self.db, client_id)

    def get_events(self, representation_id: int) -> list[RepresentationEvent]:
        self.get_representation(representation_id)
        return self.repo.get_events(self.db, representation_id)

    def get_connected_agents(self, client_id: int) -> list[User]:
        return self.repo.get_connected_agents(self.db, client_id)

    def get_connected_clients(self, agent_id: int) -> list[User]:
        return self.repo.get_connected_clients(self.db, agent_id)

    def has_active_representation(self, agent_id: int, client_id: int) -> bool:
        return self.repo.has_active_representation(self.db, agent_id, client_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self,
        agent_id: int,
        client_id: int,
        terms: Optional[dict] = None,
        notes: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> Representation:
        """
        Create a pending representation and its ``created`` event.

        Duplicate (agent, client) pairs are allowed.
        """
        now = utcnow()
        creator = created_by if created_by is not None else agent_id
        representation = Representation(
            agent_id=agent_id,
            client_id=client_id,
            status="pending",
            start_date=now,
            notes=notes,
            terms=copy.deepcopy(terms) if terms is not None else None,
            created_at=now,
            updated_at=now,
        )
        event = RepresentationEvent(
            type="created",
            title="Representation created",
            description=notes or "",
            date=now,
            created_by=creator,
            created_at=now,
        )
        representation = self.repo.create(self.db, representation, event)
        logger.info(
            f"✅ Representation {representation.id} created: agent {agent_id} → client {client_id}"
        )
        return representation

    def update(
        self, representation_id: int, data: RepresentationUpdate, updated_by: int
    ) -> Representation:
        """
        Apply the fields present in ``data`` that differ from the stored record.

        Writes only the changed subset and appends a single event
        (``status_changed`` when status is among the changes, ``updated``
        otherwise). Returns the record untouched with no event when nothing
        differs.
        """
        representation = self.get_representation(representation_id)
        proposed = data.model_fields_set
        updates: dict[str, Any] = {}
        changes: list[dict] = []

        if "status" in proposed and data.status is not None and data.status != representation.status:
            if representation.status == "inactive":
                raise InvalidStatusTransitionError(
                    f"Representation {representation_id} is inactive and cannot become {data.status}"
                )
            changes.append(_change("status", representation.status, data.status))
            updates["status"] = data.status

        if "nextKeyDate" in proposed:
            new_key_date = to_storage(data.nextKeyDate)
            if new_key_date != representation.next_key_date:
                changes.append(_change("nextKeyDate", representation.next_key_date, new_key_date))
                updates["next_key_date"] = new_key_date

        if "notes" in proposed and data.notes != representation.notes:
            changes.append(_change("notes", representation.notes, data.notes))
            updates["notes"] = data.notes

        if "terms" in proposed:
            new_terms = data.terms.model_dump() if data.terms is not None else None
            if new_terms != representation.terms:
                changes.append(_change("terms", representation.terms, new_terms))
                updates["terms"] = new_terms

        if not changes:
            logger.info(f"ℹ️ No changes for representation {representation_id}, skipping update")
            return representation

        now = utcnow()
        updates["updated_at"] = now
        changed_fields = [c["field"] for c in changes]
        if "status" in changed_fields:
            event_type = "status_changed"
            title = f"Status changed to {data.status}"
        else:
            event_type = "updated"
            title = "Representation updated"

        event = RepresentationEvent(
            representation_id=representation.id,
            type=event_type,
            title=title,
            description=f"Updated {', '.join(changed_fields)}",
            date=now,
            changes=changes,
            created_by=updated_by,
            created_at=now,
        )
        representation = self.repo.apply_changes(self.db, representation, updates, event)
        logger.info(
            f"✅ Representation {representation_id} updated by {updated_by}: {', '.join(changed_fields)}"
        )
        return representation

    def archive(self, representation_id: int, archived_by: int) -> Representation:
        """Move a representation to the terminal ``inactive`` status"""
        representation = self.get_representation(representation_id)
        if representation.status == "inactive":
            logger.info(f"ℹ️ Representation {representation_id} already inactive")
            return representation

        now = utcnow()
        changes = [
            _change("status", representation.status, "inactive"),
            _change("endDate", representation.end_date, now),
        ]
        event = RepresentationEvent(
            representation_id=representation.id,
            type="archived",
            title="Representation archived",
            description="",
            date=now,
            changes=changes,
            created_by=archived_by,
            created_at=now,
        )
        representation = self.repo.apply_changes(
            self.db,
            representation,
            {"status": "inactive", "end_date": now, "updated_at": now},
            event,
        )
        logger.info(f"🗄️ Representation {representation_id} archived by {archived_by}")
        return representation

    def change_status(self, representation_id: int, status: str, updated_by: int) -> Representation:
        return self.update(representation_id, RepresentationUpdate(status=status), updated_by)

    def update_terms(
        self, representation_id: int, terms: TermsSchema, updated_by: int
    ) -> Representation:
        return self.update(representation_id, RepresentationUpdate(terms=terms), updated_by)

    def end_representation(self, representation_id: int, ended_by: int) -> Representation:
        return self.archive(representation_id, ended_by)

    def log_activity(
        self, representation_id: int, data: ActivityCreate, created_by: int
    ) -> RepresentationEvent:
        """Append a manually logged activity (meeting, call, ...) to the trail"""
        self.get_representation(representation_id)
        now = utcnow()
        event = RepresentationEvent(
            representation_id=representation_id,
            type=data.type,
            title=data.title,
            description=data.description or "",
            date=to_storage(data.date) or now,
            location=data.location,
            created_by=created_by,
            created_at=now,
        )
        event = self.repo.add_event(self.db, event)
        logger.info(f"📝 Activity '{data.type}' logged on representation {representation_id}")
        return event

    def activate_pending_for_client(self, client_id: int, activated_by: int) -> list[Representation]:
        """Activate every pending representation of a client that just registered"""
        activated = []
        for representation in self.repo.get_for_client(self.db, client_id, status="pending"):
            activated.append(self.change_status(representation.id, "active", activated_by))
        if activated:
            logger.info(f"✅ Activated {len(activated)} pending representation(s) for client {client_id}")
        return activated
