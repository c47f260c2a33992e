"""Representation router - roster endpoints and connection lookups"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_agent, require_client
from ...database import get_db
from ...models import Representation, RepresentationEvent, User
from .schemas import (
    ActivityCreate,
    ClientSummary,
    ConnectionResponse,
    RepresentationEventResponse,
    RepresentationResponse,
    RepresentationUpdate,
    RosterEntryResponse,
)
from .service import RepresentationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roster", tags=["Roster"])
connections_router = APIRouter(prefix="/api", tags=["Connections"])


def get_representation_service(db: Session = Depends(get_db)) -> RepresentationService:
    """Dependency injection for RepresentationService"""
    return RepresentationService(db)


def build_client_summary(user: User) -> ClientSummary:
    return ClientSummary(
        id=user.id,
        username=user.username,
        firstName=user.first_name or "",
        lastName=user.last_name or "",
        name=user.display_name,
        avatarUrl=user.avatar_url,
        profile=user.profile,
    )


def build_representation_response(rep: Representation) -> RepresentationResponse:
    return RepresentationResponse(
        id=rep.id,
        agentId=rep.agent_id,
        clientId=rep.client_id,
        status=rep.status,
        startDate=rep.start_date,
        endDate=rep.end_date,
        nextKeyDate=rep.next_key_date,
        notes=rep.notes,
        terms=rep.terms,
        createdAt=rep.created_at,
        updatedAt=rep.updated_at,
    )


def build_event_response(event: RepresentationEvent) -> RepresentationEventResponse:
    return RepresentationEventResponse(
        id=event.id,
        representationId=event.representation_id,
        type=event.type,
        title=event.title,
        description=event.description or "",
        date=event.date,
        location=event.location,
        changes=event.changes,
        createdBy=event.created_by,
        createdAt=event.created_at,
    )


# ============================================================================
# ROSTER
# ============================================================================


@router.get("", response_model=list[RosterEntryResponse])
async def get_roster(
    includeInactive: bool = Query(False),
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Get the agent's roster (pending and inactive entries only on request)"""
    roster = service.get_roster(current_user.id, include_inactive=includeInactive)
    return [
        RosterEntryResponse(
            **build_representation_response(rep).model_dump(),
            client=build_client_summary(rep.client),
        )
        for rep in roster
    ]


@router.put("/{representation_id}", response_model=RepresentationResponse)
async def update_representation(
    representation_id: int,
    data: RepresentationUpdate,
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Update status, next key date, notes or terms of a representation"""
    service.get_owned_representation(representation_id, current_user.id)
    rep = service.update(representation_id, data, current_user.id)
    return build_representation_response(rep)


@router.delete("/{representation_id}", status_code=204)
async def archive_representation(
    representation_id: int,
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Archive a representation (status becomes inactive)"""
    service.get_owned_representation(representation_id, current_user.id)
    service.archive(representation_id, current_user.id)
    return Response(status_code=204)


@router.get("/{representation_id}/events", response_model=list[RepresentationEventResponse])
async def get_representation_events(
    representation_id: int,
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Audit trail of a representation, most recent first"""
    service.get_owned_representation(representation_id, current_user.id)
    return [build_event_response(e) for e in service.get_events(representation_id)]


@router.post("/{representation_id}/events", response_model=RepresentationEventResponse)
async def log_representation_activity(
    representation_id: int,
    data: ActivityCreate,
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Log a meeting, call, submission or other activity"""
    service.get_owned_representation(representation_id, current_user.id)
    event = service.log_activity(representation_id, data, current_user.id)
    return build_event_response(event)


# ============================================================================
# CONNECTIONS
# ============================================================================


@connections_router.get("/client/agents", response_model=list[ConnectionResponse])
async def get_connected_agents(
    current_user: CurrentUser = Depends(require_client),
    service: RepresentationService = Depends(get_representation_service),
):
    """Agents actively representing the current client"""
    return [
        ConnectionResponse(id=u.id, name=u.display_name or u.username)
        for u in service.get_connected_agents(current_user.id)
    ]


@connections_router.get("/agent/clients", response_model=list[ConnectionResponse])
async def get_connected_clients(
    current_user: CurrentUser = Depends(require_agent),
    service: RepresentationService = Depends(get_representation_service),
):
    """Clients actively represented by the current agent"""
    return [
        ConnectionResponse(id=u.id, name=u.display_name or u.username)
        for u in service.get_connected_clients(current_user.id)
    ]
