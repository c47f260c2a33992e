"""Invitation router"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_agent
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import InviteListEntry, InviteRequest, InviteResponse
from .service import InvitationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invites", tags=["Invites"])

invite_rate_limit = create_rate_limiter(limit=30, window_seconds=60, key_prefix="invite")


def get_invitation_service(db: Session = Depends(get_db)) -> InvitationService:
    return InvitationService(db)


@router.post("", response_model=InviteResponse)
async def invite_client(
    data: InviteRequest,
    current_user: CurrentUser = Depends(require_agent),
    service: InvitationService = Depends(get_invitation_service),
    _: None = Depends(invite_rate_limit),
):
    """Invite a new or existing client to be represented by the current agent"""
    result = service.invite(current_user.id, data.email, data.name)
    return InviteResponse(
        clientId=result.client_id,
        representationId=result.representation_id,
        isNewClient=result.is_new_client,
        magicLink=result.magic_link,
    )


@router.get("", response_model=list[InviteListEntry])
async def list_invites(
    current_user: CurrentUser = Depends(require_agent),
    service: InvitationService = Depends(get_invitation_service),
):
    return [
        InviteListEntry(
            representationId=rep.id,
            clientId=rep.client_id,
            clientName=rep.client.display_name,
            username=rep.client.username,
            status=rep.status,
            createdAt=rep.created_at,
        )
        for rep in service.list_invites(current_user.id)
    ]
