"""Invitation service - onboards new or existing clients under an agent"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from ...config import CLIENT_URL, DEFAULT_COMMISSION, DEFAULT_MEDIA_TYPES, DEFAULT_TERRITORIES
from ...models import Representation
from ...security_utils import generate_registration_code
from ..accounts.service import AccountService
from ..representations.service import RepresentationService

logger = logging.getLogger(__name__)

INVITATION_NOTE = "Representation created via invitation"


def default_terms() -> dict:
    return {
        "commission": DEFAULT_COMMISSION,
        "exclusivity": False,
        "territories": list(DEFAULT_TERRITORIES),
        "mediaTypes": list(DEFAULT_MEDIA_TYPES),
    }


def build_magic_link(email: str, registration_code: str) -> str:
    query = urlencode({"email": email, "code": registration_code})
    return f"{CLIENT_URL}/register?{query}"


@dataclass
class InvitationResult:
    client_id: int
    representation_id: int
    is_new_client: bool
    magic_link: Optional[str] = None


class InvitationService:
    """Composes account provisioning with representation creation"""

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountService(db)
        self.representations = RepresentationService(db)

    def invite(self, agent_id: int, email: str, display_name: str) -> InvitationResult:
        """
        Invite a client by email.

        Existing client identities are reused without a magic link. Unknown
        emails are whitelisted with a fresh registration code and provisioned
        as password-less clients. A pending representation is always created;
        earlier steps are not rolled back if a later one fails.
        """
        client = self.accounts.get_client_by_username(email)
        registration_code = None

        if client is None:
            client = self.accounts.provision_client(email, display_name)
            registration_code = generate_registration_code()
            self.accounts.add_whitelisted_email(email, "client", registration_code)
            is_new_client = True
        else:
            is_new_client = False

        representation = self.representations.create(
            agent_id,
            client.id,
            terms=default_terms(),
            notes=INVITATION_NOTE,
            created_by=agent_id,
        )

        magic_link = build_magic_link(email, registration_code) if registration_code else None
        logger.info(
            f"📨 Agent {agent_id} invited {email} "
            f"({'new' if is_new_client else 'existing'} client {client.id})"
        )
        return InvitationResult(
            client_id=client.id,
            representation_id=representation.id,
            is_new_client=is_new_client,
            magic_link=magic_link,
        )

    def list_invites(self, agent_id: int) -> list[Representation]:
        """Every representation of the agent, newest first"""
        return self.representations.get_roster(agent_id, include_inactive=True)
