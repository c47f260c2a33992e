"""Invitation domain schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_required_text
from ...utils.time_conversion import UtcDateTime


class InviteRequest(BaseModel):
    email: str
    name: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        validate_required_text(v, "email")
        return validate_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, "name")


class InviteResponse(BaseModel):
    clientId: int
    representationId: int
    isNewClient: bool
    magicLink: Optional[str] = None


class InviteListEntry(BaseModel):
    representationId: int
    clientId: int
    clientName: str
    username: str
    status: str
    createdAt: UtcDateTime
