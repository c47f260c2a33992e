"""Account domain schemas - Pydantic models for validation"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_required_text


class RegisterRequest(BaseModel):
    email: str
    password: str
    registrationCode: str
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return validate_required_text(v, "password")


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    """Schema for the authenticated user"""

    id: int
    username: str
    role: str
    firstName: str
    lastName: str
    name: str
    avatarUrl: Optional[str] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class SessionResponse(BaseModel):
    user: Optional[UserResponse] = None


class ProfileName(BaseModel):
    first: str
    last: str = ""

    @field_validator("first")
    @classmethod
    def validate_first(cls, v):
        return validate_required_text(v, "first name").strip()

    @field_validator("last")
    @classmethod
    def validate_last(cls, v):
        return (v or "").strip()


class ProfileUpdate(BaseModel):
    """Client profile update; at least one of name or profile must be given"""

    name: Optional[ProfileName] = None
    profile: Optional[dict[str, Any]] = None


class ProfileResponse(BaseModel):
    id: int
    username: str
    firstName: str
    lastName: str
    name: str
    avatarUrl: Optional[str] = None
    profile: dict[str, Any] = {}
