import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .cache import IdentityCache
from .config import SESSION_COOKIE_NAME, SESSION_TTL_HOURS
from .database import get_db
from .errors import ForbiddenError, UnauthorizedError
from .models import User
from .security_utils import decode_session_token, encode_session_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Snapshot of the authenticated identity, safe to keep in the identity cache"""

    id: int
    role: str
    username: str
    firstName: str = ""
    lastName: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.firstName} {self.lastName}".strip()

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(
            id=user.id,
            role=user.role,
            username=user.username,
            firstName=user.first_name or "",
            lastName=user.last_name or "",
        )


def create_session_token(user: User) -> str:
    """Issue a signed session token for a user"""
    return encode_session_token(
        {"sub": str(user.id), "role": user.role, "username": user.username},
        timedelta(hours=SESSION_TTL_HOURS),
    )


def get_identity_cache(request: Request) -> Optional[IdentityCache]:
    return getattr(request.app.state, "identity_cache", None)


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


def resolve_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
) -> Optional[CurrentUser]:
    """Resolve the session into a CurrentUser, or None when there is no valid session"""
    token = _extract_token(request, credentials)
    if not token:
        return None

    payload = decode_session_token(token)
    if not payload or not payload.get("sub"):
        return None

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        logger.warning("⚠️ Session token carries a non-numeric subject")
        return None

    cache = get_identity_cache(request)
    if cache is not None:
        cached = cache.get(user_id)
        if cached is not None:
            return cached

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Session refers to missing user {user_id}")
        return None

    current = CurrentUser.from_user(user)
    if cache is not None:
        cache.set(user_id, current)
    return current


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Get current user from the bearer token or session cookie"""
    current = resolve_current_user(request, credentials, db)
    if current is None:
        raise UnauthorizedError("Not authenticated")
    logger.debug(f"✅ User authenticated: {current.username}")
    return current


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[CurrentUser]:
    return resolve_current_user(request, credentials, db)


async def require_agent(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role != "agent":
        logger.warning(f"⚠️ User {user.id} ({user.role}) attempted an agent-only route")
        raise ForbiddenError("Agent access required")
    return user


async def require_client(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role != "client":
        logger.warning(f"⚠️ User {user.id} ({user.role}) attempted a client-only route")
        raise ForbiddenError("Client access required")
    return user
