"""Account router - session endpoints and client profile"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ...auth import (
    CurrentUser,
    create_session_token,
    get_identity_cache,
    get_optional_user,
    require_client,
)
from ...config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_HOURS
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])
profile_router = APIRouter(prefix="/api/client", tags=["Client Profile"])

login_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
register_rate_limit = create_rate_limiter(limit=5, window_seconds=60, key_prefix="register")


def get_account_service(request: Request, db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db, identity_cache=get_identity_cache(request))


def build_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        role=user.role,
        firstName=user.first_name or "",
        lastName=user.last_name or "",
        name=user.display_name,
        avatarUrl=user.avatar_url,
    )


def build_profile_response(user: User) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        username=user.username,
        firstName=user.first_name or "",
        lastName=user.last_name or "",
        name=user.display_name,
        avatarUrl=user.avatar_url,
        profile=user.profile or {},
    )


def _start_session(response: Response, user: User) -> AuthResponse:
    token = create_session_token(user)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return AuthResponse(user=build_user_response(user), token=token)


# ============================================================================
# AUTH
# ============================================================================


@router.post("/register", response_model=AuthResponse)
async def register(
    data: RegisterRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(register_rate_limit),
):
    """Register a whitelisted email with its registration code"""
    user = service.register(data)
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(login_rate_limit),
):
    user = service.authenticate(data.username, data.password)
    return _start_session(response, user)


@router.get("/session", response_model=SessionResponse)
async def get_session(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    service: AccountService = Depends(get_account_service),
):
    """Current session user, or null when not signed in"""
    if current_user is None:
        return SessionResponse(user=None)
    return SessionResponse(user=build_user_response(service.get_user(current_user.id)))


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    return {"success": True}


# ============================================================================
# CLIENT PROFILE
# ============================================================================


@profile_router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: CurrentUser = Depends(require_client),
    service: AccountService = Depends(get_account_service),
):
    return build_profile_response(service.get_user(current_user.id))


@profile_router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser = Depends(require_client),
    service: AccountService = Depends(get_account_service),
):
    """Update the client's name and/or physical and contact details"""
    return build_profile_response(service.update_profile(current_user.id, data))
