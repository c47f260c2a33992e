"""Account service - registration, credential checks, whitelist and client profiles"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...cache import IdentityCache
from ...errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from ...models import User, WhitelistedEmail
from ...security_utils import hash_password, registration_code_matches, verify_password
from ...shared.validators import split_display_name
from ..representations.service import RepresentationService
from .repository import AccountRepository
from .schemas import ProfileUpdate, RegisterRequest

logger = logging.getLogger(__name__)

USER_ROLES = ("agent", "client")


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session, identity_cache: Optional[IdentityCache] = None):
        self.db = db
        self.repo = AccountRepository()
        self.identity_cache = identity_cache

    def _invalidate(self, user_id: int) -> None:
        if self.identity_cache is not None:
            self.identity_cache.invalidate(user_id)

    # ------------------------------------------------------------------
    # Whitelist & provisioning
    # ------------------------------------------------------------------

    def add_whitelisted_email(
        self, email: str, user_type: str, registration_code: str
    ) -> WhitelistedEmail:
        """Allow an email to self-register with the given role and code"""
        if user_type not in USER_ROLES:
            raise InvalidInputError(f"Unknown user type: {user_type}")
        entry = self.repo.upsert_whitelisted(self.db, email, user_type, registration_code)
        logger.info(f"📋 Whitelisted {email} as {user_type}")
        return entry

    def get_client_by_username(self, username: str) -> Optional[User]:
        user = self.repo.get_user_by_username(self.db, username)
        if user and user.role == "client":
            return user
        return None

    def provision_client(self, email: str, display_name: str) -> User:
        """
        Create a password-less client identity for an invited email.

        Raises:
            ConflictError: the email already belongs to an identity
        """
        existing = self.repo.get_user_by_username(self.db, email)
        if existing:
            logger.warning(f"⚠️ Cannot provision client {email}: identity exists as {existing.role}")
            raise ConflictError(f"An account already exists for {email}")

        first_name, last_name = split_display_name(display_name)
        user = self.repo.create_user(
            self.db,
            username=email,
            role="client",
            first_name=first_name,
            last_name=last_name,
            password_hash=None,
        )
        logger.info(f"🆕 Provisioned client identity {user.id} for {email}")
        return user

    # ------------------------------------------------------------------
    # Registration & login
    # ------------------------------------------------------------------

    def register(self, data: RegisterRequest) -> User:
        """Complete registration of a whitelisted email"""
        entry = self.repo.get_whitelisted(self.db, data.email)
        if not entry:
            logger.warning(f"⚠️ Registration rejected, {data.email} is not whitelisted")
            raise ForbiddenError("Email is not whitelisted for registration")

        if not registration_code_matches(data.registrationCode, entry.registration_code):
            logger.warning(f"⚠️ Registration rejected, bad code for {data.email}")
            raise InvalidInputError("Invalid registration code")

        names = {}
        if data.name and data.name.strip():
            first_name, last_name = split_display_name(data.name)
            names = {"first_name": first_name, "last_name": last_name}

        user = self.repo.get_user_by_username(self.db, data.email)
        if user and user.password_hash:
            raise ConflictError("User already exists")

        if user:
            user = self.repo.update_user(
                self.db, user, password_hash=hash_password(data.password), **names
            )
        else:
            user = self.repo.create_user(
                self.db,
                username=data.email,
                role=entry.user_type,
                password_hash=hash_password(data.password),
                **names,
            )
        logger.info(f"✅ User {user.id} registered as {user.role}")

        if user.role == "client":
            RepresentationService(self.db).activate_pending_for_client(user.id, user.id)

        self._invalidate(user.id)
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.repo.get_user_by_username(self.db, username)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {username}")
            raise UnauthorizedError("Invalid username or password")
        logger.info(f"🔑 User {user.id} logged in")
        return user

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        """Update name and/or free-form profile fields"""
        if data.name is None and data.profile is None:
            raise InvalidInputError("Provide a name or profile to update")

        user = self.get_user(user_id)
        updates = {}
        if data.name is not None:
            updates["first_name"] = data.name.first
            updates["last_name"] = data.name.last
        if data.profile is not None:
            merged = dict(user.profile or {})
            merged.update(data.profile)
            updates["profile"] = merged

        user = self.repo.update_user(self.db, user, **updates)
        self._invalidate(user_id)
        logger.info(f"✅ Profile updated for user {user_id}")
        return user
