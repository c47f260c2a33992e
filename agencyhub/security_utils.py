"""
Credential primitives for AgencyHub: bcrypt password hashes, signed session
tokens and the one-time registration codes carried by invitation links.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext

from .config import SECRET_KEY

logger = logging.getLogger(__name__)

SESSION_TOKEN_ALGORITHM = "HS256"
REGISTRATION_CODE_BYTES = 12

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Invited clients that never registered have no hash and cannot log in"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"❌ Stored password hash is unusable: {e}")
        return False


def generate_registration_code() -> str:
    return secrets.token_hex(REGISTRATION_CODE_BYTES)


def registration_code_matches(supplied: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison of a submitted code against the whitelisted one"""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())


def encode_session_token(claims: dict[str, Any], ttl: timedelta) -> str:
    """Sign ``claims`` with an ``exp`` of now + ``ttl``"""
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + ttl
    return jose_jwt.encode(payload, SECRET_KEY, algorithm=SESSION_TOKEN_ALGORITHM)


def decode_session_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode a session token.

    Returns:
        The claims, or None when the signature is bad or the token expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[SESSION_TOKEN_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Rejected session token: {e}")
        return None
