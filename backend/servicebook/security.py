# backend/servicebook/security.py
"""Password hashing and JWT issue/verify."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _secret_for(token_type: str) -> str:
    return settings.refresh_secret if token_type == REFRESH else settings.jwt_secret


def create_token(
    user_id: int,
    role: str,
    company_id: Optional[int],
    token_type: str = ACCESS,
    expires_delta: Optional[timedelta] = None,
) -> str:
    if expires_delta is None:
        minutes = (
            settings.refresh_expires_minutes if token_type == REFRESH
            else settings.jwt_expires_minutes
        )
        expires_delta = timedelta(minutes=minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "company_id": company_id,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.jwt_algorithm)


def decode_token(token: str, token_type: str = ACCESS) -> Optional[dict[str, Any]]:
    """Return the payload, or None if the token is invalid, expired or of the wrong type."""
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None

    if payload.get("type") != token_type:
        return None
    return payload
