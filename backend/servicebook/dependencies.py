# backend/servicebook/dependencies.py

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis import Redis
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .enums import Role
from .models import User as DBUser
from .redis_client import get_redis
from .security import ACCESS, decode_token
from .services.access_policy import Principal
from .services.bookings import BookingService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def principal_from_user(user: DBUser) -> Principal:
    is_platform_admin = (
        user.role == Role.COMPANY_ADMIN.value
        and user.company is not None
        and user.company.slug == settings.platform_company_slug
    )
    return Principal(
        user_id=user.id,
        role=Role(user.role),
        company_id=user.company_id,
        email=user.email,
        is_platform_admin=is_platform_admin,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> DBUser:
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    payload = decode_token(credentials.credentials, ACCESS)
    if not payload:
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token subject") from None

    user = db.get(DBUser, user_id)
    if not user or not user.is_active:
        raise _unauthorized()
    return user


def get_principal(user: DBUser = Depends(get_current_user)) -> Principal:
    return principal_from_user(user)


def require_roles(*roles: Role):
    """Role guard: the caller's role must be one of `roles`."""
    allowed = frozenset(roles)

    def guard(principal: Principal = Depends(get_principal)) -> Principal:
        if principal.role not in allowed:
            logger.warning(
                f"Role guard denied user_id={principal.user_id} role={principal.role.value}"
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return principal

    return guard


def get_booking_service(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
) -> BookingService:
    return BookingService(db, redis)
