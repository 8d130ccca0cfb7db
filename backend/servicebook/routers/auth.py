# backend/servicebook/routers/auth.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user
from ..enums import Role
from ..models import User as DBUser
from ..schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from ..schemas.users import UserRead
from ..security import REFRESH, create_token, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Customer self-registration."""
    if db.query(DBUser).filter(DBUser.email == data.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    user = DBUser(
        email=data.email,
        password_hash=hash_password(data.password),
        role=Role.CUSTOMER.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Customer registered: user_id={user.id}")
    return user


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(DBUser).filter(DBUser.email == data.email).first()
    if not user or not user.is_active or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(
        access_token=create_token(user.id, user.role, user.company_id),
        refresh_token=create_token(user.id, user.role, user.company_id, token_type=REFRESH),
        user=UserRead.model_validate(user),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(data: RefreshRequest, db: Session = Depends(get_db)):
    payload = decode_token(data.refresh_token, REFRESH)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.get(DBUser, int(payload["sub"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    return TokenResponse(
        access_token=create_token(user.id, user.role, user.company_id),
        user=UserRead.model_validate(user),
    )


@router.get("/me", response_model=UserRead)
def me(user: DBUser = Depends(get_current_user)):
    return user
