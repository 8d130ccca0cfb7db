# backend/servicebook/routers/users.py
# Super admin only. DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_roles
from ..enums import Role
from ..models import Company as DBCompany, User as DBUser
from ..schemas.users import (
    UserCreate,
    UserUpdate,
    UserRead,
)
from ..security import hash_password

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.SUPER_ADMIN))],
)


def _ensure_company(db: Session, company_id: int | None) -> None:
    if company_id is not None and not db.get(DBCompany, company_id):
        raise HTTPException(status_code=404, detail="Company not found")


@router.get("/", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db)):
    return (
        db.query(DBUser)
        .filter(DBUser.is_active == 1)
        .order_by(DBUser.id)
        .all()
    )


@router.get("/{id}", response_model=UserRead)
def get_user(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBUser, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
):
    if db.query(DBUser).filter(DBUser.email == data.email).first():
        raise HTTPException(status_code=409, detail="User with this email already exists")
    _ensure_company(db, data.company_id)

    obj = DBUser(
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role.value,
        company_id=data.company_id,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=UserRead)
def update_user(
    id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBUser, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    updates = data.model_dump(exclude_unset=True)
    if "company_id" in updates:
        _ensure_company(db, updates["company_id"])
    if "role" in updates:
        role = updates.pop("role")
        if role is not None:
            updates["role"] = role.value

    if updates.get("is_active") is None:
        updates.pop("is_active", None)
    else:
        updates["is_active"] = int(updates["is_active"])

    for field, value in updates.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBUser, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
