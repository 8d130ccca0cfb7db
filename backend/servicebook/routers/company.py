# backend/servicebook/routers/company.py
# Reads: any authenticated user. Writes: super admin. DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_principal, require_roles
from ..enums import Role
from ..models import Company as DBCompany
from ..schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyRead,
)

router = APIRouter(prefix="/company", tags=["company"])

super_admin_only = Depends(require_roles(Role.SUPER_ADMIN))


def _ensure_unique_slug(db: Session, slug: str, exclude_id: int | None = None) -> None:
    query = db.query(DBCompany).filter(DBCompany.slug == slug)
    if exclude_id is not None:
        query = query.filter(DBCompany.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Company with slug '{slug}' already exists",
        )


@router.get("/", response_model=list[CompanyRead], dependencies=[Depends(get_principal)])
def list_companies(db: Session = Depends(get_db)):
    return (
        db.query(DBCompany)
        .filter(DBCompany.is_active == 1)
        .order_by(DBCompany.id)
        .all()
    )


@router.get("/{id}", response_model=CompanyRead, dependencies=[Depends(get_principal)])
def get_company(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBCompany, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/",
    response_model=CompanyRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[super_admin_only],
)
def create_company(
    data: CompanyCreate,
    db: Session = Depends(get_db),
):
    _ensure_unique_slug(db, data.slug)

    obj = DBCompany(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=CompanyRead, dependencies=[super_admin_only])
def update_company(
    id: int,
    data: CompanyUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBCompany, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "slug" in updates:
        _ensure_unique_slug(db, updates["slug"], exclude_id=id)

    if "is_active" in updates:
        updates["is_active"] = int(updates["is_active"])

    for field, value in updates.items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[super_admin_only])
def delete_company(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBCompany, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
